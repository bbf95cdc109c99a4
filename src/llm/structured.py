"""
Validated structured completions.

Wraps one ``complete_json_schema`` call with a time budget and a Pydantic
check of the parsed reply. A reply that does not fit the contract is an
error; it is never patched up.
"""

import asyncio
import logging
from typing import Any, Optional, Type

from pydantic import BaseModel, ValidationError

from src.exceptions import LLMTimeoutError, SchemaMismatchError
from src.llm.base import SchemaCompletionClient

logger = logging.getLogger(__name__)


def summarize_validation_error(error: ValidationError) -> str:
    """Field paths and messages only; input values may hold client text."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


async def complete_validated(
    llm: SchemaCompletionClient,
    system_prompt: str,
    user_payload: Any,
    schema_name: str,
    schema: dict[str, Any],
    response_model: Type[BaseModel],
    model: Optional[str] = None,
    timeout: Optional[float] = None,
) -> dict[str, Any]:
    """
    Run one schema-constrained completion and check its shape.

    Args:
        llm: Completion client
        system_prompt: Fixed system prompt for this call type
        user_payload: JSON-serializable payload sent as the user message
        schema_name: Schema identifier passed to the provider
        schema: JSON Schema the provider is asked to enforce
        response_model: Pydantic model the reply must satisfy
        model: Optional model override
        timeout: Seconds before the call is abandoned (None = no limit)

    Returns:
        The parsed reply, exactly as the provider returned it

    Raises:
        LLMTimeoutError: The call took longer than ``timeout``
        SchemaMismatchError: The reply does not match ``response_model``
        LLMError: Anything the client raises
    """
    call = llm.complete_json_schema(
        system_prompt=system_prompt,
        user_payload=user_payload,
        schema_name=schema_name,
        schema=schema,
        model=model,
    )
    try:
        result = await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise LLMTimeoutError(f"LLM call '{schema_name}' timed out after {timeout}s") from e

    if not isinstance(result, dict):
        raise SchemaMismatchError(schema_name, f"expected a JSON object, got {type(result).__name__}")

    try:
        response_model.model_validate(result)
    except ValidationError as e:
        raise SchemaMismatchError(schema_name, summarize_validation_error(e)) from e

    return result
