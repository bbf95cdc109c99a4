"""Completion client protocol shared by the orchestrators."""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class SchemaCompletionClient(Protocol):
    """Anything that can run one schema-constrained chat completion.

    The client is payload-agnostic: it serializes ``user_payload`` to text and
    returns the decoded JSON object. Shape checks belong to the caller.
    """

    async def complete_json_schema(
        self,
        system_prompt: str,
        user_payload: Any,
        schema_name: str,
        schema: dict[str, Any],
        model: Optional[str] = None,
    ) -> dict[str, Any]:
        ...
