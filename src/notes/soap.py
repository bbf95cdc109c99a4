"""
SOAP Note Generation

Converts therapist shorthand (plus optional client context) into concise
clinical note bullets and a list of information still missing.
"""

import logging
from typing import Any, Optional

from src.exceptions import InputValidationError
from src.llm.base import SchemaCompletionClient
from src.llm.prompts import SOAP_NOTES_SYSTEM
from src.llm.structured import complete_validated
from src.schemas.llm_outputs import SOAP_NOTE_SCHEMA, SOAP_NOTE_SCHEMA_NAME, SoapResult

logger = logging.getLogger(__name__)


class SoapNoteOrchestrator:
    """Service for generating note bullets from shorthand."""

    def __init__(
        self,
        llm: SchemaCompletionClient,
        model: Optional[str] = None,
        call_timeout_seconds: Optional[float] = None,
    ):
        self.llm = llm
        self.model = model
        self.call_timeout_seconds = call_timeout_seconds

    async def generate(
        self,
        shorthand: Optional[str],
        client_context: Optional[Any] = None,
    ) -> dict[str, Any]:
        """
        Generate note bullets from shorthand.

        Blank shorthand is rejected before any LLM call is made.

        Returns:
            ``{"bullets": [...], "missing_info": [...]}`` as returned by the LLM

        Raises:
            InputValidationError: Shorthand missing or blank
            LLMError: Completion failed or returned the wrong shape
        """
        if shorthand is None or not shorthand.strip():
            raise InputValidationError("shorthand is required")

        logger.info(
            f"Generating SOAP note from {len(shorthand)} chars of shorthand "
            f"(context: {'no' if client_context is None else type(client_context).__name__})"
        )
        return await complete_validated(
            self.llm,
            system_prompt=SOAP_NOTES_SYSTEM,
            user_payload={"shorthand": shorthand, "clientContext": client_context},
            schema_name=SOAP_NOTE_SCHEMA_NAME,
            schema=SOAP_NOTE_SCHEMA,
            response_model=SoapResult,
            model=self.model,
            timeout=self.call_timeout_seconds,
        )
