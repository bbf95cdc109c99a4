"""Exception hierarchy for the OT copilot backend."""


class CopilotError(Exception):
    """Base exception for all copilot errors."""


class InputValidationError(CopilotError):
    """Raised when a required request field is missing or blank."""


class LLMError(CopilotError):
    """Base class for failures talking to, or understanding, the LLM provider."""


class LLMProviderError(LLMError):
    """Raised when the provider request fails (network, HTTP status, bad envelope)."""


class LLMResponseParseError(LLMError):
    """Raised when the completion content is present but is not valid JSON."""


class LLMTimeoutError(LLMError):
    """Raised when a completion call exceeds its time budget."""


class SchemaMismatchError(LLMError):
    """Raised when parsed JSON does not match the requested response schema."""

    def __init__(self, schema_name: str, detail: str):
        self.schema_name = schema_name
        self.detail = detail
        super().__init__(f"LLM response did not match schema '{schema_name}': {detail}")
