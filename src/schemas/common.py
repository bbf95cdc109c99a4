from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Failure envelope shared by every /api/ot endpoint."""
    ok: bool = False
    error: str
