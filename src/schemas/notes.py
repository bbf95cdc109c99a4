"""
Session Note Schemas

Pydantic schemas for turning therapist shorthand into note bullets.
"""

from pydantic import BaseModel, Field
from typing import Any, Optional

from src.schemas.llm_outputs import SoapResult


class SoapNotesRequest(BaseModel):
    """Body of POST /api/ot/soap_notes.

    ``shorthand`` is optional at the schema level so a missing value reaches
    the orchestrator and gets the same "shorthand is required" answer as a
    blank one.
    """
    shorthand: Optional[str] = None
    client_context: Optional[Any] = Field(None, alias="clientContext")

    class Config:
        populate_by_name = True


class SoapNotesResponse(BaseModel):
    ok: bool = True
    note: SoapResult
