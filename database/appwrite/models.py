"""Pydantic models for document store payloads."""

from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field


class DocumentList(BaseModel):
    """A page of documents returned by the list endpoint."""

    total: int = Field(ge=0, description="Total number of documents matching the filters")
    documents: List[Dict[str, Any]] = Field(default_factory=list, description="Documents in this page")


class AccessCode(BaseModel):
    """Shared access code document. Read-only from the gate's perspective."""

    model_config = ConfigDict(extra="ignore")

    code: str = Field(min_length=1, description="Access code value")
