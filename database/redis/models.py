"""Pydantic models for records kept in the key-value store."""

from pydantic import BaseModel, Field


class AccessAuthorization(BaseModel):
    """Cached result of a successful access code verification.

    Stored as JSON: {"verified": true, "timestamp": 1718000000000}
    """

    verified: bool = Field(strict=True, description="Whether the access code was verified")
    timestamp: int = Field(description="Verification time in epoch milliseconds")
