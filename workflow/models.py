"""Pydantic models for the access gate, pagination and loyalty rules."""

from enum import Enum
from typing import Generic, List, Literal, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")

LoyaltyStatus = Literal["bronze", "argent", "or"]


class GateState(str, Enum):
    """Lifecycle of the access gate. Cyclic, no terminal state."""

    UNAUTHENTICATED = "unauthenticated"
    VERIFYING = "verifying"
    AUTHORIZED = "authorized"


class PaginationState(BaseModel):
    """Cursor plus derived totals. Recomputed on every change, never persisted."""

    current_page: int = Field(ge=1, description="1-based page number")
    page_size: int = Field(gt=0, description="Items per page")
    total_items: int = Field(0, ge=0, description="Total items across all pages")
    total_pages: int = Field(1, ge=1, description="ceil(total_items / page_size), at least 1")


class PageResult(BaseModel, Generic[T]):
    """What a page-fetching function returns."""

    data: List[T] = Field(default_factory=list, description="Items of the requested page")
    total: int = Field(ge=0, description="Total items across all pages")


class PaginatedResult(BaseModel, Generic[T]):
    """A fetched page together with its pagination state."""

    data: List[T] = Field(default_factory=list, description="Items of the page")
    pagination: PaginationState = Field(description="Pagination state for this page")


class NextLevelInfo(BaseModel):
    """Progress of a client toward the next loyalty level."""

    next_level: Optional[LoyaltyStatus] = Field(None, description="Next loyalty status, None at the top level")
    points_needed: int = Field(0, ge=0, description="Points missing to reach the next level")
    progress: float = Field(0.0, ge=0.0, le=100.0, description="Progress percentage (0-100)")
