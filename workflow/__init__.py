"""Access gate, paginated queries and CRM business rules."""

from workflow.access_gate import AccessGate
from workflow.pagination import PaginatedQueryController, total_pages_for
from workflow.models import (
    GateState,
    PaginationState,
    PageResult,
    PaginatedResult,
    NextLevelInfo,
)

__all__ = [
    "AccessGate",
    "PaginatedQueryController",
    "total_pages_for",
    "GateState",
    "PaginationState",
    "PageResult",
    "PaginatedResult",
    "NextLevelInfo",
]
