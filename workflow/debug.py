"""Debug utilities for the access gate and paginated queries."""

import os
import json
from typing import Any, Dict
from workflow.models import GateState, PaginatedResult, PaginationState


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled.

    Returns:
        True if DEBUG environment variable is set to 'true' or '1'
    """
    debug = os.getenv("DEBUG", "false").lower()
    return debug in ("true", "1", "yes")


def print_gate_event(event: str, state: GateState) -> None:
    """Print an access gate transition.

    Args:
        event: What happened (code accepted, authorization reset, ...)
        state: Gate state after the event
    """
    if not is_debug_enabled():
        return

    icon = "🔓" if state == GateState.AUTHORIZED else "🔒"
    print(f"{icon} Access gate: {event} -> {state.value}")


def print_pagination_state(pagination: PaginationState, applied: bool = True) -> None:
    """Print the pagination state of a fetched page.

    Args:
        pagination: Pagination state of the page
        applied: False when the result was discarded as stale
    """
    if not is_debug_enabled():
        return

    print("\n" + "=" * 80)
    print("📄 PAGINATED QUERY RESULT" + ("" if applied else " (stale, not applied)"))
    print("=" * 80)
    print(f"Page:          {pagination.current_page} / {pagination.total_pages}")
    print(f"Page Size:     {pagination.page_size}")
    print(f"Total Items:   {pagination.total_items}")
    print("=" * 80 + "\n")


def print_page_documents(result: PaginatedResult, label_field: str = "fullName") -> None:
    """Print the documents of a page, one line each.

    Args:
        result: Fetched page
        label_field: Document attribute shown next to the id
    """
    if not is_debug_enabled():
        return

    print_pagination_state(result.pagination)
    if not result.data:
        print("  (no documents)")
        return
    for doc in result.data:
        if isinstance(doc, dict):
            print(f"  {doc.get('$id', '?')}: {doc.get(label_field, '')}")
        else:
            print(f"  {doc}")


def print_json_debug(data: Dict[str, Any], label: str = "DEBUG") -> None:
    """Print JSON data in a formatted way.

    Args:
        data: Dictionary to print as JSON
        label: Label for the debug output
    """
    if not is_debug_enabled():
        return

    print(f"\n[{label}]")
    print(json.dumps(data, indent=2, ensure_ascii=False))
    print()
