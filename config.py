"""Centralized config for the CRM core.

Connection settings (endpoint, project, Redis) live in
``database.connection.DatabaseSettings``. This module only holds application
constants that the gate, the pagination controller and the loyalty rules read.

Environment variables (optional):
- ACCESS_CODE_EXPIRATION_MS: how long a verified access code is honored (default: 24h)
- ACCEPT_LEGACY_ACCESS_FLAG: honor the old raw "true" authorization flag
- DEFAULT_PAGE_SIZE: page size used by list views (default: 10)
- LOYALTY_POINTS_RATE: percentage of a purchase converted into points (default: 0.5)
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


ACCESS_CODE_STORAGE_KEY = "accessCodeVerified"
ACCESS_CODE_EXPIRATION_MS = _env_int("ACCESS_CODE_EXPIRATION_MS", 24 * 60 * 60 * 1000)
ACCEPT_LEGACY_ACCESS_FLAG = _env_bool("ACCEPT_LEGACY_ACCESS_FLAG", default=False)

DEFAULT_PAGE_SIZE = _env_int("DEFAULT_PAGE_SIZE", 10)

LOYALTY_POINTS_RATE = float(os.getenv("LOYALTY_POINTS_RATE", "0.5"))

COLLECTIONS = {
    "users": "users",
    "clients": "clients",
    "sales": "sales",
    "sale_items": "sale_items",
    "products": "products",
    "stores": "stores",
    "reservations": "reservations",
    "reservation_items": "reservation_items",
    "stock_movements": "stock_movements",
    "after_sales_service": "after_sales_service",
    "debit_sales": "debit_sales",
    "access_codes": "access_codes",
    "loyalty_history": "loyalty_history",
}
