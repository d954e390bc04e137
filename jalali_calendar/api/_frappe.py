"""Optional Frappe runtime shared by the API modules."""
from __future__ import annotations

try:  # pragma: no cover - frappe is unavailable during tests
    import frappe  # type: ignore
except Exception:  # pragma: no cover - handled via fallback store
    frappe = None  # type: ignore

__all__ = ["frappe", "maybe_whitelist"]


def maybe_whitelist(func):  # pragma: no cover - exercised in Frappe environments
    if frappe and hasattr(frappe, "whitelist"):
        return frappe.whitelist()(func)  # type: ignore[attr-defined]
    return func
