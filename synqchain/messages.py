from __future__ import annotations

from typing import Dict


MESSAGES: Dict[str, Dict[str, str]] = {
    "error": {
        "auth_required": "Not authenticated",
        "invalid_credentials": "Invalid credentials",
        "purchase_order_not_found": "Purchase order not found",
        "purchase_order_number_required": "PO number is required",
        "purchase_order_number_taken": "A purchase order with this number already exists",
        "project_not_found": "Project not found",
        "supplier_not_found": "Supplier not found",
        "notes_invalid": "notes must be a string",
        "invalid_transition": "The purchase order cannot move to the requested status",
        "validation_error": "Invalid request payload",
        "erp_adapter_failed": "Failed to fetch data from the ERP adapter",
        "health_check_failed": "Health check failed",
        "rate_limit_exceeded": "Too many requests. Try again shortly.",
        "unexpected_error": "Internal server error",
    },
}


def get_message(category: str, key: str, default: str | None = None) -> str:
    message = MESSAGES.get(category, {}).get(key)
    if message:
        return message
    if default is not None:
        return default
    return key


def error_message(key: str, default: str | None = None) -> str:
    return get_message("error", key, default)

