"""Declarative payload shapes for data relayed from the ERP adapter.

Every adapter read-route validates its payload against one of these shapes
before responding, so a misbehaving adapter surfaces as a 500 instead of a
malformed body reaching the dashboard.
"""

from __future__ import annotations

import math
from typing import Any


PROJECT_STATUSES = ("in-progress", "completed", "on-hold")
SUPPLIER_STATUSES = ("active", "inactive")
ACTIVITY_KINDS = ("project", "supplier", "system", "user")
ERP_CONNECTION_STATUSES = ("connected", "mock", "disconnected")


RESPONSE_SCHEMAS: dict[str, dict[str, Any]] = {
    "project": {
        "required_fields": ["id", "name", "status", "budget", "createdAt"],
        "optional_fields": [],
        "strings": ["id", "name", "createdAt"],
        "non_negative": ["budget"],
        "enums": {"status": PROJECT_STATUSES},
    },
    "supplier": {
        "required_fields": ["id", "name", "status", "createdAt"],
        "optional_fields": [],
        "strings": ["id", "name", "createdAt"],
        "non_negative": [],
        "enums": {"status": SUPPLIER_STATUSES},
    },
    "activity_item": {
        "required_fields": ["id", "kind", "title", "date"],
        "optional_fields": ["href"],
        "strings": ["id", "title", "date", "href"],
        "non_negative": [],
        "enums": {"kind": ACTIVITY_KINDS},
    },
    "erp_health_item": {
        "required_fields": ["name", "status"],
        "optional_fields": [],
        "strings": ["name"],
        "non_negative": [],
        "enums": {"status": ERP_CONNECTION_STATUSES},
    },
    "kpi_cards": {
        "required_fields": ["totalSpend", "platformSavings", "activeProjects", "activeSuppliers"],
        "optional_fields": [],
        "strings": [],
        "non_negative": ["totalSpend", "platformSavings", "activeProjects", "activeSuppliers"],
        "integers": ["activeProjects", "activeSuppliers"],
        "enums": {},
    },
}

KPI_SERIES_KEYS = ("projectsCompletedMonthly", "savingsMonthly")


class ResponseShapeError(ValueError):
    def __init__(self, schema_name: str, errors: list[str]) -> None:
        self.schema_name = schema_name
        self.errors = list(errors)
        super().__init__(f"{schema_name} payload failed validation: {'; '.join(self.errors)}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def is_non_negative_number(value: Any) -> bool:
    return _is_number(value) and value >= 0


def validate_schema(schema_name: str, payload: Any) -> tuple[bool, list[str]]:
    schema = RESPONSE_SCHEMAS.get(schema_name)
    if not schema:
        return (False, [f"unsupported schema_name: {schema_name}"])
    if not isinstance(payload, dict):
        return (False, [f"{schema_name} must be an object"])

    errors: list[str] = []
    for required in schema["required_fields"]:
        if payload.get(required) is None:
            errors.append(f"missing required field: {required}")

    for field_name in schema["strings"]:
        value = payload.get(field_name)
        if value is not None and not isinstance(value, str):
            errors.append(f"field must be a string: {field_name}")

    for field_name in schema["non_negative"]:
        value = payload.get(field_name)
        if value is None:
            continue
        if not is_non_negative_number(value):
            errors.append(f"field must be a non-negative number: {field_name}")

    for field_name in schema.get("integers", []):
        value = payload.get(field_name)
        if value is not None and _is_number(value) and int(value) != value:
            errors.append(f"field must be an integer: {field_name}")

    for field_name, allowed in schema["enums"].items():
        value = payload.get(field_name)
        if value is not None and value not in allowed:
            errors.append(f"field {field_name} must be one of: {', '.join(allowed)}")

    return (len(errors) == 0, errors)


def validate_list(schema_name: str, payload: Any) -> tuple[bool, list[str]]:
    if not isinstance(payload, list):
        return (False, [f"{schema_name} list must be an array"])
    errors: list[str] = []
    for index, item in enumerate(payload):
        _, item_errors = validate_schema(schema_name, item)
        errors.extend(f"[{index}] {error}" for error in item_errors)
    return (len(errors) == 0, errors)


def validate_kpis(payload: Any) -> tuple[bool, list[str]]:
    if not isinstance(payload, dict):
        return (False, ["kpis must be an object"])
    _, errors = validate_schema("kpi_cards", payload.get("cards"))
    series = payload.get("series")
    if not isinstance(series, dict):
        errors.append("missing required field: series")
        return (False, errors)
    for key in KPI_SERIES_KEYS:
        block = series.get(key)
        if not isinstance(block, dict):
            errors.append(f"missing required series: {key}")
            continue
        labels = block.get("labels")
        values = block.get("values")
        if not isinstance(labels, list) or not all(isinstance(label, str) for label in labels):
            errors.append(f"series {key}.labels must be a list of strings")
        if not isinstance(values, list) or not all(_is_number(value) for value in values):
            errors.append(f"series {key}.values must be a list of numbers")
    return (len(errors) == 0, errors)


def ensure_valid(schema_name: str, payload: Any) -> Any:
    if schema_name.endswith("?"):
        if payload is None:
            return None
        schema_name = schema_name[:-1]
    if schema_name == "kpis":
        ok, errors = validate_kpis(payload)
    elif schema_name.endswith("[]"):
        ok, errors = validate_list(schema_name[:-2], payload)
    else:
        ok, errors = validate_schema(schema_name, payload)
    if not ok:
        raise ResponseShapeError(schema_name, errors)
    return payload
