from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from synqchain.db import get_db
from synqchain.domain.po_lifecycle import (
    PO_STATUSES,
    DuplicatePurchaseOrder,
    InvalidTransition,
    PurchaseOrderNotFound,
    is_valid_status,
)
from synqchain.domain.schemas import is_non_negative_number
from synqchain.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from synqchain.infrastructure.repositories import PurchaseOrderRepository


po_bp = Blueprint("purchase_orders", __name__)

EVENTS_DEFAULT_PAGE_SIZE = 20
LIST_DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 200
MAX_PAGE = 1_000_000


def get_purchase_order_repository() -> PurchaseOrderRepository:
    if "po_repository" not in g:
        g.po_repository = PurchaseOrderRepository(get_db())
    return g.po_repository


def _parse_int(value: str | None, default: int, min_value: int, max_value: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return max(min_value, min(parsed, max_value))


def _optional_notes(payload) -> str | None:
    if not isinstance(payload, dict):
        return None
    notes = payload.get("notes")
    if notes is None:
        return None
    if not isinstance(notes, str):
        raise ValidationError(code="notes_invalid", message_key="notes_invalid")
    return notes


def _run_transition(action: str, po_id: str):
    notes = _optional_notes(request.get_json(silent=True))
    repository = get_purchase_order_repository()
    try:
        if action == "submit":
            purchase_order = repository.submit(po_id, notes)
        else:
            purchase_order = repository.approve(po_id, notes)
    except PurchaseOrderNotFound as exc:
        raise NotFoundError(details=str(exc)) from exc
    except InvalidTransition as exc:
        raise InvalidTransitionError(
            message=exc.message,
            details=f"{exc.po_id}: {exc.action} from {exc.current_status}",
        ) from exc
    return jsonify(purchase_order)


@po_bp.route("/po/<po_id>/submit", methods=["POST"])
def submit_purchase_order(po_id: str):
    return _run_transition("submit", po_id)


@po_bp.route("/po/<po_id>/approve", methods=["POST"])
def approve_purchase_order(po_id: str):
    return _run_transition("approve", po_id)


@po_bp.route("/po/<po_id>/events", methods=["GET"])
def purchase_order_events(po_id: str):
    page = _parse_int(request.args.get("page"), default=1, min_value=1, max_value=MAX_PAGE)
    page_size = _parse_int(
        request.args.get("pageSize"),
        default=EVENTS_DEFAULT_PAGE_SIZE,
        min_value=1,
        max_value=MAX_PAGE_SIZE,
    )
    return jsonify(get_purchase_order_repository().get_events(po_id, page, page_size))


@po_bp.route("/po", methods=["GET"])
def list_purchase_orders():
    page = _parse_int(request.args.get("page"), default=1, min_value=1, max_value=MAX_PAGE)
    page_size = _parse_int(
        request.args.get("pageSize"),
        default=LIST_DEFAULT_PAGE_SIZE,
        min_value=1,
        max_value=MAX_PAGE_SIZE,
    )
    status = (request.args.get("status") or "").strip() or None
    if status is not None and not is_valid_status(status):
        raise ValidationError(
            code="status_invalid",
            message=f"status must be one of: {', '.join(PO_STATUSES)}",
        )
    supplier_id = (request.args.get("supplierId") or "").strip() or None
    return jsonify(
        get_purchase_order_repository().list_page(
            page=page,
            page_size=page_size,
            status=status,
            supplier_id=supplier_id,
        )
    )


def _optional_text(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(message=f"{key} must be a string")
    return value.strip() or None


def _parse_create_payload(payload) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError()

    number = payload.get("number")
    if not isinstance(number, str) or not number.strip():
        raise ValidationError(code="po_number_required", message_key="purchase_order_number_required")

    total = payload.get("total", 0)
    if total is None:
        total = 0
    if not is_non_negative_number(total):
        raise ValidationError(message="total must be a non-negative number")

    currency = _optional_text(payload, "currency") or "USD"
    if len(currency) != 3 or not currency.isalpha():
        raise ValidationError(message="currency must be a 3-letter code")

    return {
        "number": number.strip(),
        "supplier_id": _optional_text(payload, "supplierId"),
        "project_id": _optional_text(payload, "projectId"),
        "total": float(total),
        "currency": currency.upper(),
        "notes": _optional_text(payload, "notes"),
        "po_id": _optional_text(payload, "id"),
    }


@po_bp.route("/po", methods=["POST"])
def create_purchase_order():
    data = _parse_create_payload(request.get_json(silent=True))
    try:
        purchase_order = get_purchase_order_repository().create(**data)
    except DuplicatePurchaseOrder as exc:
        raise ConflictError(details=str(exc)) from exc
    return jsonify(purchase_order), 201


@po_bp.route("/po/<po_id>", methods=["GET"])
def get_purchase_order(po_id: str):
    purchase_order = get_purchase_order_repository().get_by_id(po_id)
    if purchase_order is None:
        raise NotFoundError(details=f"purchase order {po_id}")
    return jsonify(purchase_order)
