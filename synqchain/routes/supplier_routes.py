from __future__ import annotations

from flask import Blueprint, jsonify, request

from synqchain.domain.schemas import SUPPLIER_STATUSES
from synqchain.erp import get_erp_adapter
from synqchain.errors import NotFoundError, ValidationError
from synqchain.routes.adapter_relay import relay
from synqchain.routes.po_routes import MAX_PAGE, MAX_PAGE_SIZE, _parse_int


supplier_bp = Blueprint("suppliers", __name__)

SUPPLIERS_DEFAULT_PAGE_SIZE = 50


def _parse_supplier_payload(payload) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(code="supplier_name_required", message="Name is required")

    status = payload.get("status")
    if status is None:
        status = "active"
    if status not in SUPPLIER_STATUSES:
        raise ValidationError(
            code="supplier_status_invalid",
            message=f"status must be one of: {', '.join(SUPPLIER_STATUSES)}",
        )

    return {"name": name.strip(), "status": status}


@supplier_bp.route("/suppliers", methods=["GET"])
def list_suppliers():
    page = _parse_int(request.args.get("page"), default=1, min_value=1, max_value=MAX_PAGE)
    page_size = _parse_int(
        request.args.get("pageSize"),
        default=SUPPLIERS_DEFAULT_PAGE_SIZE,
        min_value=1,
        max_value=MAX_PAGE_SIZE,
    )
    search = (request.args.get("search") or "").strip().lower()

    suppliers = relay("suppliers", "supplier[]", lambda: get_erp_adapter().list_suppliers())
    if search:
        suppliers = [item for item in suppliers if search in item["name"].lower()]

    offset = (page - 1) * page_size
    response = jsonify(suppliers[offset:offset + page_size])
    # The body stays a plain list; the unpaged match count travels in a header.
    response.headers["X-Total-Count"] = str(len(suppliers))
    return response


@supplier_bp.route("/suppliers", methods=["POST"])
def create_supplier():
    data = _parse_supplier_payload(request.get_json(silent=True))
    supplier = relay("create_supplier", "supplier", lambda: get_erp_adapter().create_supplier(data))
    return jsonify(supplier), 201


@supplier_bp.route("/suppliers/<supplier_id>", methods=["GET"])
def get_supplier(supplier_id: str):
    supplier = relay("supplier", "supplier?", lambda: get_erp_adapter().get_supplier(supplier_id))
    if supplier is None:
        raise NotFoundError(code="supplier_not_found", message_key="supplier_not_found")
    return jsonify(supplier)
