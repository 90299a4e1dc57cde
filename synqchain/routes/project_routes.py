from __future__ import annotations

from flask import Blueprint, jsonify, request

from synqchain.domain.schemas import PROJECT_STATUSES, is_non_negative_number
from synqchain.erp import get_erp_adapter
from synqchain.errors import NotFoundError, ValidationError
from synqchain.routes.adapter_relay import relay


project_bp = Blueprint("projects", __name__)


def _parse_project_payload(payload) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(code="project_name_required", message="Name is required")

    status = payload.get("status")
    if status is None:
        status = "in-progress"
    if status not in PROJECT_STATUSES:
        raise ValidationError(
            code="project_status_invalid",
            message=f"status must be one of: {', '.join(PROJECT_STATUSES)}",
        )

    budget = payload.get("budget")
    if budget is None:
        budget = 0
    if not is_non_negative_number(budget):
        raise ValidationError(code="project_budget_invalid", message="budget must be a non-negative number")

    return {"name": name.strip(), "status": status, "budget": budget}


@project_bp.route("/projects", methods=["GET"])
def list_projects():
    return jsonify(relay("projects", "project[]", lambda: get_erp_adapter().list_projects()))


@project_bp.route("/projects", methods=["POST"])
def create_project():
    data = _parse_project_payload(request.get_json(silent=True))
    return jsonify(relay("create_project", "project", lambda: get_erp_adapter().create_project(data)))


@project_bp.route("/projects/<project_id>", methods=["GET"])
def get_project(project_id: str):
    project = relay("project", "project?", lambda: get_erp_adapter().get_project(project_id))
    if project is None:
        raise NotFoundError(code="project_not_found", message_key="project_not_found")
    return jsonify(project)
