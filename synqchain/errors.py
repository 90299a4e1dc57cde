from __future__ import annotations

from typing import Any, Dict

from synqchain.messages import error_message


class AppError(Exception):
    default_code = "system_error"
    default_message_key = "unexpected_error"
    default_http_status = 500
    default_critical = True

    def __init__(
        self,
        code: str | None = None,
        message_key: str | None = None,
        http_status: int | None = None,
        critical: bool | None = None,
        details: str | None = None,
        message: str | None = None,
        payload: Dict[str, Any] | None = None,
    ) -> None:
        self.code = (code or self.default_code).strip()
        self.message_key = (message_key or self.default_message_key).strip()
        self.http_status = int(http_status or self.default_http_status)
        self.critical = bool(self.default_critical if critical is None else critical)
        self.details = (details or "").strip() or None
        self.message = (message or "").strip() or None
        self.payload = dict(payload or {})
        super().__init__(self.details or self.message or self.code)

    def user_message(self) -> str:
        if self.message:
            return self.message
        fallback = error_message("unexpected_error")
        return error_message(self.message_key, fallback)

    def to_response_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.user_message()}
        if self.payload:
            payload.update(self.payload)
        return payload


class UserActionError(AppError):
    default_code = "action_invalid"
    default_message_key = "validation_error"
    default_http_status = 400
    default_critical = False


class ValidationError(UserActionError):
    default_code = "validation_error"
    default_message_key = "validation_error"


class InvalidTransitionError(UserActionError):
    default_code = "invalid_transition"
    default_message_key = "invalid_transition"


class NotFoundError(UserActionError):
    default_code = "not_found"
    default_message_key = "purchase_order_not_found"
    default_http_status = 404


class ConflictError(UserActionError):
    default_code = "conflict"
    default_message_key = "purchase_order_number_taken"
    default_http_status = 409


class AuthenticationError(UserActionError):
    default_code = "auth_required"
    default_message_key = "auth_required"
    default_http_status = 401


class IntegrationError(AppError):
    default_code = "integration_error"
    default_message_key = "erp_adapter_failed"
    default_http_status = 500
    default_critical = False


class SystemError(AppError):
    default_code = "system_error"
    default_message_key = "unexpected_error"
    default_http_status = 500
    default_critical = True
