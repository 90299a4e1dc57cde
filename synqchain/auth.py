from __future__ import annotations

from typing import Iterable

from flask import Blueprint, current_app, jsonify, request, session

from synqchain.errors import AuthenticationError


auth_bp = Blueprint("auth", __name__)

AUTH_COOKIE_VALUE = "1"
KNOWN_ROLES = {"admin", "buyer", "approver", "manager", "viewer"}


def register_auth(app) -> None:
    app.register_blueprint(auth_bp)


def _cookie_name() -> str:
    return str(current_app.config.get("AUTH_COOKIE_NAME") or "synqchain_auth")


def is_authenticated() -> bool:
    return request.cookies.get(_cookie_name()) == AUTH_COOKIE_VALUE


def _public_user(user: dict) -> dict:
    return {"email": user["email"], "name": user["name"], "role": user["role"]}


def _current_user() -> dict | None:
    users = list(_parse_users(current_app.config.get("APP_USERS")))
    email = str(session.get("user_email") or "").strip().lower()
    for user in users:
        if email and user["email"] == email:
            return user
    return users[0] if users else None


@auth_bp.route("/auth/login", methods=["POST"])
def login():
    payload = request.get_json(silent=True) or {}
    email = str(payload.get("email") or "").strip().lower()
    password = str(payload.get("password") or "")

    user = _find_user(email, password, current_app.config.get("APP_USERS"))
    if not user:
        raise AuthenticationError(code="invalid_credentials", message_key="invalid_credentials")

    session["user_email"] = user["email"]
    response = jsonify({"success": True, "user": _public_user(user)})
    response.set_cookie(
        _cookie_name(),
        AUTH_COOKIE_VALUE,
        max_age=int(current_app.config.get("AUTH_COOKIE_MAX_AGE_SECONDS", 86400) or 86400),
        path="/",
        httponly=True,
        secure=str(current_app.config.get("ENV", "")).lower() == "production",
        samesite="Lax",
    )
    return response


@auth_bp.route("/auth/me", methods=["GET"])
def me():
    if not is_authenticated():
        raise AuthenticationError()
    user = _current_user()
    if user is None:
        raise AuthenticationError()
    return jsonify({"user": _public_user(user)})


@auth_bp.route("/auth/logout", methods=["POST"])
def logout():
    session.clear()
    response = jsonify({"success": True})
    response.delete_cookie(_cookie_name(), path="/")
    return response


def _find_user(email: str, password: str, raw_users: object) -> dict | None:
    if not email or not password:
        return None
    for user in _parse_users(raw_users):
        if user["email"] == email and user["password"] == password:
            return user
    return None


def _parse_users(raw_users: object) -> Iterable[dict]:
    if not raw_users:
        return []
    if isinstance(raw_users, str):
        entries = []
        for chunk in raw_users.replace("\n", ",").replace(";", ",").split(","):
            entry = chunk.strip()
            if entry:
                entries.append(entry)
    elif isinstance(raw_users, (list, tuple, set)):
        entries = [str(item).strip() for item in raw_users if str(item).strip()]
    else:
        return []

    users = []
    for entry in entries:
        parts = [part.strip() for part in entry.split(":")]
        if len(parts) < 2 or not parts[0]:
            continue
        email, password = parts[0].lower(), parts[1]
        name = parts[2] if len(parts) > 2 and parts[2] else email.split("@")[0]
        role = parts[3].lower() if len(parts) > 3 and parts[3] else "viewer"
        if role not in KNOWN_ROLES:
            role = "viewer"
        users.append({"email": email, "password": password, "name": name, "role": role})
    return users
