"""Flask helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError
from ..users.model import SessionUser
from .validators import parse_int

logger = logging.getLogger(__name__)


def current_user() -> SessionUser:
    if "user_id" not in session:
        raise AuthenticationError("Veuillez vous connecter")
    return SessionUser(
        user_id=int(session["user_id"]),
        full_name=session.get("name", ""),
        role=Role(session["role"]),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user()
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_user().is_manager:
            raise AuthorizationError("Action réservée aux managers")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Corps JSON attendu")
    return data


def required_int(data: dict, name: str) -> int:
    if data.get(name) in (None, ""):
        raise ValidationError(f"Champ obligatoire : {name}")
    return parse_int(data[name], name)


def optional_int(data: Any, name: str) -> Optional[int]:
    value = data.get(name)
    if value in (None, ""):
        return None
    return parse_int(value, name)


def id_str(value: Optional[int]) -> Optional[str]:
    """Identifiers travel as decimal strings."""
    return None if value is None else str(int(value))


def encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {(k.value if isinstance(k, Enum) else k): encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode(v) for v in value]
    return value


def ok(payload: Any = None, status: int = 200):
    return jsonify(encode(payload if payload is not None else {"success": True})), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        logger.info("%s %s refused: %s (%s)", request.method, request.path, exc, exc.code)
        return jsonify({"error": str(exc), "code": exc.code}), exc.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return jsonify({"error": exc.description, "code": exc.name}), exc.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Erreur serveur"}), 500
