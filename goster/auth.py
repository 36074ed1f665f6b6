"""Bearer-token guards for Flask views."""

from __future__ import annotations

import functools
from http import HTTPStatus
from typing import Callable

from flask import g, jsonify, request

from .tokens import Claims, TokenError, validate_token


class _Rejected(Exception):
    def __init__(self, status: HTTPStatus, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


def _authenticate(secret: str) -> Claims:
    header = request.headers.get("Authorization", "")
    if not header:
        raise _Rejected(HTTPStatus.UNAUTHORIZED, "Authorization header required")

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise _Rejected(
            HTTPStatus.UNAUTHORIZED, "Invalid authorization format. Use: Bearer <token>"
        )

    try:
        return validate_token(parts[1], secret)
    except TokenError:
        raise _Rejected(HTTPStatus.UNAUTHORIZED, "Invalid token") from None


def _guard(secret: str, check: Callable[[Claims], None]) -> Callable:
    def decorator(view: Callable) -> Callable:
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            try:
                claims = _authenticate(secret)
                check(claims)
            except _Rejected as rejection:
                return jsonify({"error": rejection.message}), rejection.status
            g.user_id = claims.id
            g.is_admin = claims.is_admin
            return view(*args, **kwargs)

        return wrapper

    return decorator


def require_auth(secret: str, admin_required: bool = False) -> Callable:
    """Admit requests with a valid token, and only admins if ``admin_required``."""

    def check(claims: Claims) -> None:
        if admin_required and not claims.is_admin:
            raise _Rejected(HTTPStatus.FORBIDDEN, "Admin privileges required")

    return _guard(secret, check)


def require_user(secret: str) -> Callable:
    """Admit requests with a valid token that does not belong to an admin."""

    def check(claims: Claims) -> None:
        if claims.is_admin:
            raise _Rejected(HTTPStatus.FORBIDDEN, "Admin cannot book rooms")

    return _guard(secret, check)


def admin_auth_required(secret: str) -> Callable:
    return require_auth(secret, True)