"""HTTP routes, user controller and the service entry point."""

from __future__ import annotations

import argparse
import json
import re
import sys
from http import HTTPStatus
from typing import Optional, Sequence

from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import ConfigError, load_settings
from .database import auto_migrate, connect
from .domain import DomainError
from .logging_setup import configure_logging, get_logger
from .repository import UserRepository
from .service import RegisterRequest, ServiceError, UserService
from .tokens import TokenError, generate_token
from .transactions import transaction_factory

TOKEN_LIFETIME_HOURS = 24
ALLOWED_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
ALLOWED_HEADERS = "Content-Type,Authorization"

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")


class _BindingError(ValueError):
    """Raised when a request body does not satisfy its field rules."""


def _is_email(value: str) -> bool:
    return bool(_EMAIL_PATTERN.match(value))


# (key, required, check name, check); the label is the capitalised key
_REGISTER_FIELDS = (
    ("email", True, "email", _is_email),
    ("password", True, "min", lambda v: len(v) >= 6),
    ("role", False, "oneof", lambda v: v in ("admin", "user")),
)
_LOGIN_FIELDS = (
    ("email", True, "email", _is_email),
    ("password", True, None, None),
)


def _bind(fields) -> dict[str, str]:
    """Decode the JSON body and validate it against fields."""
    raw = request.get_data(cache=True)
    if not raw.strip():
        raise _BindingError("EOF")
    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise _BindingError(f"invalid JSON: {exc}") from None
    if not isinstance(body, dict):
        raise _BindingError(f"json: cannot unmarshal {type(body).__name__} into the request object")

    values = {}
    for key, *_ in fields:
        value = body.get(key)
        value = "" if value is None else value
        if not isinstance(value, str):
            raise _BindingError(
                f"json: cannot unmarshal {type(value).__name__} into field "
                f"{key.capitalize()} of type string"
            )
        values[key] = value

    problems = []
    for key, required, tag, check in fields:
        value = values[key]
        if not value:
            failed = "required" if required else None
        else:
            failed = tag if check and not check(value) else None
        if failed:
            label = key.capitalize()
            problems.append(
                f"Key: '{label}' Error:Field validation for '{label}' failed on the '{failed}' tag"
            )
    if problems:
        raise _BindingError("\n".join(problems))
    return values


def _error(status: HTTPStatus, message: str):
    return jsonify({"error": message}), status


def _user_view(user) -> dict:
    return {"id": str(user.id), "email": user.email, "role": user.role}


class UserController:
    """Views for registration and login."""

    def __init__(self, service: UserService, secret: str) -> None:
        self._service = service
        self._secret = secret

    def register(self):
        try:
            data = _bind(_REGISTER_FIELDS)
            user = self._service.register(RegisterRequest(**data))
        except (_BindingError, ServiceError, DomainError, SQLAlchemyError) as exc:
            return _error(HTTPStatus.BAD_REQUEST, str(exc))
        return jsonify(_user_view(user)), HTTPStatus.CREATED

    def login(self):
        try:
            data = _bind(_LOGIN_FIELDS)
        except _BindingError as exc:
            return _error(HTTPStatus.BAD_REQUEST, str(exc))
        try:
            user = self._service.login(data["email"], data["password"])
        except (ServiceError, SQLAlchemyError):
            return _error(HTTPStatus.UNAUTHORIZED, "invalid credentials")
        try:
            token = generate_token(user.id, user.is_admin(), TOKEN_LIFETIME_HOURS, self._secret)
        except TokenError:
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, "failed to generate token")
        return jsonify({"token": token, "user": _user_view(user)}), HTTPStatus.OK


def create_app(service: UserService, secret: str) -> Flask:
    """Build the application with its routes and CORS handling."""
    app = Flask("goster")

    @app.before_request
    def _preflight():
        if request.method == "OPTIONS" and request.headers.get("Origin"):
            response = app.make_response(("", HTTPStatus.NO_CONTENT))
            response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
            response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
            return response
        return None

    @app.after_request
    def _allow_origin(response):
        if request.headers.get("Origin"):
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Credentials"] = "true"
        return response

    @app.get("/_info")
    def info():
        return jsonify({"status": "ok"})

    controller = UserController(service, secret)
    app.add_url_rule("/api/register", "register", controller.register, methods=["POST"])
    app.add_url_rule("/api/login", "login", controller.login, methods=["POST"])
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load settings, prepare the database and serve HTTP."""
    parser = argparse.ArgumentParser(prog="goster", description="Run the user service.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"goster: {exc}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    get_logger("init").info("Env variables are loaded!")
    logger = get_logger("main")

    try:
        engine = connect(settings.db_uri)
        auto_migrate(engine)
    except SQLAlchemyError as exc:
        logger.critical("Failed to prepare database: %s", exc)
        return 1
    logger.info("Database migrations completed")

    session_factory = sessionmaker(bind=engine)
    service = UserService(UserRepository(session_factory), transaction_factory(session_factory))
    app = create_app(service, settings.jwt_secret)

    logger.info("Starting server on :%d", args.port)
    app.run(host=args.host, port=args.port)
    return 0