"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from fitcoach.core.logger import ensure_request_id
from fitcoach.services._shared.errors import (
    AlreadyEnrolledError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    ServiceError,
    StorageError,
    ValidationFailedError,
)

log = logging.getLogger(__name__)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        412: "precondition_failed",
        413: "payload_too_large",
        415: "unsupported_media_type",
        422: "unprocessable_entity",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def problem_response(problem: dict[str, Any], status: int) -> tuple[Response, int]:
    """Return a ``application/problem+json`` response tuple."""
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        return as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class Forbidden(APIError):
    """403 when authorization denies access."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


def translate_service_error(exc: ServiceError) -> APIError:
    """
    Map a service-level error to its HTTP representation.

    Storage failures are reduced to a generic 500 so internals never leak.
    """
    if isinstance(exc, ValidationFailedError):
        return APIError(
            str(exc),
            status_code=HTTPStatus.BAD_REQUEST,
            code="validation_error",
            details={"errors": {k: list(v) for k, v in exc.errors.items()}},
        )
    if isinstance(exc, NotFoundError):
        return APIError(str(exc), status_code=HTTPStatus.NOT_FOUND, code="not_found")
    if isinstance(exc, AuthenticationError):
        return Unauthorized(str(exc))
    if isinstance(exc, AuthorizationError):
        return Forbidden(str(exc))
    if isinstance(exc, AlreadyEnrolledError):
        return APIError(
            "Already enrolled in this program",
            status_code=HTTPStatus.BAD_REQUEST,
            code="already_enrolled",
            details={"program_id": exc.program_id},
        )
    if isinstance(exc, ConflictError):
        return APIError(str(exc), status_code=HTTPStatus.CONFLICT, code="conflict")
    if isinstance(exc, PreconditionFailedError):
        return APIError(
            str(exc), status_code=HTTPStatus.PRECONDITION_FAILED, code="precondition_failed"
        )
    if isinstance(exc, StorageError):
        return APIError(
            "Unexpected error",
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
        )
    return APIError(str(exc), status_code=HTTPStatus.BAD_REQUEST, code="bad_request")


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error is rendered as RFC 7807 with a ``request_id``.
    - 5xx are logged with ``exc_info``; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        problem = err.to_problem()
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s",
            err.code,
            err.status_code,
            err.message,
        )
        return problem_response(problem, err.status_code)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        api_err = translate_service_error(err)
        problem = api_err.to_problem()
        if api_err.status_code >= 500:
            log.error("ServiceError: %s", type(err).__name__, exc_info=err)
        else:
            log.warning(
                "ServiceError: code=%s status=%s msg=%s",
                api_err.code,
                api_err.status_code,
                api_err.message,
            )
        return problem_response(problem, api_err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        problem = as_problem(status=status, code=error_code, message=message)
        level = log.error if status >= 500 else log.warning
        level("HTTPException: code=%s status=%s detail=%s", error_code, status, message)
        return problem_response(problem, status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        problem = as_problem(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        log.warning("ValidationError on request payload")
        return problem_response(problem, HTTPStatus.UNPROCESSABLE_ENTITY)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        problem = as_problem(
            status=HTTPStatus.CONFLICT,
            code="conflict",
            message="Resource conflict",
        )
        log.error("IntegrityError", exc_info=err)
        return problem_response(problem, HTTPStatus.CONFLICT)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        problem = as_problem(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            code="service_unavailable",
            message="Service temporarily unavailable",
        )
        log.error("OperationalError", exc_info=err)
        return problem_response(problem, HTTPStatus.SERVICE_UNAVAILABLE)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(err: SQLAlchemyError):
        problem = as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error("SQLAlchemyError", exc_info=err)
        return problem_response(problem, HTTPStatus.INTERNAL_SERVER_ERROR)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        problem = as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error("Unhandled exception", exc_info=err)
        return problem_response(problem, HTTPStatus.INTERNAL_SERVER_ERROR)
