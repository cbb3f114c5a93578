"""Map domain errors and DRF exceptions to HTTP responses.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Every error body has the
shape ``{"error": {"code": ..., "message": ...}}``; validation errors add
``fields``. Unexpected exceptions are left to Django so that internal
details never reach the client.
"""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from events.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.MESSAGE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_REGISTRATION_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_MESSAGE_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_PUBLISHED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_CAPACITY: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}

_API_CODES: list[tuple[type[exceptions.APIException], str]] = [
    (exceptions.NotAuthenticated, "UNAUTHORIZED"),
    (exceptions.AuthenticationFailed, "UNAUTHORIZED"),
    (exceptions.PermissionDenied, "FORBIDDEN"),
    (exceptions.Throttled, "THROTTLED"),
    (exceptions.ValidationError, ErrorCode.VALIDATION_ERROR.value),
    (exceptions.ParseError, "MALFORMED_REQUEST"),
    (exceptions.NotFound, "NOT_FOUND"),
    (exceptions.MethodNotAllowed, "METHOD_NOT_ALLOWED"),
    (exceptions.UnsupportedMediaType, "UNSUPPORTED_MEDIA_TYPE"),
]


class InvalidCredentials(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid identifier or password."
    default_code = "INVALID_CREDENTIALS"


def error_body(code: str, message: str, **extra) -> dict:
    return {"error": {"code": code, "message": message, **extra}}


def domain_error_response(error: DomainError) -> Response:
    http_status = STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)
    return Response(error_body(error.code.value, error.message), status=http_status)


def _api_code(exc: exceptions.APIException) -> str:
    for exc_type, code in _API_CODES:
        if isinstance(exc, exc_type):
            return code
    return str(exc.default_code).upper()


def exception_handler(exc, context):
    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "Request rejected",
            extra={
                "error_code": exc.code.value,
                "view": type(view).__name__ if view else None,
            },
        )
        return domain_error_response(exc)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    code = _api_code(exc)
    if isinstance(exc, exceptions.ValidationError):
        response.data = error_body(code, "Invalid request body.", fields=response.data)
    else:
        response.data = error_body(code, str(exc.detail))
    return response
