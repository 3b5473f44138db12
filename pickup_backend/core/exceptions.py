# core/exceptions.py

"""
DRF EXCEPTION HANDLER

Wraps every framework-level error (validation, auth, permission, 404,
throttling) into the uniform failure envelope. Domain errors raised by the
service layer are translated in the views; anything unexpected still reaches
Django's 500 handling (and Sentry, when enabled).
"""

from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import exceptions
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

_CODE_BY_EXCEPTION = (
    (exceptions.ValidationError, "VALIDATION_ERROR"),
    (exceptions.NotAuthenticated, "NOT_AUTHENTICATED"),
    (exceptions.AuthenticationFailed, "AUTHENTICATION_FAILED"),
    (exceptions.PermissionDenied, "FORBIDDEN"),
    (exceptions.NotFound, "NOT_FOUND"),
    (exceptions.MethodNotAllowed, "METHOD_NOT_ALLOWED"),
    (exceptions.Throttled, "RATE_LIMITED"),
    (exceptions.ParseError, "PARSE_ERROR"),
    (exceptions.UnsupportedMediaType, "UNSUPPORTED_MEDIA_TYPE"),
)


def _code_for(exc) -> str:
    for exc_cls, code in _CODE_BY_EXCEPTION:
        if isinstance(exc, exc_cls):
            return code
    return "ERROR"


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        if "detail" in detail:
            return _first_message(detail["detail"])
        for key, value in detail.items():
            msg = _first_message(value)
            if msg:
                return msg if key == "non_field_errors" else f"{key}: {msg}"
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def envelope_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(as_serializer_error(exc))
    elif isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data
    code = _code_for(exc)

    body = {
        "success": False,
        "message": _first_message(detail) or "Request failed",
        "code": code,
    }
    if isinstance(exc, exceptions.ValidationError):
        body["errors"] = detail

    if response.status_code >= 500:
        logger.error("API error", extra={"code": code, "status": response.status_code})

    response.data = body
    return response
