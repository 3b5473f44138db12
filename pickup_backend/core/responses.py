# core/responses.py

"""
UNIFORM API ENVELOPE

Every endpoint answers with the same top-level shape:

    {"success": true,  "data": ..., "message": "..."}
    {"success": false, "message": "...", "code": "...", "errors": {...}}

Clients branch on `success` and surface `message` as-is.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response


def success_response(*, data=None, message: str = "", http_status: int = status.HTTP_200_OK):
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return Response(body, status=http_status)


def error_response(*, code: str, message: str, http_status: int, errors=None):
    body = {"success": False, "message": message, "code": code}
    if errors:
        body["errors"] = errors
    return Response(body, status=http_status)


class EnvelopeMixin:
    """
    Wraps DRF generic/viewset responses into the success envelope.

    Error responses are already enveloped by core.exceptions, so only 2xx
    payloads are wrapped here. 204 responses become 200 so the client still
    gets {"success": true, "message": ...}.
    """

    envelope_messages: dict[str, str] = {}

    def finalize_response(self, request, response, *args, **kwargs):
        if (
            isinstance(response, Response)
            and 200 <= response.status_code < 300
            and not _is_enveloped(response.data)
        ):
            action = getattr(self, "action", None) or request.method.lower()
            message = self.envelope_messages.get(action, "")
            if response.status_code == status.HTTP_204_NO_CONTENT:
                response.status_code = status.HTTP_200_OK
            response.data = {"success": True, "data": response.data, "message": message}
        return super().finalize_response(request, response, *args, **kwargs)


def _is_enveloped(data) -> bool:
    return isinstance(data, dict) and isinstance(data.get("success"), bool)
