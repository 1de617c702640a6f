"""HTTP helpers for the Cloud Function entry points.

Common CORS handling, JSON responses, and the mapping from firebridge
errors to HTTP status codes.
"""
from flask import jsonify
from typing import Any, Dict, Tuple

from .errors import (
    CredentialError,
    DispatchNetworkFailure,
    FirebridgeError,
    GatewayRejected,
    SigningError,
    StoreNotFound,
    StorePermissionDenied,
    TokenError,
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "3600",
}


def cors_headers() -> Dict[str, str]:
    return {"Access-Control-Allow-Origin": "*"}


def handle_cors_preflight() -> Tuple[str, int, Dict[str, str]]:
    return ("", 204, CORS_HEADERS)


def json_response(
    data: Dict[str, Any],
    status: int = 200
) -> Tuple[Any, int, Dict[str, str]]:
    """Create a JSON response with CORS headers.

    Returns:
        Tuple of (JSON response, status, headers)
    """
    return (jsonify(data), status, cors_headers())


def error_response(
    message: str,
    status: int = 400,
    **details: Any
) -> Tuple[Any, int, Dict[str, str]]:
    """Create an error JSON response with CORS headers.

    Args:
        message: Error message to return
        status: HTTP status code (default: 400)
        **details: Extra fields merged into the body (e.g. stage)
    """
    body = {"error": message}
    body.update(details)
    return (jsonify(body), status, cors_headers())


def status_for_error(error: FirebridgeError) -> int:
    """HTTP status a function should answer with for ``error``.

    Failures on our side (bad credential or key) are 500; failures of an
    upstream Google service are 502, except store lookups and permission
    problems which keep their own meaning.
    """
    if isinstance(error, (CredentialError, SigningError)):
        return 500
    if isinstance(error, (TokenError, GatewayRejected, DispatchNetworkFailure)):
        return 502
    if isinstance(error, StoreNotFound):
        return 404
    if isinstance(error, StorePermissionDenied):
        return 403
    return 502


def firebridge_error_response(
    error: FirebridgeError
) -> Tuple[Any, int, Dict[str, str]]:
    """Build the error response for a failed pipeline or store call."""
    details = {"stage": error.stage}
    if isinstance(error, GatewayRejected):
        details["upstream_status"] = error.status_code
    return error_response(error.message, status_for_error(error), **details)
