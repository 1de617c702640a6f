"""
Push Sender Cloud Function

HTTP endpoint that sends one FCM notification to one device, authenticating
with the service account configured for the function.
"""
import asyncio

import functions_framework
from flask import Request

from firebridge.config import PushConfig
from firebridge.errors import FirebridgeError
from firebridge.fcm_dispatch import PushMessage
from firebridge.http_utils import (
    error_response,
    firebridge_error_response,
    handle_cors_preflight,
    json_response,
)
from firebridge.logging_config import StructuredLogger
from firebridge.push_pipeline import send_notification
from firebridge.validation import DeviceTokenValidator

logger = StructuredLogger("push-sender")


def parse_message(data: dict):
    """Build a PushMessage from a request body.

    Returns:
        Tuple of (message, error); exactly one is None
    """
    for name in ("token", "title", "body"):
        if not isinstance(data.get(name, ""), str):
            return None, f"{name} must be a string"

    token = (data.get("token") or "").strip()
    title = (data.get("title") or "").strip()
    body = (data.get("body") or "").strip()
    extra = data.get("data") or {}

    if not DeviceTokenValidator.is_valid_fcm_token(token):
        return None, "Invalid FCM token format"
    if not title or not body:
        return None, "Both title and body are required"
    if not isinstance(extra, dict):
        return None, "data must be an object"

    return PushMessage(token=token, title=title, body=body,
                       data={str(k): str(v) for k, v in extra.items()}), None


@functions_framework.http
def send_push(request: Request):
    """
    HTTP endpoint to send a push notification.

    POST /send-push
    Body: {
        "token": "fcm_registration_token",
        "title": "Notification title",
        "body": "Notification body",
        "data": {"key": "value"} (optional)
    }

    Returns:
        200: {"success": true}
        400: {"error": "..."} for invalid input
        405: {"error": "Method not allowed"}
        500/502: {"error": "...", "stage": "..."} when the pipeline fails
    """
    if request.method == "OPTIONS":
        return handle_cors_preflight()

    if request.method != "POST":
        return error_response("Method not allowed", 405)

    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return error_response("Invalid JSON body", 400)

    message, problem = parse_message(data)
    if problem:
        return error_response(problem, 400)

    config = PushConfig.from_env()
    try:
        asyncio.run(send_notification(config, message))
    except FirebridgeError as e:
        logger.error("Push send failed", stage=e.stage)
        return firebridge_error_response(e)

    return json_response({"success": True, "message": "Notification sent"})
