"""FCM HTTP v1 message sending."""
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from .config import DEFAULT_HTTP_TIMEOUT, FCM_API_URL
from .errors import DispatchNetworkFailure, GatewayRejected
from .logging_config import StructuredLogger

logger = StructuredLogger("fcm-dispatch")


@dataclass
class PushMessage:
    token: str
    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)


def build_envelope(message: PushMessage) -> dict:
    """Build the FCM v1 request body for ``message``.

    FCM only accepts string values in ``data``, so values are stringified.
    """
    return {
        "message": {
            "token": message.token,
            "notification": {
                "title": message.title,
                "body": message.body,
            },
            "data": {str(k): str(v) for k, v in message.data.items()},
        }
    }


async def send_push_message(
    message: PushMessage,
    access_token,
    project_id: str,
    client: Optional[httpx.AsyncClient] = None,
    api_url: str = FCM_API_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> None:
    """Send one message through FCM.

    Args:
        message: Target device token and content
        access_token: Bearer token (AccessToken or plain string)
        project_id: Firebase project id
        client: Optional shared AsyncClient
        api_url: Send endpoint template with a ``{project_id}`` field
        timeout: Request timeout in seconds

    Raises:
        GatewayRejected: FCM answered with anything but HTTP 200
        DispatchNetworkFailure: FCM could not be reached
    """
    url = api_url.format(project_id=project_id)
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json",
    }
    payload = build_envelope(message)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.post(
                    url, headers=headers, json=payload)
        else:
            response = await client.post(
                url, headers=headers, json=payload, timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("Push request failed", project_id=project_id,
                     error=str(e))
        raise DispatchNetworkFailure(f"Push request failed: {e}") from e

    if response.status_code != 200:
        logger.error("Push gateway rejected message",
                     project_id=project_id,
                     status_code=response.status_code)
        raise GatewayRejected(response.status_code, response.text)

    logger.info("Push message sent", project_id=project_id)
