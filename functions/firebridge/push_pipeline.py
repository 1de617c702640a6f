"""End-to-end authenticated push sending.

Runs credential loading, assertion signing, token exchange and message
dispatch in order. Each stage needs the previous stage's output, so the
first failure ends the run and its error reaches the caller unchanged.
A fresh token is minted on every call.
"""
import enum
from typing import Optional

import httpx

from .assertion import sign_assertion
from .config import PushConfig
from .credentials import (
    ServiceAccountCredential,
    load_credential,
    load_credential_from_secret,
)
from .errors import CredentialMalformed, CredentialNotFound, FirebridgeError
from .fcm_dispatch import PushMessage, send_push_message
from .logging_config import StructuredLogger
from .token_exchange import AccessToken, exchange_assertion

logger = StructuredLogger("push-pipeline")


class PipelineState(enum.Enum):
    IDLE = "idle"
    CREDENTIAL_LOADED = "credential_loaded"
    ASSERTION_SIGNED = "assertion_signed"
    TOKEN_ACQUIRED = "token_acquired"
    MESSAGE_SENT = "message_sent"


def load_configured_credential(config: PushConfig) -> ServiceAccountCredential:
    """Load the service account named by ``config``."""
    if config.credential_path:
        return load_credential(config.credential_path)
    if config.credential_secret_id:
        return load_credential_from_secret(
            config.credential_secret_id, config.project_id)
    raise CredentialNotFound("No credential path or secret configured")


async def fetch_access_token(
    config: PushConfig,
    now: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> AccessToken:
    """Mint a bearer token for the configured service account."""
    credential = load_configured_credential(config)
    assertion = sign_assertion(credential, now)
    return await exchange_assertion(
        assertion, credential.token_endpoint_uri,
        client=client, timeout=config.http_timeout)


async def send_notification(
    config: PushConfig,
    message: PushMessage,
    now: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> PipelineState:
    """Send ``message`` with a freshly minted access token.

    Args:
        config: Credential source, project and endpoint settings
        message: Message to deliver
        now: Assertion issue time (defaults to the current time)
        client: Optional AsyncClient used for both HTTP requests

    Returns:
        PipelineState.MESSAGE_SENT

    Raises:
        FirebridgeError: the error of the first failing stage; its
            ``stage`` attribute names the step
    """
    state = PipelineState.IDLE
    try:
        credential = load_configured_credential(config)
        project_id = config.project_id or credential.project_id
        if not project_id:
            raise CredentialMalformed(
                "No FCM project id in config or credential")
        state = PipelineState.CREDENTIAL_LOADED

        assertion = sign_assertion(credential, now)
        state = PipelineState.ASSERTION_SIGNED

        access_token = await exchange_assertion(
            assertion, credential.token_endpoint_uri,
            client=client, timeout=config.http_timeout)
        state = PipelineState.TOKEN_ACQUIRED

        await send_push_message(
            message, access_token, project_id,
            client=client, api_url=config.fcm_api_url,
            timeout=config.http_timeout)
        state = PipelineState.MESSAGE_SENT
    except FirebridgeError as e:
        logger.error("Push pipeline aborted", stage=e.stage,
                     reached=state.value, error=e.message)
        raise

    logger.info("Push pipeline complete", project_id=project_id)
    return state
