"""OAuth2 JWT-bearer token exchange."""
from dataclasses import dataclass
from typing import Optional

import httpx

from .assertion import SignedAssertion
from .config import DEFAULT_HTTP_TIMEOUT
from .errors import MalformedTokenResponse, TokenNetworkFailure
from .logging_config import StructuredLogger

logger = StructuredLogger("token-exchange")

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"


@dataclass(frozen=True)
class AccessToken:
    token: str
    expires_in: Optional[int] = None
    token_type: str = "Bearer"

    def __str__(self) -> str:
        return self.token

    def __repr__(self) -> str:
        return f"AccessToken(expires_in={self.expires_in!r}, token_type={self.token_type!r})"


def _parse_token_response(response: httpx.Response) -> AccessToken:
    try:
        data = response.json()
    except ValueError as e:
        raise MalformedTokenResponse(
            "Token endpoint returned invalid JSON") from e

    if not isinstance(data, dict):
        raise MalformedTokenResponse("Token response is not a JSON object")

    token = data.get("access_token")
    if not isinstance(token, str) or not token:
        raise MalformedTokenResponse("Token response has no access_token")

    expires_in = data.get("expires_in")
    token_type = data.get("token_type")
    return AccessToken(
        token=token,
        expires_in=int(expires_in) if isinstance(expires_in, (int, float)) else None,
        token_type=token_type if isinstance(token_type, str) and token_type else "Bearer",
    )


async def exchange_assertion(
    assertion,
    token_endpoint_uri: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> AccessToken:
    """Trade a signed assertion for an access token.

    Sends exactly one POST; the token is returned to the caller and not
    kept anywhere.

    Args:
        assertion: A SignedAssertion or the compact JWT string
        token_endpoint_uri: OAuth2 token endpoint (``token_uri``)
        client: Optional shared AsyncClient; a short-lived one is opened
            otherwise
        timeout: Request timeout in seconds

    Raises:
        TokenNetworkFailure: transport error or non-2xx status
        MalformedTokenResponse: body lacks a usable access_token
    """
    jwt_token = assertion.token if isinstance(assertion, SignedAssertion) else str(assertion)
    form = {"grant_type": JWT_BEARER_GRANT, "assertion": jwt_token}
    headers = {"Content-Type": "application/x-www-form-urlencoded"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.post(
                    token_endpoint_uri, data=form, headers=headers)
        else:
            response = await client.post(
                token_endpoint_uri, data=form, headers=headers,
                timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("Token request failed", error=str(e))
        raise TokenNetworkFailure(
            f"Token request to {token_endpoint_uri} failed: {e}") from e

    if not response.is_success:
        logger.error("Token endpoint rejected assertion",
                     status_code=response.status_code)
        raise TokenNetworkFailure(
            f"Token endpoint returned HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

    access_token = _parse_token_response(response)
    logger.info("Access token acquired", expires_in=access_token.expires_in)
    return access_token
