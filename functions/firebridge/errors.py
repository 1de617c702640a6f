"""Error taxonomy for the push pipeline and the storage gateways.

Every error carries the ``stage`` it was raised from so that a caller
receiving a pipeline failure can tell which step aborted it. The
underlying exception, when there is one, is chained as ``__cause__``.
"""
from typing import Optional


class FirebridgeError(Exception):
    """Base class for all firebridge errors."""

    stage = "unknown"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


# Credential loading


class CredentialError(FirebridgeError):
    stage = "credential"


class CredentialNotFound(CredentialError):
    """The credential resource does not exist or cannot be read."""


class CredentialMalformed(CredentialError):
    """The credential content lacks a required field or does not parse."""


# Assertion signing


class SigningError(FirebridgeError):
    stage = "signing"


class InvalidKey(SigningError):
    """Private key material could not be decoded into a usable key."""


class SignatureFailure(SigningError):
    """The JWT could not be signed."""


# Token exchange


class TokenError(FirebridgeError):
    stage = "token_exchange"


class TokenNetworkFailure(TokenError):
    """Transport failure or non-2xx answer from the token endpoint."""

    def __init__(self, message: str = "",
                 status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedTokenResponse(TokenError):
    """Token endpoint answered without a usable ``access_token``."""


# Push dispatch


class DispatchError(FirebridgeError):
    stage = "dispatch"


class DispatchNetworkFailure(DispatchError):
    """The push gateway could not be reached."""


class GatewayRejected(DispatchError):
    """The push gateway answered with a status other than 200."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"Push gateway rejected message: HTTP {status_code}")
        self.status_code = status_code
        self.body = body


# Document and blob stores


class StoreError(FirebridgeError):
    stage = "store"


class StoreNetworkFailure(StoreError):
    """Transport or service failure talking to the store."""


class StorePermissionDenied(StoreError):
    """The caller's identity is not allowed to perform the operation."""


class StoreNotFound(StoreError):
    """The addressed document, bucket or object does not exist."""
