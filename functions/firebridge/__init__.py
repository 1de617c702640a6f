"""firebridge: Firestore, Cloud Storage and FCM glue for Cloud Functions.

The push modules (credentials, assertion, token_exchange, fcm_dispatch,
push_pipeline) are not eagerly imported to avoid loading httpx, jwt,
cryptography and secretmanager in functions that only touch storage.
Import them directly from their modules when needed.
"""
from .logging_config import StructuredLogger
from .config import PushConfig
from .errors import (
    FirebridgeError,
    CredentialError,
    CredentialNotFound,
    CredentialMalformed,
    SigningError,
    InvalidKey,
    SignatureFailure,
    TokenError,
    TokenNetworkFailure,
    MalformedTokenResponse,
    DispatchError,
    DispatchNetworkFailure,
    GatewayRejected,
    StoreError,
    StoreNetworkFailure,
    StorePermissionDenied,
    StoreNotFound,
)
from .validation import CredentialValidator, DeviceTokenValidator
from .query_builder import QueryCondition, QueryOperator, build_query
from .document_gateway import DocumentGateway, RecordObject
from .firestore_utils import get_db, reset_db

__all__ = [
    "StructuredLogger",
    "PushConfig",
    "FirebridgeError",
    "CredentialError",
    "CredentialNotFound",
    "CredentialMalformed",
    "SigningError",
    "InvalidKey",
    "SignatureFailure",
    "TokenError",
    "TokenNetworkFailure",
    "MalformedTokenResponse",
    "DispatchError",
    "DispatchNetworkFailure",
    "GatewayRejected",
    "StoreError",
    "StoreNetworkFailure",
    "StorePermissionDenied",
    "StoreNotFound",
    "CredentialValidator",
    "DeviceTokenValidator",
    "QueryCondition",
    "QueryOperator",
    "build_query",
    "DocumentGateway",
    "RecordObject",
    "get_db",
    "reset_db",
]
