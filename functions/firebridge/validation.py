"""Input validation for credentials and push targets."""
import re
from typing import Any, Mapping, Optional


class CredentialValidator:
    """Validator for Google service-account key files.

    A key file downloaded from the console carries ten string fields. Only
    ``client_email``, ``private_key`` and ``token_uri`` are used to mint
    tokens, but the others must still be present for the file to count as
    a service-account key.
    """

    SERVICE_ACCOUNT_FIELDS = (
        "type",
        "project_id",
        "private_key_id",
        "private_key",
        "client_email",
        "client_id",
        "auth_uri",
        "token_uri",
        "auth_provider_x509_cert_url",
        "client_x509_cert_url",
    )
    REQUIRED_NON_EMPTY = ("client_email", "private_key", "token_uri")

    @classmethod
    def problems(cls, data: Any) -> list:
        """List what is wrong with a decoded key file.

        Args:
            data: The decoded JSON value

        Returns:
            Human-readable problems; empty when the key file is usable
        """
        if not isinstance(data, Mapping):
            return ["credential is not a JSON object"]

        found = []
        for name in cls.SERVICE_ACCOUNT_FIELDS:
            if name not in data:
                found.append(f"missing field: {name}")
            elif not isinstance(data[name], str):
                found.append(f"field is not a string: {name}")
        for name in cls.REQUIRED_NON_EMPTY:
            if isinstance(data.get(name), str) and not data[name].strip():
                found.append(f"empty field: {name}")
        return found


class DeviceTokenValidator:
    """Validator for FCM registration tokens."""

    FCM_TOKEN_MIN_LENGTH = 100
    FCM_TOKEN_MAX_LENGTH = 300
    FCM_TOKEN_PATTERN = re.compile(r'^[A-Za-z0-9_:\-]+$')

    @classmethod
    def is_valid_fcm_token(cls, token: Optional[str]) -> bool:
        """Validate FCM token format.

        Registration tokens are typically 152-163 characters of
        alphanumerics, underscores, colons and hyphens; the bounds here
        leave a safety margin on both sides.
        """
        if not token or not isinstance(token, str):
            return False
        if not cls.FCM_TOKEN_MIN_LENGTH <= len(token) <= cls.FCM_TOKEN_MAX_LENGTH:
            return False
        return bool(cls.FCM_TOKEN_PATTERN.match(token))
