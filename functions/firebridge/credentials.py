"""Service-account credential loading.

Reads a Google service-account key (the JSON file generated from
Firebase console -> Project settings -> Service accounts) either from disk
or from Secret Manager, and reduces it to the fields needed to mint access
tokens.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from google.api_core import exceptions as gcp_exceptions
from google.cloud import secretmanager

from .errors import CredentialMalformed, CredentialNotFound
from .logging_config import StructuredLogger
from .validation import CredentialValidator

logger = StructuredLogger("credentials")


@dataclass(frozen=True)
class ServiceAccountCredential:
    issuer_email: str
    private_key_pem: str
    token_endpoint_uri: str
    project_id: str = ""

    def __repr__(self) -> str:
        # Keep the private key out of tracebacks and logs
        return (f"ServiceAccountCredential(issuer_email={self.issuer_email!r}, "
                f"token_endpoint_uri={self.token_endpoint_uri!r}, "
                f"project_id={self.project_id!r})")


def parse_credential(raw: Union[str, bytes, dict]) -> ServiceAccountCredential:
    """Parse a service-account key blob.

    Args:
        raw: JSON text, UTF-8 bytes, or an already decoded mapping

    Returns:
        The parsed credential

    Raises:
        CredentialMalformed: content is not JSON or lacks a required field
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            raise CredentialMalformed(
                "Credential is not valid JSON") from e
    else:
        data = raw

    problems = CredentialValidator.problems(data)
    if problems:
        raise CredentialMalformed(
            "Unusable service-account credential: " + "; ".join(problems))

    return ServiceAccountCredential(
        issuer_email=data["client_email"],
        private_key_pem=data["private_key"],
        token_endpoint_uri=data["token_uri"],
        project_id=data["project_id"],
    )


def load_credential(path: str) -> ServiceAccountCredential:
    """Load a service-account key file from disk.

    Raises:
        CredentialNotFound: the file is absent or unreadable
        CredentialMalformed: the file does not hold a usable key
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except FileNotFoundError as e:
        raise CredentialNotFound(f"Credential file not found: {path}") from e
    except OSError as e:
        raise CredentialNotFound(
            f"Credential file unreadable: {path}") from e

    credential = parse_credential(raw)
    logger.debug("Loaded service-account credential",
                 issuer=credential.issuer_email)
    return credential


def load_credential_from_secret(
    secret_id: str, project_id: str, client: Optional[Any] = None
) -> ServiceAccountCredential:
    """Load a service-account key stored as a Secret Manager secret.

    Args:
        secret_id: Secret name holding the key file contents
        project_id: Project that owns the secret
        client: Optional SecretManagerServiceClient (for tests)

    Raises:
        CredentialNotFound: the secret or its latest version is unavailable
        CredentialMalformed: the secret does not hold a usable key
    """
    name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
    if client is None:
        client = secretmanager.SecretManagerServiceClient()

    try:
        response = client.access_secret_version(request={"name": name})
    except gcp_exceptions.NotFound as e:
        raise CredentialNotFound(f"Secret not found: {name}") from e
    except gcp_exceptions.GoogleAPIError as e:
        logger.error("Failed to read credential secret",
                     secret=name, error=str(e))
        raise CredentialNotFound(f"Secret unavailable: {name}") from e

    return parse_credential(response.payload.data)
