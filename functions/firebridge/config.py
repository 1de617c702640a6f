"""Configuration for the push pipeline.

A ``PushConfig`` is built once by the caller and handed to the pipeline
functions; nothing in firebridge reads process-wide state behind the
caller's back.
"""
import os
from dataclasses import dataclass, replace
from typing import Optional

FCM_API_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
DEFAULT_HTTP_TIMEOUT = 10.0


@dataclass(frozen=True)
class PushConfig:
    """Where to find the service account and where to send messages.

    Exactly one of ``credential_path`` or ``credential_secret_id`` is
    normally set; the file path wins when both are.
    """

    credential_path: Optional[str] = None
    credential_secret_id: Optional[str] = None
    project_id: str = ""
    fcm_api_url: str = FCM_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, **overrides) -> "PushConfig":
        """Build a config from environment variables.

        Recognised variables:
            FIREBRIDGE_CREDENTIAL_PATH: service-account JSON file
            FIREBRIDGE_CREDENTIAL_SECRET: Secret Manager secret holding it
            GOOGLE_CLOUD_PROJECT: FCM project id
            FCM_API_URL: send endpoint template with ``{project_id}``
            FIREBRIDGE_HTTP_TIMEOUT: per-request timeout in seconds
        """
        timeout = os.environ.get("FIREBRIDGE_HTTP_TIMEOUT")
        config = cls(
            credential_path=os.environ.get("FIREBRIDGE_CREDENTIAL_PATH"),
            credential_secret_id=os.environ.get(
                "FIREBRIDGE_CREDENTIAL_SECRET"),
            project_id=os.environ.get("GOOGLE_CLOUD_PROJECT", ""),
            fcm_api_url=os.environ.get("FCM_API_URL", FCM_API_URL),
            http_timeout=float(timeout) if timeout else DEFAULT_HTTP_TIMEOUT,
        )
        return replace(config, **overrides) if overrides else config
