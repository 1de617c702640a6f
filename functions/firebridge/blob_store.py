"""Deletion of uploaded images from Cloud Storage / Firebase Storage."""
import asyncio
from typing import Any, Optional, Tuple
from urllib.parse import unquote, urlparse

from .document_gateway import store_errors
from .logging_config import StructuredLogger

logger = StructuredLogger("blob-store")

FIREBASE_STORAGE_HOST = "firebasestorage.googleapis.com"
PUBLIC_STORAGE_HOST = "storage.googleapis.com"


def parse_blob_locator(locator: str) -> Tuple[str, str]:
    """Split a storage locator into ``(bucket, object_path)``.

    Accepted forms:
        gs://<bucket>/<path>
        https://firebasestorage.googleapis.com/v0/b/<bucket>/o/<quoted path>?...
        https://storage.googleapis.com/<bucket>/<path>

    Raises:
        ValueError: the locator is none of the above
    """
    parsed = urlparse(locator or "")

    if parsed.scheme == "gs":
        bucket, path = parsed.netloc, parsed.path.lstrip("/")
    elif parsed.scheme == "https" and parsed.netloc == FIREBASE_STORAGE_HOST:
        parts = parsed.path.split("/", 5)
        # ['', 'v0', 'b', bucket, 'o', quoted_path]
        if len(parts) != 6 or parts[1:3] != ["v0", "b"] or parts[4] != "o":
            raise ValueError(f"Unrecognised Firebase Storage URL: {locator}")
        bucket, path = parts[3], unquote(parts[5])
    elif parsed.scheme == "https" and parsed.netloc == PUBLIC_STORAGE_HOST:
        bucket, _, path = parsed.path.lstrip("/").partition("/")
        path = unquote(path)
    else:
        raise ValueError(f"Unsupported storage locator: {locator}")

    if not bucket or not path:
        raise ValueError(f"Storage locator lacks bucket or path: {locator}")
    return bucket, path


async def delete_image(locator: str, client: Optional[Any] = None) -> None:
    """Delete a previously uploaded image.

    Args:
        locator: Download URL or gs:// URI handed out at upload time
        client: Optional ``storage.Client`` (defaults to the shared one)

    Raises:
        ValueError: unparseable locator
        StoreNotFound: the object does not exist
        StorePermissionDenied: the service identity may not delete it
        StoreNetworkFailure: any other storage failure
    """
    bucket_name, path = parse_blob_locator(locator)
    if client is None:
        from .firestore_utils import get_storage_client
        client = get_storage_client()

    blob = client.bucket(bucket_name).blob(path)
    with store_errors("delete_image", bucket=bucket_name):
        # The storage client is synchronous
        await asyncio.to_thread(blob.delete)
    logger.info("Image deleted", bucket=bucket_name, path=path)
