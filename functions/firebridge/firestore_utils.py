"""Lazily created Google Cloud clients.

Clients authenticate with application default credentials. Creating them
is slow, so each is built on first use and then reused; the ``reset_*``
helpers drop the cached instance (for testing).
"""
from google.cloud import firestore
from google.cloud import storage

_db = None
_storage_client = None


def get_db() -> firestore.AsyncClient:
    """Lazy-load and cache the async Firestore client."""
    global _db
    if _db is None:
        _db = firestore.AsyncClient()
    return _db


def reset_db():
    global _db
    _db = None


def get_storage_client() -> storage.Client:
    """Lazy-load and cache the Cloud Storage client."""
    global _storage_client
    if _storage_client is None:
        _storage_client = storage.Client()
    return _storage_client


def reset_storage_client():
    global _storage_client
    _storage_client = None
