"""Tests for the lazily created Google Cloud clients."""
from unittest.mock import patch, MagicMock

from firebridge import firestore_utils


class TestGetDb:
    """Tests for get_db() function."""

    def setup_method(self):
        firestore_utils.reset_db()

    def teardown_method(self):
        firestore_utils.reset_db()

    def test_returns_async_client(self):
        with patch("google.cloud.firestore.AsyncClient") as mock_cls:
            result = firestore_utils.get_db()
        assert result is mock_cls.return_value
        mock_cls.assert_called_once()

    def test_caches_client(self):
        with patch("google.cloud.firestore.AsyncClient") as mock_cls:
            first = firestore_utils.get_db()
            second = firestore_utils.get_db()
        assert first is second
        mock_cls.assert_called_once()

    def test_reset_clears_cache(self):
        with patch("google.cloud.firestore.AsyncClient") as mock_cls:
            mock_cls.side_effect = [MagicMock(), MagicMock()]
            first = firestore_utils.get_db()
            firestore_utils.reset_db()
            second = firestore_utils.get_db()
        assert first is not second
        assert mock_cls.call_count == 2


class TestGetStorageClient:

    def setup_method(self):
        firestore_utils.reset_storage_client()

    def teardown_method(self):
        firestore_utils.reset_storage_client()

    def test_caches_client(self):
        with patch("google.cloud.storage.Client") as mock_cls:
            first = firestore_utils.get_storage_client()
            second = firestore_utils.get_storage_client()
        assert first is second is mock_cls.return_value
        mock_cls.assert_called_once()
