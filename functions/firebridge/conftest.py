"""Shared pytest fixtures for firebridge tests."""
import json
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcp_exceptions

TOKEN_URI = "https://oauth2.example/token"


def make_rsa_key_pem():
    """Generate a real RSA PKCS#8 PEM for signing tests."""
    from cryptography.hazmat.primitives.asymmetric import rsa
    from cryptography.hazmat.primitives import serialization

    private_key = rsa.generate_private_key(
        public_exponent=65537, key_size=2048)
    return private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption()
    ).decode()


@pytest.fixture(scope="session")
def rsa_key_pem():
    return make_rsa_key_pem()


@pytest.fixture
def service_account_info(rsa_key_pem):
    """A complete service-account key file as a dict."""
    return {
        "type": "service_account",
        "project_id": "demo-project",
        "private_key_id": "0123456789abcdef",
        "private_key": rsa_key_pem,
        "client_email": "pusher@demo-project.iam.gserviceaccount.com",
        "client_id": "112233445566778899",
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": TOKEN_URI,
        "auth_provider_x509_cert_url":
            "https://www.googleapis.com/oauth2/v1/certs",
        "client_x509_cert_url":
            "https://www.googleapis.com/robot/v1/metadata/x509/pusher",
    }


@pytest.fixture
def credential_file(tmp_path, service_account_info):
    path = tmp_path / "service-account.json"
    path.write_text(json.dumps(service_account_info))
    return str(path)


@pytest.fixture
def credential(service_account_info):
    from firebridge.credentials import parse_credential
    return parse_credential(service_account_info)


@pytest.fixture
def mock_secret_manager(service_account_info):
    """Secret Manager client serving the service-account key."""
    client = MagicMock()

    def access(request):
        if request["name"] == (
            "projects/demo-project/secrets/fcm-service-account/versions/latest"
        ):
            resp = MagicMock()
            resp.payload.data = json.dumps(service_account_info).encode()
            return resp
        raise gcp_exceptions.NotFound("Secret not found")

    client.access_secret_version.side_effect = access
    return client


# In-memory Firestore


def _matches(data, field_filter):
    if field_filter.field_path not in data:
        return False
    actual = data[field_filter.field_path]
    expected = field_filter.value
    op = field_filter.op_string
    if op == "==":
        return actual == expected
    if op == "!=":
        return actual != expected
    if op == "<":
        return actual < expected
    if op == "<=":
        return actual <= expected
    if op == ">":
        return actual > expected
    if op == ">=":
        return actual >= expected
    if op == "array_contains":
        return isinstance(actual, list) and expected in actual
    raise AssertionError(f"unexpected operator {op}")


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, db, collection_name, doc_id):
        self.db = db
        self.collection_name = collection_name
        self.id = doc_id

    async def set(self, data):
        self.db.data.setdefault(self.collection_name, {})[self.id] = dict(data)

    async def delete(self):
        self.db.data.get(self.collection_name, {}).pop(self.id, None)

    async def get(self):
        docs = self.db.data.get(self.collection_name, {})
        return FakeSnapshot(self.id, docs.get(self.id))


class FakeQuery:
    def __init__(self, db, collection_name, filters=()):
        self.db = db
        self.collection_name = collection_name
        self.filters = tuple(filters)

    def where(self, filter=None):
        return FakeQuery(self.db, self.collection_name,
                         self.filters + (filter,))

    async def stream(self):
        docs = self.db.data.get(self.collection_name, {})
        for doc_id, data in list(docs.items()):
            if all(_matches(data, f) for f in self.filters):
                yield FakeSnapshot(doc_id, data)


class FakeCollection(FakeQuery):
    def document(self, doc_id):
        return FakeDocumentRef(self.db, self.collection_name, doc_id)


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.deletes = []

    def delete(self, ref):
        self.deletes.append(ref)

    async def commit(self):
        if self.db.fail_commit:
            raise gcp_exceptions.ServiceUnavailable("commit failed")
        for ref in self.deletes:
            await ref.delete()


class FakeFirestore:
    """Async Firestore client double holding documents in dicts."""

    def __init__(self):
        self.data = {}
        self.fail_commit = False

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)


@pytest.fixture
def fake_firestore():
    return FakeFirestore()


class Record:
    """Minimal record satisfying the RecordObject protocol."""

    def __init__(self, record_id, **fields):
        self.record_id = record_id
        self.fields = fields

    @property
    def id(self):
        return self.record_id

    def to_dict(self):
        return {"recordId": self.record_id, **self.fields}


@pytest.fixture
def make_record():
    return Record
