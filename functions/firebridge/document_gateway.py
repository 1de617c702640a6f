"""Generic record persistence over a Firestore collection.

A ``DocumentGateway`` is bound to one collection and stores any object
that exposes an ``id`` and a ``to_dict()`` serialization. Reads return the
raw document dictionaries; turning them back into application objects is
left to the caller.
"""
import contextlib
from typing import Any, Dict, Generic, Iterable, List, Optional, Protocol, TypeVar

import google.auth.exceptions
from google.api_core import exceptions as gcp_exceptions

from .errors import StoreNetworkFailure, StoreNotFound, StorePermissionDenied
from .logging_config import StructuredLogger
from .query_builder import build_query

logger = StructuredLogger("document-gateway")

# Firestore refuses batches with more writes than this
MAX_BATCH_WRITES = 500


class RecordObject(Protocol):
    @property
    def id(self) -> str: ...

    def to_dict(self) -> Dict[str, Any]: ...


T = TypeVar("T", bound=RecordObject)


@contextlib.contextmanager
def store_errors(action: str, **fields: Any):
    """Translate Google client errors raised inside the block."""
    try:
        yield
    except gcp_exceptions.NotFound as e:
        raise StoreNotFound(f"{action}: not found") from e
    except (gcp_exceptions.PermissionDenied, gcp_exceptions.Forbidden,
            gcp_exceptions.Unauthenticated) as e:
        logger.error("Store permission denied", action=action,
                     error=str(e), **fields)
        raise StorePermissionDenied(f"{action}: permission denied") from e
    except (gcp_exceptions.GoogleAPIError,
            google.auth.exceptions.TransportError) as e:
        logger.error("Store request failed", action=action,
                     error=str(e), **fields)
        raise StoreNetworkFailure(f"{action}: {e}") from e


class DocumentGateway(Generic[T]):
    """Write, delete and fetch records in one Firestore collection.

    Args:
        collection_name: Firestore collection holding the records
        db: Optional ``firestore.AsyncClient`` (defaults to the shared one)
    """

    def __init__(self, collection_name: str, db: Optional[Any] = None):
        if db is None:
            from .firestore_utils import get_db
            db = get_db()
        self.collection_name = collection_name
        self.db = db

    @property
    def collection(self):
        return self.db.collection(self.collection_name)

    async def write(self, record: T) -> None:
        """Store ``record`` under its id, replacing any existing document."""
        with store_errors("write", collection=self.collection_name):
            await self.collection.document(record.id).set(record.to_dict())
        logger.debug("Record written", collection=self.collection_name,
                     doc_id=record.id)

    async def delete(self, record: T) -> None:
        """Delete ``record``; deleting a missing document is not an error."""
        with store_errors("delete", collection=self.collection_name):
            await self.collection.document(record.id).delete()
        logger.debug("Record deleted", collection=self.collection_name,
                     doc_id=record.id)

    async def delete_many(self, records: Iterable[T]) -> None:
        """Delete ``records`` in a single write batch.

        The batch commits as a unit: either every document is deleted or
        none is. That guarantee is Firestore's; nothing here rolls back.

        Raises:
            ValueError: more records than one batch may hold
        """
        records = list(records)
        if not records:
            return
        if len(records) > MAX_BATCH_WRITES:
            raise ValueError(
                f"Cannot delete {len(records)} records atomically; "
                f"a batch holds at most {MAX_BATCH_WRITES}")

        batch = self.db.batch()
        for record in records:
            batch.delete(self.collection.document(record.id))

        with store_errors("delete_many", collection=self.collection_name,
                          count=len(records)):
            await batch.commit()
        logger.info("Records deleted", collection=self.collection_name,
                    count=len(records))

    async def fetch_one(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document with ``doc_id``, or None if it is absent."""
        with store_errors("fetch_one", collection=self.collection_name):
            snapshot = await self.collection.document(doc_id).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    async def fetch_all(self) -> List[Dict[str, Any]]:
        with store_errors("fetch_all", collection=self.collection_name):
            return [doc.to_dict() async for doc in self.collection.stream()]

    async def fetch_where(self, conditions) -> List[Dict[str, Any]]:
        """Return the documents matching every condition.

        Args:
            conditions: ``(field, QueryOperator, value)`` triples; see
                ``query_builder.build_query``
        """
        query = build_query(self.collection, conditions)
        with store_errors("fetch_where", collection=self.collection_name):
            return [doc.to_dict() async for doc in query.stream()]
