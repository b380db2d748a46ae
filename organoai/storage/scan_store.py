"""Per-user scan history stored under users/<uid>/escaneos."""

import logging
from datetime import timezone
from typing import Optional

from ..core.models import ScanRecord
from ..errors import AuthError, InvalidRecordError
from .documents import SERVER_TIMESTAMP, DocumentStore

logger = logging.getLogger(__name__)

SCANS_COLLECTION = "users/{uid}/escaneos"


class ScanRecordStore:
    """Appends and lists the scan records of one user at a time.

    The user identity is passed explicitly; a missing identity is an AuthError.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    @staticmethod
    def _collection(user_id: Optional[str]) -> str:
        if not user_id:
            raise AuthError()
        return SCANS_COLLECTION.format(uid=user_id)

    def save(self, user_id: Optional[str], record: ScanRecord) -> str:
        """Append a record to the user's history. Returns the document id.

        Raises:
            AuthError: If no user is given
            InvalidRecordError: If the record has no image URL or disease type
            StorageError: If the write fails
        """
        collection = self._collection(user_id)
        if not record.image_url:
            raise InvalidRecordError("A scan record needs a hosted image URL")
        if not record.disease_type:
            raise InvalidRecordError("A scan record needs a disease type")

        doc = record.to_document()
        if record.scanned_at.tzinfo is not None:
            doc["fechaEscaneo"] = record.scanned_at.astimezone(timezone.utc).isoformat()
        doc["createdAt"] = SERVER_TIMESTAMP

        doc_id = self.store.add(collection, doc)
        logger.info("Saved scan %s (%s) for user %s", doc_id, record.disease_type, user_id)
        return doc_id

    def list_all(self, user_id: Optional[str]) -> list[ScanRecord]:
        """Return the user's records, most recent scan first.

        Raises:
            AuthError: If no user is given
            StorageError: If the read fails
        """
        collection = self._collection(user_id)
        docs = self.store.query(collection, order_by="fechaEscaneo", descending=True)
        return [ScanRecord.from_document(d) for d in docs]
