"""Disease reference collection: description and treatment text by disease name."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from ..core.models import DiseaseInfo
from .documents import DocumentStore

logger = logging.getLogger(__name__)

DISEASES_COLLECTION = "enfermedad"


class DiseaseLookup:
    """Looks up diseases by exact (case-sensitive) name."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def lookup(self, name: str) -> Optional[DiseaseInfo]:
        """Return the first entry whose `nombre` equals name, or None."""
        docs = self.store.query(DISEASES_COLLECTION, where={"nombre": name}, limit=1)
        if not docs:
            logger.debug("No reference entry for disease %r", name)
            return None
        return DiseaseInfo.from_document(docs[0])

    def add(self, info: DiseaseInfo) -> str:
        return self.store.add(DISEASES_COLLECTION, info.to_document())

    def import_file(self, path: str | Path) -> int:
        """Load reference entries from a YAML list.

        Each item needs `nombre`; `descripcion` and `tratamiento` are optional.
        Names already present are skipped. Returns the number added.
        """
        with open(path, encoding="utf-8") as f:
            entries = yaml.safe_load(f) or []

        if not isinstance(entries, list):
            raise ValueError(f"Expected a list of diseases in {path}")

        added = 0
        for entry in entries:
            info = DiseaseInfo.from_document(entry)
            if self.lookup(info.name) is not None:
                logger.info("Skipping existing disease %r", info.name)
                continue
            self.add(info)
            added += 1
        return added
