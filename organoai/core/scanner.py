"""Scan orchestration: classify a batch of pending images, then save accepted results.

A scan runs in two phases. `scan()` classifies every pending image in order
and hands the results to the presenter. `save()` is then called once per
result the user chooses to keep: it hosts the image, resolves the disease
text, shows it and persists the record.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, Optional, Protocol

from ..api.classification_api import ClassificationAPI
from ..api.hosting_api import ImgbbAPI
from ..errors import MissingImageError, OrganoAIError
from ..storage.disease_db import DiseaseLookup
from ..storage.scan_store import ScanRecordStore
from .diseases import default_texts, extract_disease_type, needs_lookup
from .models import CapturedImage, ScanRecord, ScanResult
from .notifications import SCAN_COMPLETE, SCAN_STARTED, LoggingNotifier, Notifier, notify

logger = logging.getLogger(__name__)

NOTHING_TO_SCAN = "No hay imágenes para escanear"
SAVE_SUCCEEDED = "Escaneo guardado exitosamente."
SAVE_FAILED = "Error al guardar escaneo"


class ScanState(Enum):
    IDLE = "idle"
    NOTIFYING = "notifying"
    CLASSIFYING = "classifying"
    PRESENTING = "presenting"
    AWAITING_SAVE = "awaiting_save"
    UPLOADING = "uploading"
    ENRICHING = "enriching"
    PERSISTING = "persisting"
    NOTIFIED = "notified"


class Presenter(Protocol):
    """What the pipeline needs from the user interface."""

    def show_message(self, text: str) -> None:
        """Transient, non-blocking status message."""
        ...

    def show_results(self, results: list[ScanResult]) -> None:
        """Display the batch results; saving happens later, per result."""
        ...

    def confirm(self, record: ScanRecord) -> None:
        """Show the resolved disease and block until the user dismisses it."""
        ...


class LoggingPresenter:
    """Presenter for headless use: everything goes to the log."""

    def show_message(self, text: str) -> None:
        logger.info(text)

    def show_results(self, results: list[ScanResult]) -> None:
        logger.info("%s", ScanReport(results))

    def confirm(self, record: ScanRecord) -> None:
        logger.info(
            "Enfermedad detectada: %s | Descripción: %s | Tratamiento: %s",
            record.disease_type, record.description, record.treatment,
        )


@dataclass
class ScanReport:
    """Summary of one classified batch."""

    results: list[ScanResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[ScanResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[ScanResult]:
        return [r for r in self.results if not r.ok]

    def __str__(self) -> str:
        if not self.results:
            return NOTHING_TO_SCAN
        lines = [f"Images scanned: {len(self.results)}"]
        if self.failed:
            lines.append(f"Errors: {len(self.failed)}")
        return "\n".join(lines)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanOrchestrator:
    """Runs the capture → classify → save pipeline."""

    def __init__(
        self,
        classifier: ClassificationAPI,
        hosting: ImgbbAPI,
        diseases: DiseaseLookup,
        scans: ScanRecordStore,
        notifier: Optional[Notifier] = None,
        presenter: Optional[Presenter] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the orchestrator.

        Args:
            classifier: Client for the classification API
            hosting: Client for the image hosting API
            diseases: Disease reference lookup
            scans: Per-user scan history store
            notifier: Receives the start/complete notifications
            presenter: User interface callbacks
            clock: Returns the scan timestamp
        """
        self.classifier = classifier
        self.hosting = hosting
        self.diseases = diseases
        self.scans = scans
        self.notifier = notifier or LoggingNotifier()
        self.presenter = presenter or LoggingPresenter()
        self.clock = clock
        self._state = ScanState.IDLE

    @property
    def state(self) -> ScanState:
        return self._state

    def scan(
        self,
        images: Iterable[CapturedImage],
        progress: Optional[Callable[[ScanResult], None]] = None,
    ) -> list[ScanResult]:
        """Classify every pending image, one after the other.

        Returns one result per image, in input order. A failed classification
        is recorded in its result and does not stop the batch.

        Args:
            images: Pending images, usually a CaptureStore snapshot
            progress: Called with each result as soon as it is available
        """
        images = list(images)
        if not images:
            self.presenter.show_message(NOTHING_TO_SCAN)
            self._state = ScanState.IDLE
            return []

        self._state = ScanState.NOTIFYING
        notify(self.notifier, *SCAN_STARTED)

        self._state = ScanState.CLASSIFYING
        results = []
        for image in images:
            outcome = self.classifier.classify(image.local_path)
            result = ScanResult(image=image, outcome=outcome)
            results.append(result)
            if progress is not None:
                progress(result)

        notify(self.notifier, *SCAN_COMPLETE)

        self._state = ScanState.PRESENTING
        self.presenter.show_results(results)
        return results

    def describe(self, disease_type: str) -> tuple[str, str]:
        """Return (description, treatment) for a disease type."""
        description, treatment = default_texts(disease_type)
        if needs_lookup(disease_type):
            info = self.diseases.lookup(disease_type)
            if info is not None:
                description, treatment = info.description, info.treatment
        return description, treatment

    def save(self, result: ScanResult, user_id: Optional[str]) -> Optional[ScanRecord]:
        """Host, enrich and persist one result.

        Errors are reported through the presenter and None is returned. An
        image already hosted when a later step fails stays hosted.
        """
        self._state = ScanState.AWAITING_SAVE
        try:
            record = self._save(result, user_id)
        except OrganoAIError as e:
            logger.error("Saving scan of %s failed: %s", result.image.local_path, e.to_dict())
            self.presenter.show_message(f"{SAVE_FAILED}: {e.message}")
            return None
        finally:
            self._state = ScanState.NOTIFIED

        self.presenter.show_message(SAVE_SUCCEEDED)
        return record

    def _save(self, result: ScanResult, user_id: Optional[str]) -> ScanRecord:
        response = result.response
        if response is None or not response.imagen:
            raise MissingImageError()

        scanned_at = self.clock()

        self._state = ScanState.UPLOADING
        image_url = self.hosting.upload_from_response(response)

        self._state = ScanState.ENRICHING
        disease_type = extract_disease_type(response.enfermedades)
        logger.info("Extracted disease type: %s", disease_type)
        description, treatment = self.describe(disease_type)

        record = ScanRecord(
            disease_type=disease_type,
            description=description,
            treatment=treatment,
            scanned_at=scanned_at,
            image_url=image_url,
            latitude=result.image.latitude,
            longitude=result.image.longitude,
        )
        self.presenter.confirm(record)

        self._state = ScanState.PERSISTING
        self.scans.save(user_id, record)
        return record
