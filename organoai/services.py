"""Builds clients, stores and the orchestrator from Settings."""

from typing import Optional

from .api.classification_api import ClassificationAPI
from .api.hosting_api import ImgbbAPI
from .config import Settings
from .core.capture import CaptureStore, ExifLocator, FixedLocator, Locator
from .core.notifications import Notifier
from .core.scanner import Presenter, ScanOrchestrator
from .errors import ConfigError
from .storage.disease_db import DiseaseLookup
from .storage.documents import DocumentStore, SQLiteDocumentStore, SupabaseDocumentStore
from .storage.scan_store import ScanRecordStore


def create_document_store(settings: Settings) -> DocumentStore:
    if settings.storage == "supabase":
        if not settings.supabase_url or not settings.supabase_key:
            raise ConfigError("SUPABASE_URL and SUPABASE_KEY are required for the supabase backend")
        return SupabaseDocumentStore(url=settings.supabase_url, key=settings.supabase_key)
    return SQLiteDocumentStore(settings.database)


def create_classifier(settings: Settings) -> ClassificationAPI:
    if not settings.classifier_url:
        raise ConfigError("ORGANOAI_CLASSIFIER_URL is required")
    return ClassificationAPI(
        settings.classifier_url,
        file_field=settings.classifier_field,
        timeout=settings.timeout,
    )


def create_hosting(settings: Settings) -> ImgbbAPI:
    if not settings.imgbb_api_key:
        raise ConfigError("IMGBB_API_KEY is required")
    return ImgbbAPI(
        settings.imgbb_api_key,
        upload_url=settings.imgbb_upload_url,
        timeout=settings.timeout,
    )


def create_locator(settings: Settings) -> Locator:
    """Configured device position if any, otherwise the photo's EXIF GPS tags."""
    if settings.device_position is not None:
        return FixedLocator(settings.device_position)
    return ExifLocator()


def create_capture_store(settings: Settings) -> CaptureStore:
    return CaptureStore(locator=create_locator(settings))


def create_orchestrator(
    settings: Settings,
    notifier: Optional[Notifier] = None,
    presenter: Optional[Presenter] = None,
    store: Optional[DocumentStore] = None,
) -> ScanOrchestrator:
    store = store or create_document_store(settings)
    return ScanOrchestrator(
        classifier=create_classifier(settings),
        hosting=create_hosting(settings),
        diseases=DiseaseLookup(store),
        scans=ScanRecordStore(store),
        notifier=notifier,
        presenter=presenter,
    )
