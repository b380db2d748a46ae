"""OrganoAI - classify oregano plant diseases and keep a per-user scan history.

Package structure:
    organoai/
    ├── cli.py              # Command-line interface
    ├── config.py           # Settings from .env, config.yaml and environment
    ├── errors.py           # Exception hierarchy
    ├── services.py         # Wiring of clients, stores and orchestrator
    ├── core/               # Core business logic
    │   ├── models.py       # Data models (CapturedImage, ScanRecord, ...)
    │   ├── capture.py      # Pending image store
    │   ├── diseases.py     # Disease-type extraction
    │   ├── notifications.py
    │   └── scanner.py      # Scan orchestration
    ├── storage/            # Data persistence
    │   ├── documents.py    # SQLite / Supabase document stores
    │   ├── disease_db.py   # Disease reference lookup
    │   └── scan_store.py   # Per-user scan history
    └── api/                # External integrations
        ├── classification_api.py
        └── hosting_api.py  # ImgBB upload client
"""

from .core.models import CapturedImage, Coordinates, DiseaseInfo, ScanRecord, ScanResult
from .core.capture import CaptureStore
from .core.scanner import ScanOrchestrator, ScanReport, ScanState
from .storage.documents import SQLiteDocumentStore, SupabaseDocumentStore
from .storage.disease_db import DiseaseLookup
from .storage.scan_store import ScanRecordStore
from .api.classification_api import (
    ClassificationAPI,
    ClassificationFailure,
    ClassificationResponse,
    MockClassificationAPI,
)
from .api.hosting_api import ImgbbAPI
from .errors import (
    AuthError,
    ClassificationAPIError,
    ConfigError,
    InvalidRecordError,
    MissingImageError,
    OrganoAIError,
    StorageError,
    UploadError,
)

__all__ = [
    # Core
    "CapturedImage",
    "Coordinates",
    "DiseaseInfo",
    "ScanRecord",
    "ScanResult",
    "CaptureStore",
    "ScanOrchestrator",
    "ScanReport",
    "ScanState",
    # Storage
    "SQLiteDocumentStore",
    "SupabaseDocumentStore",
    "DiseaseLookup",
    "ScanRecordStore",
    # API
    "ClassificationAPI",
    "ClassificationFailure",
    "ClassificationResponse",
    "MockClassificationAPI",
    "ImgbbAPI",
    # Errors
    "AuthError",
    "ClassificationAPIError",
    "ConfigError",
    "InvalidRecordError",
    "MissingImageError",
    "OrganoAIError",
    "StorageError",
    "UploadError",
]
