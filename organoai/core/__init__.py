"""Core business logic - data models, pending images and the scan pipeline."""

from .models import CapturedImage, Coordinates, DiseaseInfo, ScanRecord, ScanResult
from .capture import CaptureStore
from .scanner import ScanOrchestrator, ScanReport, ScanState

__all__ = [
    "CapturedImage",
    "Coordinates",
    "DiseaseInfo",
    "ScanRecord",
    "ScanResult",
    "CaptureStore",
    "ScanOrchestrator",
    "ScanReport",
    "ScanState",
]
