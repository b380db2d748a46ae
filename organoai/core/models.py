"""Data models for captured images, scan results and stored scan records."""

from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional

from ..api.classification_api import ClassificationFailure, ClassificationResponse

DEFAULT_TEXT = "No disponible"


class Coordinates(NamedTuple):
    latitude: float
    longitude: float


@dataclass(frozen=True)
class CapturedImage:
    """A pending local image, with the position where it was taken if known."""

    local_path: str
    coordinates: Optional[Coordinates] = None

    @property
    def latitude(self) -> Optional[float]:
        return self.coordinates.latitude if self.coordinates else None

    @property
    def longitude(self) -> Optional[float]:
        return self.coordinates.longitude if self.coordinates else None


@dataclass(frozen=True)
class DiseaseInfo:
    """Reference text for one disease."""

    name: str
    description: str = DEFAULT_TEXT
    treatment: str = DEFAULT_TEXT

    def to_document(self) -> dict:
        return {
            "nombre": self.name,
            "descripcion": self.description,
            "tratamiento": self.treatment,
        }

    @classmethod
    def from_document(cls, data: dict) -> "DiseaseInfo":
        return cls(
            name=data["nombre"],
            description=data.get("descripcion") or DEFAULT_TEXT,
            treatment=data.get("tratamiento") or DEFAULT_TEXT,
        )


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    # Postgres may return a trailing "Z"
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class ScanRecord:
    """A persisted scan result. Immutable once written."""

    disease_type: str
    description: str
    treatment: str
    scanned_at: datetime
    image_url: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None  # assigned by the store

    def to_document(self) -> dict:
        return {
            "tipoEnfermedad": self.disease_type,
            "descripcion": self.description,
            "tratamiento": self.treatment,
            "fechaEscaneo": self.scanned_at.isoformat(),
            "urlImagen": self.image_url,
            "latitud": self.latitude,
            "longitud": self.longitude,
        }

    @classmethod
    def from_document(cls, data: dict) -> "ScanRecord":
        return cls(
            disease_type=data["tipoEnfermedad"],
            description=data.get("descripcion") or DEFAULT_TEXT,
            treatment=data.get("tratamiento") or DEFAULT_TEXT,
            scanned_at=_parse_timestamp(data["fechaEscaneo"]),
            image_url=data["urlImagen"],
            latitude=data.get("latitud"),
            longitude=data.get("longitud"),
            created_at=_parse_timestamp(data.get("createdAt")),
        )


@dataclass(frozen=True)
class ScanResult:
    """Classification outcome for one pending image."""

    image: CapturedImage
    outcome: ClassificationResponse | ClassificationFailure

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, ClassificationResponse)

    @property
    def response(self) -> Optional[ClassificationResponse]:
        return self.outcome if self.ok else None

    @property
    def error(self) -> Optional[str]:
        return None if self.ok else self.outcome.message

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self.image.coordinates

    @property
    def is_savable(self) -> bool:
        """False for failures and for results with no oregano or no diseases."""
        if not self.ok:
            return False
        text = " ".join(self.outcome.enfermedades or []).lower()
        return "no se detecta oregano" not in text and "no hay enfermedades detectadas" not in text
