"""Exception hierarchy shared by the OrganoAI clients, stores and pipeline."""

from typing import Any, Optional


class OrganoAIError(Exception):
    """Base class for every error the scan pipeline knows how to report."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(OrganoAIError):
    """Raised when configuration is missing or invalid."""
    pass


class AuthError(OrganoAIError):
    """Raised when a per-user operation runs without an authenticated user."""

    def __init__(self, message: str = "Usuario no autenticado", details: Optional[dict] = None):
        super().__init__(message, details)


class ClassificationAPIError(OrganoAIError):
    """Raised when the classification API call fails."""
    pass


class UploadError(OrganoAIError):
    """Raised when an image cannot be uploaded to the hosting API."""
    pass


class MissingImageError(UploadError):
    """Raised when a classification response carries no image to host."""

    def __init__(
        self,
        message: str = "No se encontró la imagen en la respuesta de la API.",
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)


class StorageError(OrganoAIError):
    """Raised when the document store fails to read or write."""
    pass


class InvalidRecordError(OrganoAIError, ValueError):
    """Raised when a scan record is missing a field required for storage."""
    pass
