"""Classification API client for oregano disease detection.

The remote API accepts an image file and returns the detected diseases along
with an annotated copy of the image.
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..errors import ClassificationAPIError

logger = logging.getLogger(__name__)


class ClassificationResponse(BaseModel):
    """Successful classification reply.

    Both fields are optional: the API does not guarantee either of them.
    """

    model_config = ConfigDict(extra="allow")

    imagen: Optional[str] = None  # base64, optionally "data:<mime>;base64," prefixed
    enfermedades: Optional[list[str]] = None

    @field_validator("enfermedades", mode="before")
    @classmethod
    def _stringify_entries(cls, value: Any):
        if isinstance(value, list):
            return [str(item) for item in value]
        return value


@dataclass(frozen=True)
class ClassificationFailure:
    """Failed classification: transport, HTTP or decode error."""

    message: str
    kind: str = "network"  # "network", "http" or "decode"


class ClassificationAPI:
    """Client for the disease classification API.

    Expected API format:
        POST {url}
        Request body: multipart/form-data with the image in field `file_field`
        Response: {"imagen": "data:image/jpeg;base64,...", "enfermedades": ["Planta: Mildiu", ...]}
    """

    def __init__(
        self,
        url: str,
        file_field: str = "file",
        timeout: Optional[float] = None,
    ):
        """Initialize the classification API client.

        Args:
            url: Prediction endpoint
            file_field: Name of the multipart field carrying the image
            timeout: Request timeout in seconds. None waits indefinitely.
        """
        self.url = url
        self.file_field = file_field
        self.timeout = timeout

    def predict(self, image_path: str | Path) -> ClassificationResponse:
        """Send an image to the API and decode its reply.

        Raises:
            ClassificationAPIError: If the request, the HTTP status or the body is bad
            FileNotFoundError: If the image file doesn't exist
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        mimetype, _ = mimetypes.guess_type(str(image_path))
        logger.debug("Classifying %s", image_path)

        try:
            with open(image_path, "rb") as f:
                response = requests.post(
                    self.url,
                    files={self.file_field: (image_path.name, f, mimetype or "application/octet-stream")},
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise ClassificationAPIError(f"Request failed: {e}", {"kind": "network"})

        if response.status_code != 200:
            raise ClassificationAPIError(
                f"API error {response.status_code}: {response.text}",
                {"kind": "http", "status_code": response.status_code},
            )

        try:
            return ClassificationResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ClassificationAPIError(f"Invalid API response: {e}", {"kind": "decode"})

    def classify(self, image_path: str | Path) -> ClassificationResponse | ClassificationFailure:
        """Like predict(), but failures come back as a ClassificationFailure."""
        try:
            return self.predict(image_path)
        except ClassificationAPIError as e:
            logger.warning("Classification failed for %s: %s", image_path, e)
            return ClassificationFailure(e.message, e.details.get("kind", "network"))
        except OSError as e:
            logger.warning("Could not read %s: %s", image_path, e)
            return ClassificationFailure(str(e), "network")

    def health_check(self) -> bool:
        """Check if the API is reachable."""
        try:
            response = requests.get(self.url, timeout=5.0)
            return response.status_code < 500
        except requests.RequestException:
            return False


class MockClassificationAPI(ClassificationAPI):
    """Classification API stand-in that answers with canned responses.

    Responses are handed out in order and the last one repeats. An entry may be
    a ClassificationFailure to simulate an error.
    """

    def __init__(self, responses: Optional[list] = None):
        super().__init__(url="http://mock")
        self.responses = list(responses or [
            {"imagen": "data:image/png;base64,iVBORw0KGgo=", "enfermedades": ["Planta: Mildiu"]}
        ])
        self.calls: list[str] = []

    def classify(self, image_path: str | Path) -> ClassificationResponse | ClassificationFailure:
        self.calls.append(str(image_path))
        index = min(len(self.calls), len(self.responses)) - 1
        item = self.responses[index]
        if isinstance(item, ClassificationFailure):
            return item
        return ClassificationResponse.model_validate(item)

    def predict(self, image_path: str | Path) -> ClassificationResponse:
        outcome = self.classify(image_path)
        if isinstance(outcome, ClassificationFailure):
            raise ClassificationAPIError(outcome.message, {"kind": outcome.kind})
        return outcome

    def health_check(self) -> bool:
        """Mock always returns True."""
        return True
