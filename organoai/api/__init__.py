"""External API integrations - classification and image hosting clients."""

from .classification_api import (
    ClassificationAPI,
    ClassificationFailure,
    ClassificationResponse,
    MockClassificationAPI,
)
from .hosting_api import ImgbbAPI, decode_image, strip_data_url_prefix

__all__ = [
    "ClassificationAPI",
    "ClassificationFailure",
    "ClassificationResponse",
    "MockClassificationAPI",
    "ImgbbAPI",
    "decode_image",
    "strip_data_url_prefix",
]
