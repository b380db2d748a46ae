"""ImgBB client for hosting the annotated images returned by the classifier.

A scan record only ever stores the public URL produced here, never a local path.
"""

import base64
import binascii
import logging
from typing import Optional

import requests

from ..errors import MissingImageError, UploadError
from .classification_api import ClassificationResponse

logger = logging.getLogger(__name__)


def strip_data_url_prefix(image: str) -> str:
    """Drop a "data:<mime>;base64," header, splitting on the first comma.

    Strings without a comma are returned unchanged.
    """
    _, sep, rest = image.partition(",")
    return rest if sep else image


def decode_image(response: ClassificationResponse) -> Optional[bytes]:
    """Decode the image carried by a classification response.

    Returns None if there is no image or the base64 is invalid.
    """
    if not response.imagen:
        return None
    try:
        return base64.b64decode(strip_data_url_prefix(response.imagen), validate=True)
    except (binascii.Error, ValueError):
        return None


class ImgbbAPI:
    """Client for the ImgBB upload API.

    Expected API format:
        POST {upload_url}?key={api_key}
        Request body: form field "image" = base64 data without prefix
        Response: {"success": true, "data": {"url": "..."}} or {"error": {"message": "..."}}
    """

    def __init__(
        self,
        api_key: str,
        upload_url: str = "https://api.imgbb.com/1/upload",
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.upload_url = upload_url
        self.timeout = timeout

    def upload(self, base64_image: Optional[str]) -> str:
        """Upload a base64 image and return its public URL.

        Raises:
            UploadError: If the image is empty, the request fails or ImgBB reports an error
        """
        if not base64_image:
            raise UploadError("No image to upload.")

        payload = strip_data_url_prefix(base64_image)

        try:
            response = requests.post(
                self.upload_url,
                params={"key": self.api_key},
                data={"image": payload},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UploadError(f"Error al subir la imagen a ImgBB: {e}")

        if response.status_code != 200:
            raise UploadError(
                f"Error HTTP: {response.status_code}",
                {"status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UploadError(f"Invalid ImgBB response: {e}")

        if not isinstance(data, dict):
            raise UploadError("Invalid ImgBB response", {"body": response.text})

        if data.get("success") is not True:
            error = data.get("error")
            message = error.get("message") if isinstance(error, dict) else error
            raise UploadError(f"Error al subir la imagen: {message or 'unknown error'}")

        image = data.get("data")
        url = image.get("url") if isinstance(image, dict) else None
        if not isinstance(url, str) or not url:
            raise UploadError("ImgBB response has no image URL.")

        logger.info("Uploaded image to %s", url)
        return url

    def upload_from_response(self, response: ClassificationResponse) -> str:
        """Host the image of a classification response.

        Raises:
            MissingImageError: If the response carries no image
            UploadError: If the upload fails
        """
        if not response.imagen:
            raise MissingImageError()
        return self.upload(response.imagen)
