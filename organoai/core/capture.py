"""In-memory store of pending images waiting to be scanned."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol

from PIL import Image

from .models import CapturedImage, Coordinates

logger = logging.getLogger(__name__)

# EXIF tag ids
GPS_INFO_TAG = 0x8825
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


class Camera(Protocol):
    def capture(self) -> Optional[str]:
        """Take a photo and return its path, or None if cancelled."""
        ...


class Gallery(Protocol):
    def pick(self) -> list[str]:
        """Return the paths of the selected images (possibly none)."""
        ...


class Locator(Protocol):
    def locate(self, image_path: str) -> Optional[Coordinates]:
        """Return the current position. May raise when unavailable."""
        ...


class FileCamera:
    """Camera that "captures" an existing file, e.g. a photo saved by a UI widget."""

    def __init__(self, path: Optional[str | Path]):
        self.path = path

    def capture(self) -> Optional[str]:
        return str(self.path) if self.path else None


class PathGallery:
    """Gallery selection backed by a fixed list of paths."""

    def __init__(self, paths: list[str | Path]):
        self.paths = [str(p) for p in paths]

    def pick(self) -> list[str]:
        return list(self.paths)


class FixedLocator:
    """Reports a configured device position."""

    def __init__(self, position: Optional[tuple[float, float]]):
        self.position = Coordinates(*position) if position else None

    def locate(self, image_path: str) -> Optional[Coordinates]:
        return self.position


def _to_degrees(value) -> float:
    degrees, minutes, seconds = (float(v) for v in value)
    return degrees + minutes / 60 + seconds / 3600


class ExifLocator:
    """Reads the GPS position embedded in the photo's EXIF data."""

    def locate(self, image_path: str) -> Optional[Coordinates]:
        with Image.open(image_path) as img:
            gps = img.getexif().get_ifd(GPS_INFO_TAG)

        if not gps or GPS_LATITUDE not in gps or GPS_LONGITUDE not in gps:
            return None

        latitude = _to_degrees(gps[GPS_LATITUDE])
        longitude = _to_degrees(gps[GPS_LONGITUDE])
        if gps.get(GPS_LATITUDE_REF, "N") == "S":
            latitude = -latitude
        if gps.get(GPS_LONGITUDE_REF, "E") == "W":
            longitude = -longitude
        return Coordinates(latitude, longitude)


@dataclass(frozen=True)
class CaptureEvent:
    """Change notification sent to subscribers after every mutation."""

    kind: str  # "added", "removed" or "cleared"
    images: tuple[CapturedImage, ...]  # snapshot after the change
    changed: tuple[CapturedImage, ...] = ()


Listener = Callable[[CaptureEvent], None]


class CaptureStore:
    """Owns the list of pending images.

    Mutations happen on a single UI-driven thread; subscribers are called
    synchronously after each change.
    """

    def __init__(
        self,
        camera: Optional[Camera] = None,
        gallery: Optional[Gallery] = None,
        locator: Optional[Locator] = None,
    ):
        self.camera = camera
        self.gallery = gallery
        self.locator = locator
        self._images: list[CapturedImage] = []
        self._listeners: list[Listener] = []

    @property
    def images(self) -> tuple[CapturedImage, ...]:
        return tuple(self._images)

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[CapturedImage]:
        return iter(self.images)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: str, changed: tuple[CapturedImage, ...] = ()) -> None:
        event = CaptureEvent(kind=kind, images=self.images, changed=changed)
        for listener in list(self._listeners):
            listener(event)

    def _locate(self, path: str) -> Optional[Coordinates]:
        """Best-effort position lookup; any failure means no coordinates."""
        if self.locator is None:
            return None
        try:
            return self.locator.locate(path)
        except Exception as e:
            logger.info("No location for %s: %s", path, e)
            return None

    def add(self, path: str | Path, coordinates: Optional[Coordinates] = None) -> CapturedImage:
        image = CapturedImage(local_path=str(path), coordinates=coordinates)
        self._images.append(image)
        self._emit("added", (image,))
        return image

    def add_from_camera(self, camera: Optional[Camera] = None) -> Optional[CapturedImage]:
        """Take a photo and queue it with the current position, if available."""
        camera = camera or self.camera
        if camera is None:
            raise ValueError("No camera configured")

        path = camera.capture()
        if not path:
            return None
        return self.add(path, self._locate(path))

    def add_from_gallery(self, gallery: Optional[Gallery] = None) -> list[CapturedImage]:
        """Queue every picked image, without coordinates."""
        gallery = gallery or self.gallery
        if gallery is None:
            raise ValueError("No gallery configured")

        added = [CapturedImage(local_path=str(p)) for p in gallery.pick()]
        if not added:
            return []
        self._images.extend(added)
        self._emit("added", tuple(added))
        return added

    def remove(self, index: int) -> None:
        """Remove one pending image. Out-of-range indexes are ignored."""
        if not 0 <= index < len(self._images):
            logger.debug("Ignoring remove of invalid index %d", index)
            return
        removed = self._images.pop(index)
        self._emit("removed", (removed,))

    def clear(self) -> None:
        removed = tuple(self._images)
        self._images.clear()
        self._emit("cleared", removed)
