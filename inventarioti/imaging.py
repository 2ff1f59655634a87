"""Image metadata, orientation correction and internal image storage."""

from __future__ import annotations

import logging
import shutil
import uuid
from datetime import datetime
from pathlib import Path
from urllib.parse import unquote, urlparse

from PIL import Image

logger = logging.getLogger(__name__)

TIME_UNAVAILABLE = "Hora no disponible"
DATE_FORMAT = "%d %b %Y"
TIME_FORMAT = "%I:%M %p"

# EXIF tag ids (IFD0)
_EXIF_DATETIME = 306
_EXIF_ORIENTATION = 274
_EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

ORIENTATION_NORMAL = 1
ORIENTATION_ROTATE_180 = 3
ORIENTATION_ROTATE_90 = 6
ORIENTATION_ROTATE_270 = 8

# Clockwise degrees needed to display the image upright
_ROTATION_DEGREES: dict[int, int] = {
    ORIENTATION_ROTATE_90: 90,
    ORIENTATION_ROTATE_180: 180,
    ORIENTATION_ROTATE_270: 270,
}


def _import_cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install opencv-python"
        ) from None
    return cv2


def uri_to_path(uri: str) -> Path:
    """Turn a stored image reference (plain path or ``file://`` URI) into a Path."""
    if uri.startswith("file:"):
        return Path(unquote(urlparse(uri).path))
    return Path(uri)


def format_date(moment: datetime) -> str:
    return moment.strftime(DATE_FORMAT)


def format_time(moment: datetime) -> str:
    return moment.strftime(TIME_FORMAT)


def read_capture_time(image_ref: str | Path) -> str:
    """Return the image's EXIF DateTime as ``hh:mm AM/PM``.

    Any read or parse failure yields TIME_UNAVAILABLE; nothing is raised.
    """
    path = uri_to_path(str(image_ref))
    try:
        with Image.open(path) as img:
            raw = img.getexif().get(_EXIF_DATETIME)
        if not raw:
            return TIME_UNAVAILABLE
        taken = datetime.strptime(str(raw).strip("\x00 "), _EXIF_DATETIME_FORMAT)
        return format_time(taken)
    except (OSError, ValueError, SyntaxError) as e:
        logger.debug("Sin hora EXIF para %s: %s", path, e)
        return TIME_UNAVAILABLE


def read_orientation(image_ref: str | Path) -> int:
    """Return the EXIF orientation tag, ORIENTATION_NORMAL when missing."""
    path = uri_to_path(str(image_ref))
    try:
        with Image.open(path) as img:
            value = img.getexif().get(_EXIF_ORIENTATION, ORIENTATION_NORMAL)
        return int(value)
    except (OSError, ValueError, TypeError, SyntaxError):
        return ORIENTATION_NORMAL


def rotate_for_orientation(image, orientation: int):
    """Rotate a decoded image so it displays upright.

    Only the three pure rotations are handled; other tag values
    (mirrored variants, unknown) leave the image as is.
    """
    degrees = _ROTATION_DEGREES.get(orientation)
    if degrees is None:
        return image

    cv2 = _import_cv2()
    codes = {
        90: cv2.ROTATE_90_CLOCKWISE,
        180: cv2.ROTATE_180,
        270: cv2.ROTATE_90_COUNTERCLOCKWISE,
    }
    return cv2.rotate(image, codes[degrees])


def load_oriented_image(image_ref: str | Path):
    """Decode an image and apply its EXIF orientation.

    Returns:
        The upright image array, or None if the file cannot be decoded.
    """
    cv2 = _import_cv2()
    path = uri_to_path(str(image_ref))
    image = cv2.imread(
        str(path), cv2.IMREAD_COLOR | cv2.IMREAD_IGNORE_ORIENTATION
    )
    if image is None:
        logger.warning("No se pudo decodificar la imagen: %s", path)
        return None
    return rotate_for_orientation(image, read_orientation(path))


def save_image_to_internal_storage(
    source: str | Path, files_dir: str | Path
) -> Path | None:
    """Copy a captured image into ``<files_dir>/comprobantes/``.

    Returns:
        Path of the private copy, or None if the copy failed.
    """
    target_dir = Path(files_dir).expanduser() / "comprobantes"
    target = target_dir / f"comprobante_{uuid.uuid4()}.jpg"
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.exception("No se pudo crear el directorio %s", target_dir)
        return None

    try:
        with open(uri_to_path(str(source)), "rb") as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)
    except OSError:
        logger.exception("Error al copiar la imagen %s", source)
        target.unlink(missing_ok=True)
        return None
    return target
