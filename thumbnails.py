"""Thumbnail derivation."""
import io
import logging
from typing import Optional

from PIL import Image as PILImage, ImageOps, UnidentifiedImageError

from blobstore import BlobStore
from errors import DecodeError

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_THUMB_SIZE = 100
DEFAULT_THUMB_QUALITY = 85

# (magic prefix, offset, Pillow format name)
SIGNATURES = [
    (b"\xff\xd8\xff", 0, "JPEG"),
    (b"\x89PNG\r\n\x1a\n", 0, "PNG"),
    (b"GIF87a", 0, "GIF"),
    (b"GIF89a", 0, "GIF"),
    (b"WEBP", 8, "WEBP"),
    (b"BM", 0, "BMP"),
    (b"II*\x00", 0, "TIFF"),
    (b"MM\x00*", 0, "TIFF"),
    (b"\x00\x00\x01\x00", 0, "ICO"),
]

DECODE_ERRORS = (
    UnidentifiedImageError,
    OSError,
    ValueError,
    SyntaxError,
    EOFError,
    PILImage.DecompressionBombError,
)


def sniff_format(data: bytes) -> Optional[str]:
    """Guess the image format from its leading bytes."""
    for magic, offset, fmt in SIGNATURES:
        if data[offset:offset + len(magic)] == magic:
            if fmt == "WEBP" and data[:4] != b"RIFF":
                continue
            return fmt
    return None


def _open(data: bytes, formats: Optional[list[str]] = None) -> PILImage.Image:
    im = PILImage.open(io.BytesIO(data), formats=formats)
    im.load()
    return im


def decode_image(data: bytes) -> PILImage.Image:
    """Decode ``data``, trying the sniffed format first and auto-detection second."""
    fmt = sniff_format(data)
    if fmt:
        try:
            return _open(data, [fmt])
        except DECODE_ERRORS as exc:
            logger.debug("Decoding as %s failed (%s), trying auto-detect", fmt, exc)
    try:
        return _open(data)
    except DECODE_ERRORS as exc:
        raise DecodeError(f"Unreadable image data: {exc}") from exc


def make_thumbnail(data: bytes, size: int = DEFAULT_THUMB_SIZE,
                   quality: int = DEFAULT_THUMB_QUALITY) -> bytes:
    """Return JPEG bytes of ``data`` fitted inside a ``size``x``size`` box."""
    im = decode_image(data)
    try:
        im = ImageOps.exif_transpose(im)
        # thumbnail() keeps the aspect ratio and never enlarges
        im.thumbnail((size, size))
        rgb = im.convert("RGB")
        buf = io.BytesIO()
        rgb.save(buf, format="JPEG", quality=quality)
    except DECODE_ERRORS as exc:
        raise DecodeError(f"Could not render thumbnail: {exc}") from exc
    return buf.getvalue()


class ThumbnailDeriver:
    """Builds the thumbnail for a stored original and writes it back."""

    def __init__(self, blobs: BlobStore, size: int = DEFAULT_THUMB_SIZE,
                 quality: int = DEFAULT_THUMB_QUALITY):
        self.blobs = blobs
        self.size = size
        self.quality = quality

    def derive(self, image_id: int) -> None:
        """Rebuild the thumbnail of ``image_id``, overwriting any previous one.

        Raises ``NotFoundError`` if the original is missing and ``DecodeError``
        if it cannot be read as an image.
        """
        data = self.blobs.read_original(image_id)
        thumb = make_thumbnail(data, self.size, self.quality)
        self.blobs.write_thumbnail(image_id, thumb)
        logger.debug("Derived thumbnail for image %s", image_id)
