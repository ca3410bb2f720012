"""Small helpers shared by tests."""
import io

from PIL import Image


def image_size(data: bytes) -> tuple[int, int]:
    """Decode ``data`` and return its (width, height)."""
    with Image.open(io.BytesIO(data)) as im:
        return im.size
