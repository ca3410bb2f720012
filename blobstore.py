"""On-disk storage for originals and thumbnails."""
import logging
import os
import tempfile
from pathlib import Path

from errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class BlobStore:
    """Holds ``<id>.jpg`` (original) and ``<id>_thumb.jpg`` (thumbnail) per record.

    Originals are written once and never touched again. Thumbnails may be
    rewritten at any time. Both are written to a temporary sibling first so a
    reader only ever sees complete files.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _original(self, image_id: int) -> Path:
        return self.root / f"{image_id}.jpg"

    def _thumbnail(self, image_id: int) -> Path:
        return self.root / f"{image_id}_thumb.jpg"

    def _write_temp(self, data: bytes) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".part")
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        return Path(tmp)

    def original_exists(self, image_id: int) -> bool:
        return self._original(image_id).is_file()

    def thumbnail_exists(self, image_id: int) -> bool:
        return self._thumbnail(image_id).is_file()

    def write_original(self, image_id: int, data: bytes) -> None:
        """Store the original for ``image_id``; refuses to replace an existing one."""
        target = self._original(image_id)
        if target.exists():
            raise ConflictError(f"Original for image {image_id} already exists")

        tmp = self._write_temp(data)
        try:
            # link() fails if target appeared meanwhile, unlike rename()
            os.link(tmp, target)
        except FileExistsError as exc:
            raise ConflictError(f"Original for image {image_id} already exists") from exc
        finally:
            tmp.unlink(missing_ok=True)
        logger.debug("Wrote original %s (%d bytes)", target, len(data))

    def write_thumbnail(self, image_id: int, data: bytes) -> None:
        """Store (or replace) the thumbnail for ``image_id``."""
        target = self._thumbnail(image_id)
        tmp = self._write_temp(data)
        try:
            os.replace(tmp, target)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Wrote thumbnail %s (%d bytes)", target, len(data))

    def original_path(self, image_id: int) -> Path:
        path = self._original(image_id)
        if not path.is_file():
            raise NotFoundError(f"No original for image {image_id}")
        return path

    def thumbnail_path(self, image_id: int) -> Path:
        path = self._thumbnail(image_id)
        if not path.is_file():
            raise NotFoundError(f"No thumbnail for image {image_id}")
        return path

    def read_original(self, image_id: int) -> bytes:
        return self.original_path(image_id).read_bytes()

    def read_thumbnail(self, image_id: int) -> bytes:
        return self.thumbnail_path(image_id).read_bytes()
