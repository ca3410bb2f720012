"""Read-only access to records and their files."""
from pathlib import Path

from blobstore import BlobStore
from database import MetadataStore
from models import ImageRecord


class ImageCatalog:
    """Lookups used by the HTTP layer. Listing and search load every match into memory."""

    def __init__(self, metadata: MetadataStore, blobs: BlobStore):
        self.metadata = metadata
        self.blobs = blobs

    def original_path(self, image_id: int) -> Path:
        return self.blobs.original_path(image_id)

    def thumbnail_path(self, image_id: int) -> Path:
        return self.blobs.thumbnail_path(image_id)

    def read_original(self, image_id: int) -> bytes:
        return self.blobs.read_original(image_id)

    def read_thumbnail(self, image_id: int) -> bytes:
        return self.blobs.read_thumbnail(image_id)

    def list_images(self) -> list[ImageRecord]:
        return self.metadata.get_all()

    def search(self, substring: str) -> list[ImageRecord]:
        return self.metadata.search(substring)

    def count(self) -> int:
        return self.metadata.count()
