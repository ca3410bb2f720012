"""Upload ingestion and the startup thumbnail reconciliation pass."""
import logging
from dataclasses import dataclass, field
from typing import Optional

from blobstore import BlobStore
from database import MetadataStore
from errors import ConflictError, NotFoundError, ValidationError, VaultError
from thumbnails import ThumbnailDeriver

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Turns one upload into a record, a stored original and a thumbnail."""

    def __init__(self, metadata: MetadataStore, blobs: BlobStore, deriver: ThumbnailDeriver):
        self.metadata = metadata
        self.blobs = blobs
        self.deriver = deriver

    def ingest(self, tags: Optional[str], image_bytes: Optional[bytes]) -> int:
        """Store an upload and return its id.

        The id is returned only once the record, the original and the
        thumbnail all exist. A failure after the insert leaves the record in
        place: a missing thumbnail is rebuilt by the next reconciliation pass,
        a missing original needs an operator.
        """
        if tags is None:
            raise ValidationError("Missing field: tags")
        if not image_bytes:
            raise ValidationError("Missing field: image")

        image_id = self.metadata.insert(tags)

        try:
            self.blobs.write_original(image_id, image_bytes)
        except ConflictError:
            logger.critical(
                "Data integrity fault: original for freshly assigned id %s already on disk",
                image_id,
            )
            raise
        except OSError:
            logger.error("Image %s has a record but no original; needs manual repair", image_id)
            raise

        try:
            self.deriver.derive(image_id)
        except (VaultError, OSError) as exc:
            logger.error(
                "Thumbnail for image %s not created (%s); left for reconciliation",
                image_id, exc,
            )
            raise

        logger.info("Ingested image %s (%d bytes)", image_id, len(image_bytes))
        return image_id


@dataclass
class ReconcileReport:
    checked: int = 0
    derived: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)


class Reconciler:
    """Rebuilds thumbnails that are missing for existing records."""

    def __init__(self, metadata: MetadataStore, blobs: BlobStore, deriver: ThumbnailDeriver):
        self.metadata = metadata
        self.blobs = blobs
        self.deriver = deriver

    def reconcile(self) -> ReconcileReport:
        report = ReconcileReport()
        for record in self.metadata.get_all():
            report.checked += 1
            if self.blobs.thumbnail_exists(record.id):
                continue
            try:
                self.deriver.derive(record.id)
            except NotFoundError as exc:
                logger.error("Image %s has no original; cannot rebuild thumbnail", record.id)
                report.failed[record.id] = str(exc)
            except (VaultError, OSError) as exc:
                logger.error("Thumbnail rebuild failed for image %s: %s", record.id, exc)
                report.failed[record.id] = str(exc)
            else:
                report.derived.append(record.id)

        logger.info(
            "Reconciliation checked %d records: %d thumbnails rebuilt, %d failed",
            report.checked, len(report.derived), len(report.failed),
        )
        return report
