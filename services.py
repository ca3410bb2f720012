"""Wiring of the vault components from one ``Settings`` object."""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from blobstore import BlobStore
from catalog import ImageCatalog
from config import Settings
from database import MetadataStore, init_db, make_engine
from pipeline import IngestionPipeline, Reconciler
from thumbnails import ThumbnailDeriver


@dataclass
class Services:
    engine: Engine
    metadata: MetadataStore
    blobs: BlobStore
    deriver: ThumbnailDeriver
    pipeline: IngestionPipeline
    reconciler: Reconciler
    catalog: ImageCatalog


def build_services(settings: Settings, engine: Optional[Engine] = None) -> Services:
    """Create the engine (unless given), the tables and every component."""
    engine = engine or make_engine(settings.database_url)
    init_db(engine)

    metadata = MetadataStore(engine, case_sensitive=settings.search_case_sensitive)
    blobs = BlobStore(settings.images_dir)
    deriver = ThumbnailDeriver(
        blobs, size=settings.thumbnail_size, quality=settings.thumbnail_quality
    )
    return Services(
        engine=engine,
        metadata=metadata,
        blobs=blobs,
        deriver=deriver,
        pipeline=IngestionPipeline(metadata, blobs, deriver),
        reconciler=Reconciler(metadata, blobs, deriver),
        catalog=ImageCatalog(metadata, blobs),
    )
