"""Database configuration and the metadata store."""
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine, select

from errors import StoreError
from models import ImageRecord

logger = logging.getLogger(__name__)


def make_engine(database_url: str) -> Engine:
    """Create the shared engine (connection pool) for ``database_url``."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # handlers run in a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


def substring_clause(dialect_name: str, substring: str, case_sensitive: bool):
    """WHERE clause matching tags that contain ``substring`` literally."""
    if not case_sensitive:
        return ImageRecord.tags.icontains(substring, autoescape=True)
    if dialect_name == "sqlite":
        # LIKE ignores ASCII case on SQLite, instr() does not
        return func.instr(ImageRecord.tags, substring) > 0
    return ImageRecord.tags.contains(substring, autoescape=True)


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    try:
        SQLModel.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise StoreError(f"Could not initialize database: {exc}") from exc


class MetadataStore:
    """Id assignment, listing and tag search over the ``images`` table."""

    def __init__(self, engine: Engine, case_sensitive: bool = True):
        self.engine = engine
        self.case_sensitive = case_sensitive

    @contextmanager
    def session(self):
        """Open a session, turning driver failures into ``StoreError``."""
        try:
            with Session(self.engine) as s:
                yield s
        except SQLAlchemyError as exc:
            logger.error("Metadata store failure: %s", exc)
            raise StoreError(str(exc)) from exc

    def insert(self, tags: str) -> int:
        """Append a record and return its newly assigned id."""
        with self.session() as s:
            record = ImageRecord(tags=tags)
            s.add(record)
            s.commit()
            s.refresh(record)
            return record.id

    def get(self, image_id: int) -> Optional[ImageRecord]:
        with self.session() as s:
            return s.get(ImageRecord, image_id)

    def get_all(self) -> list[ImageRecord]:
        """All records, ascending id."""
        with self.session() as s:
            return list(s.exec(select(ImageRecord).order_by(ImageRecord.id)).all())

    def search(self, substring: str, case_sensitive: Optional[bool] = None) -> list[ImageRecord]:
        """Records whose tags contain ``substring``, ascending id.

        The substring is matched literally; ``%`` and ``_`` carry no wildcard
        meaning. An empty substring matches every record.
        """
        if case_sensitive is None:
            case_sensitive = self.case_sensitive
        if not substring:
            return self.get_all()

        clause = substring_clause(self.engine.dialect.name, substring, case_sensitive)

        with self.session() as s:
            stmt = select(ImageRecord).where(clause).order_by(ImageRecord.id)
            return list(s.exec(stmt).all())

    def count(self) -> int:
        with self.session() as s:
            return s.exec(select(func.count(ImageRecord.id))).one()
