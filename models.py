"""Database models for Tag Vault."""
from typing import Optional

from sqlmodel import Field, SQLModel


class ImageRecord(SQLModel, table=True):
    """One uploaded image: its id and the free-text tags it was uploaded with."""

    __tablename__ = "images"
    # ids are never handed out twice, even after out-of-band deletes
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    tags: str = ""
