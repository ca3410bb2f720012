"""
Shared fixtures for the Tag Vault test suite.

Every test gets its own SQLite file and images directory under a temporary
directory, so tests never see each other's records.
"""

import io
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app import create_app
from config import Settings
from services import Services, build_services


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """Settings pointing every path into the temporary directory."""
    return Settings(
        database_url=f"sqlite:///{temp_dir / 'test.db'}",
        images_dir=temp_dir / "images",
        templates_dir=temp_dir / "templates",
        static_dir=temp_dir / "static",
        log_level="DEBUG",
    )


@pytest.fixture
def services(settings: Settings) -> Generator[Services, None, None]:
    svc = build_services(settings)
    yield svc
    svc.engine.dispose()


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory producing encoded image bytes."""

    def _make(size=(50, 80), fmt="JPEG", color="orange", mode="RGB") -> bytes:
        image = Image.new(mode, size, color=color)
        buf = io.BytesIO()
        image.save(buf, format=fmt)
        return buf.getvalue()

    return _make


@pytest.fixture
def jpeg_bytes(make_image) -> bytes:
    """A 50x80 orange JPEG."""
    return make_image()


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Test client over a freshly built app."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
    app.state.services.engine.dispose()
