"""
Tag Vault – tagged image store (FastAPI + SQLModel + Pillow)

Quick start
-----------
1) python -m venv .venv && source .venv/bin/activate
2) pip install -e .
3) DATABASE_URL=sqlite:///./tagvault.db tagvault
4) Open http://localhost:3000 → upload an image with tags

Notes
-----
• Originals and thumbnails live under ./images/ as <id>.jpg and <id>_thumb.jpg.
• Missing thumbnails are rebuilt every time the app starts.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import Settings, get_settings
from errors import (
    ConflictError,
    DecodeError,
    NotFoundError,
    StoreError,
    ValidationError,
    VaultError,
)
from routes import (
    get_image,
    get_thumbnail,
    home_page,
    image_count_page,
    list_images,
    render_images,
    search_images,
    search_images_html,
    upload,
)
from services import build_services
from templates_static import ensure_assets

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 500,
    DecodeError: 500,
    StoreError: 503,
}


def vault_error_handler(request: Request, exc: VaultError) -> JSONResponse:
    """Map vault errors to HTTP responses."""
    status = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)), 500
    )
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app; missing thumbnails are rebuilt before it is returned."""
    settings = settings or get_settings()
    services = build_services(settings)

    if settings.reconcile_on_startup:
        services.reconciler.reconcile()

    ensure_assets(settings.templates_dir, settings.static_dir)

    app = FastAPI(title="Tag Vault")
    app.state.services = services
    app.state.jinja_env = Environment(
        loader=FileSystemLoader(str(settings.templates_dir)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    app.add_exception_handler(VaultError, vault_error_handler)
    app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    # Routes
    app.get("/", response_class=HTMLResponse)(home_page)
    app.post("/upload", response_class=HTMLResponse)(upload)
    app.get("/image/{image_id}")(get_image)
    app.get("/thumb/{image_id}")(get_thumbnail)
    app.get("/images")(list_images)
    app.get("/images-html", response_class=HTMLResponse)(render_images)
    app.get("/search")(search_images)
    app.post("/search", response_class=HTMLResponse)(search_images_html)
    app.get("/image-count")(image_count_page)

    return app


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting Tag Vault on %s:%s", settings.server_host, settings.server_port)
    uvicorn.run(
        create_app(settings),
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
