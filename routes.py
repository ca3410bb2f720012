"""FastAPI routes for Tag Vault."""
import logging

from fastapi import Form, Query, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse
from jinja2 import Environment
from starlette.concurrency import run_in_threadpool

from services import Services
from utils import field_bytes, field_text

logger = logging.getLogger(__name__)


def services(request: Request) -> Services:
    return request.app.state.services


def render(request: Request, name: str, **ctx) -> HTMLResponse:
    """Render template with context."""
    env: Environment = request.app.state.jinja_env
    ctx.setdefault("title", "Tag Vault")
    return HTMLResponse(env.get_template(name).render(**ctx))


def home_page(request: Request):
    """Upload and search forms."""
    return render(request, "index.html", count=services(request).catalog.count())


async def upload(request: Request):
    """Accept a multipart upload with ``tags`` and ``image`` parts."""
    form = await request.form()
    tags = await field_text(form.get("tags"))
    image = await field_bytes(form.get("image"))

    pipeline = services(request).pipeline
    image_id = await run_in_threadpool(pipeline.ingest, tags, image)
    return render(request, "thumbnail.html", image={"id": image_id, "tags": tags})


def get_image(request: Request, image_id: int):
    """Serve the original as an attachment."""
    path = services(request).catalog.original_path(image_id)
    return FileResponse(path, media_type="image/jpeg", filename=f"{image_id}.jpg")


def get_thumbnail(request: Request, image_id: int):
    """Serve the thumbnail as an attachment."""
    path = services(request).catalog.thumbnail_path(image_id)
    return FileResponse(path, media_type="image/jpeg", filename=f"{image_id}_thumb.jpg")


def list_images(request: Request):
    """All records as JSON, ascending id."""
    return [r.model_dump() for r in services(request).catalog.list_images()]


def render_images(request: Request):
    """All records as HTML cards."""
    images = services(request).catalog.list_images()
    return render(request, "gallery.html", images=images)


def search_images(request: Request, tags: str = Query("")):
    """Records whose tags contain ``tags``, as JSON."""
    return [r.model_dump() for r in services(request).catalog.search(tags)]


def search_images_html(request: Request, tags: str = Form("")):
    """Records whose tags contain ``tags``, as HTML cards."""
    images = services(request).catalog.search(tags)
    return render(request, "gallery.html", images=images, q=tags)


def image_count_page(request: Request):
    count = services(request).catalog.count()
    return PlainTextResponse(f"{count} images in the database")
