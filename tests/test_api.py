"""HTTP tests against the FastAPI app."""
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from app import create_app
from services import build_services
from tests.helpers import image_size


def upload(client, tags, data, filename="upload.jpg"):
    return client.post(
        "/upload",
        data={"tags": tags},
        files={"image": (filename, data, "image/jpeg")},
    )


class TestUpload:
    def test_end_to_end(self, client, make_image):
        original = make_image(size=(500, 800))
        response = upload(client, "cat,orange", original)
        assert response.status_code == 200
        assert "/thumb/1" in response.text
        assert "cat,orange" in response.text

        image = client.get("/image/1")
        assert image.status_code == 200
        assert image.content == original
        assert image.headers["content-type"] == "image/jpeg"
        assert image.headers["content-disposition"].startswith("attachment")
        assert 'filename="1.jpg"' in image.headers["content-disposition"]

        thumb = client.get("/thumb/1")
        assert thumb.status_code == 200
        assert thumb.headers["content-type"] == "image/jpeg"
        w, h = image_size(thumb.content)
        assert h == 100 and abs(w / h - 0.625) < 0.02

        assert client.get("/images").json() == [{"id": 1, "tags": "cat,orange"}]

    def test_small_upload_keeps_dimensions(self, client, jpeg_bytes):
        upload(client, "tiny", jpeg_bytes)
        assert image_size(client.get("/image/1").content) == (50, 80)
        assert image_size(client.get("/thumb/1").content) == (50, 80)

    def test_missing_image_is_client_error(self, client):
        response = client.post("/upload", data={"tags": "cat"})
        assert response.status_code == 400
        assert "image" in response.json()["detail"]
        assert client.get("/images").json() == []

    def test_missing_image_multipart(self, client):
        response = client.post("/upload", files={"tags": (None, b"cat")})
        assert response.status_code == 400
        assert client.get("/image-count").text == "0 images in the database"

    def test_missing_tags_is_client_error(self, client, jpeg_bytes):
        response = client.post("/upload", files={"image": ("a.jpg", jpeg_bytes, "image/jpeg")})
        assert response.status_code == 400
        assert client.get("/images").json() == []

    def test_undecodable_upload_is_server_error(self, client):
        response = upload(client, "broken", b"this is not an image")
        assert response.status_code == 500
        assert client.get("/image/1").content == b"this is not an image"
        assert client.get("/thumb/1").status_code == 404


class TestRetrieval:
    def test_unknown_ids_are_404(self, client):
        assert client.get("/image/99").status_code == 404
        assert client.get("/thumb/99").status_code == 404

    def test_count(self, client, jpeg_bytes):
        for tags in ("a", "b"):
            upload(client, tags, jpeg_bytes)
        assert client.get("/image-count").text == "2 images in the database"

    def test_search(self, client, jpeg_bytes):
        for tags in ("cat,orange", "dog", "Cat,black", "bobcat"):
            upload(client, tags, jpeg_bytes)

        found = client.get("/search", params={"tags": "cat"}).json()
        assert found == [{"id": 1, "tags": "cat,orange"}, {"id": 4, "tags": "bobcat"}]
        assert [r["id"] for r in client.get("/search", params={"tags": ""}).json()] == [1, 2, 3, 4]

        html = client.post("/search", data={"tags": "dog"})
        assert html.status_code == 200
        assert "/thumb/2" in html.text
        assert "/thumb/1" not in html.text

    def test_html_pages(self, client, jpeg_bytes):
        upload(client, "cat", jpeg_bytes)
        home = client.get("/")
        assert home.status_code == 200
        assert 'action="/upload"' in home.text
        assert "1 images in the database" in home.text
        assert "/thumb/1" in client.get("/images-html").text
        assert client.get("/static/app.css").status_code == 200

    def test_non_utf8_tags_file_part_is_client_error(self, client, jpeg_bytes):
        response = client.post(
            "/upload",
            files={
                "tags": ("tags.txt", b"caf\xe9", "text/plain"),
                "image": ("a.jpg", jpeg_bytes, "image/jpeg"),
            },
        )
        assert response.status_code == 400
        assert "UTF-8" in response.json()["detail"]
        assert client.get("/images").json() == []

    def test_tags_are_escaped_in_html(self, client, jpeg_bytes):
        response = upload(client, "<script>x</script>", jpeg_bytes)
        assert "<script>x</script>" not in response.text


def test_startup_rebuilds_missing_thumbnails(settings, make_image):
    svc = build_services(settings)
    ids = [svc.pipeline.ingest(t, make_image(size=(300, 300))) for t in ("a", "b")]
    svc.metadata.insert("orphan")
    svc.blobs.thumbnail_path(ids[1]).unlink()
    svc.engine.dispose()

    app = create_app(settings)
    with TestClient(app) as client:
        assert client.get(f"/thumb/{ids[1]}").status_code == 200
        assert client.get("/thumb/3").status_code == 404
    app.state.services.engine.dispose()


def test_settings_from_environment(monkeypatch, temp_dir):
    from config import Settings

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{temp_dir / 'env.db'}")
    monkeypatch.setenv("SEARCH_CASE_SENSITIVE", "false")
    settings = Settings()
    assert settings.database_url.endswith("env.db")
    assert settings.search_case_sensitive is False
    assert settings.thumbnail_size == 100


class TestServerErrors:
    def test_store_failure_is_503_and_app_keeps_serving(self, client, jpeg_bytes):
        SQLModel.metadata.drop_all(client.app.state.services.engine)

        response = upload(client, "cat", jpeg_bytes)
        assert response.status_code == 503
        assert "detail" in response.json()

        assert client.get("/image-count").status_code == 503
        assert client.get("/image/1").status_code == 404
        assert client.get("/").status_code == 503

    def test_existing_original_is_500_and_left_alone(self, client, jpeg_bytes):
        blobs = client.app.state.services.blobs
        blobs.write_original(1, b"stray bytes")

        response = upload(client, "cat", jpeg_bytes)
        assert response.status_code == 500
        assert "already exists" in response.json()["detail"]
        assert blobs.read_original(1) == b"stray bytes"
        assert client.get("/image/1").content == b"stray bytes"
