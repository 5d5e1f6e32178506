import re

import pytest
from fastapi.testclient import TestClient

from api.core.config import Settings
from api.main import create_app
from api.routes import render as render_routes
from api.routes.render import get_dispatcher, get_settings
from api.services.object_storage import ObjectStorage
from api.services.render_dispatcher import RenderDispatcher

from conftest import PDF_BYTES, PNG_BYTES, FakeRenderingClient, FakeS3Client


def post_render(client, options, url="https://example.com", prompt=None):
    data = {"options": options, "url": url}
    if prompt is not None:
        data["prompt"] = prompt
    # Sending every field as a file part forces multipart/form-data.
    files = {name: (None, value) for name, value in data.items()}
    return client.post("/api/render", files=files)


def test_screenshot_returns_png_bytes(client):
    resp = post_render(client, "/screenshot")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content == PNG_BYTES
    assert "x-r2-key" not in resp.headers


def test_pdf_returns_document_with_storage_key(client, s3):
    resp = post_render(client, "/pdf")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content == PDF_BYTES
    assert re.fullmatch(r"pdf/example\.com/\d+\.pdf", resp.headers["x-r2-key"])
    assert s3.upload_calls[0]["key"] == resp.headers["x-r2-key"]


def test_markdown_envelope_carries_storage_key(client):
    resp = post_render(client, "/markdown", url="https://example.com/docs")

    assert resp.status_code == 200
    body = resp.json()
    assert body["error"] is False
    assert body["data"] == "# Example Domain\n"
    assert re.fullmatch(r"markdown/example\.com/\d+\.md", body["r2Key"])


@pytest.mark.parametrize(
    "options, data",
    [
        ("/content", "<html><body>content</body></html>"),
        ("/snapshot", "<html><body>snapshot</body></html>"),
        ("/scrape", [{"selector": "h1", "results": [{"text": "Example Domain"}]}]),
        ("/json", {"title": "Example Domain"}),
        ("/links", ["https://www.iana.org/domains/example"]),
    ],
)
def test_structured_options_return_json_envelope(client, options, data):
    resp = post_render(client, options)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {"error": False, "data": data}


def test_unknown_option_falls_back_to_content(client, rendering):
    resp = post_render(client, "basic")

    assert resp.status_code == 200
    assert resp.json() == {"error": False, "data": "<html><body>content</body></html>"}
    assert rendering.calls == [("content", "https://example.com")]


def test_prompt_is_forwarded_for_json(client, rendering):
    post_render(client, "/json", prompt="Get the page title")

    assert rendering.calls == [("json", "https://example.com", "Get the page title")]


def test_url_encoded_body_is_accepted(client):
    resp = client.post("/api/render", data={"options": "/links", "url": "https://example.com"})

    assert resp.status_code == 200
    assert resp.json()["data"] == ["https://www.iana.org/domains/example"]


def test_missing_url_is_rejected(client, rendering):
    resp = client.post("/api/render", files={"options": (None, "/links")})

    assert resp.status_code == 422
    assert rendering.calls == []


def test_missing_credentials_surface_as_server_error():
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: Settings(
        cloudflare_api_token="", cloudflare_account_id=""
    )
    client = TestClient(app, raise_server_exceptions=False)

    resp = post_render(client, "/content")

    assert resp.status_code == 500
    assert resp.json() == {
        "error": "internal_server_error",
        "detail": "Unexpected server error.",
        "type": "ConfigurationError",
    }


def test_upstream_failure_surfaces_as_server_error(dispatcher, rendering):
    def fail(url):
        raise ConnectionError("upstream down")

    rendering.links = fail
    app = create_app()
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    client = TestClient(app, raise_server_exceptions=False)

    resp = post_render(client, "/links")

    assert resp.status_code == 500
    assert resp.json()["type"] == "ConnectionError"


def test_render_help_lists_options(client):
    resp = client.get("/api/render")

    assert resp.status_code == 200
    options = resp.json()["options"]
    assert list(options) == [
        "/content",
        "/screenshot",
        "/pdf",
        "/snapshot",
        "/scrape",
        "/json",
        "/links",
        "/markdown",
    ]
    assert options["/pdf"] == "Convert a website to PDF."


def test_health_reports_configuration(client, monkeypatch):
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "token")
    monkeypatch.setenv("CLOUDFLARE_ACCOUNT_ID", "account")
    monkeypatch.delenv("R2_BUCKET_NAME", raising=False)

    body = client.get("/health").json()

    assert body["status"] == "ok"
    assert body["rendering_configured"] is True
    assert body["storage_configured"] is False


@pytest.mark.parametrize(
    "files",
    [
        {"options": (None, ""), "url": (None, "https://example.com")},
        {"url": (None, "https://example.com")},
    ],
)
def test_empty_or_missing_option_falls_back_to_content(client, rendering, files):
    resp = client.post("/api/render", files=files)

    assert resp.status_code == 200
    assert resp.json() == {"error": False, "data": "<html><body>content</body></html>"}
    assert rendering.calls == [("content", "https://example.com")]


def test_padded_option_is_not_matched(client, rendering):
    resp = post_render(client, " /pdf")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert rendering.calls == [("content", "https://example.com")]


def test_dispatcher_clients_are_closed_after_each_request(settings, monkeypatch):
    built = []

    def build_dispatcher(current_settings):
        dispatcher = RenderDispatcher(
            current_settings,
            rendering_client=FakeRenderingClient(),
            storage=ObjectStorage("renders", FakeS3Client()),
        )
        built.append(dispatcher)
        return dispatcher

    monkeypatch.setattr(render_routes, "RenderDispatcher", build_dispatcher)
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    client = TestClient(app)

    post_render(client, "/markdown")
    post_render(client, "/links")

    assert len(built) == 2
    assert all(dispatcher.rendering.closed for dispatcher in built)
    assert all(dispatcher.storage().client.closed for dispatcher in built)


def test_health_reads_one_settings_snapshot(client, monkeypatch):
    monkeypatch.setenv("API_NAME", "Render Test API")
    monkeypatch.setenv("API_VERSION", "9.9.9")

    body = client.get("/health").json()

    assert body["service"] == "Render Test API"
    assert body["version"] == "9.9.9"
