import base64
import json

import pytest
import requests
from fastapi.testclient import TestClient

from api.core.config import Settings
from api.main import create_app
from api.routes.render import get_dispatcher
from api.services.object_storage import ObjectStorage
from api.services.render_dispatcher import RenderDispatcher

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PDF_BYTES = b"%PDF-1.7\nfake-document"


def make_response(status_code=200, body=None, content=None, headers=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["content-type"] = "application/json"
    else:
        response._content = content or b""
    for key, value in (headers or {}).items():
        response.headers[key] = value
    response.url = "http://testserver/api/render"
    return response


class FakeRenderingClient:
    def __init__(self):
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def content(self, url):
        self.calls.append(("content", url))
        return "<html><body>content</body></html>"

    def pdf(self, url):
        self.calls.append(("pdf", url))
        return PDF_BYTES

    def snapshot(self, url):
        self.calls.append(("snapshot", url))
        return {
            "content": "<html><body>snapshot</body></html>",
            "screenshot": base64.b64encode(PNG_BYTES).decode("ascii"),
        }

    def scrape(self, url):
        self.calls.append(("scrape", url))
        return [{"selector": "h1", "results": [{"text": "Example Domain"}]}]

    def json(self, url, prompt=""):
        self.calls.append(("json", url, prompt))
        return {"title": "Example Domain"}

    def links(self, url):
        self.calls.append(("links", url))
        return ["https://www.iana.org/domains/example"]

    def markdown(self, url):
        self.calls.append(("markdown", url))
        return "# Example Domain\n"


class FakeS3Client:
    def __init__(self):
        self.put_calls = []
        self.upload_calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def put_object(self, **kwargs):
        self.put_calls.append(kwargs)
        return {"ETag": '"etag"'}

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None, Config=None):
        self.upload_calls.append(
            {"data": fileobj.read(), "bucket": bucket, "key": key, "extra_args": ExtraArgs, "config": Config}
        )


@pytest.fixture
def settings():
    return Settings(
        cloudflare_api_token="token",
        cloudflare_account_id="account",
        r2_endpoint="https://r2.example.com",
        r2_access_key_id="access",
        r2_secret_access_key="secret",
        r2_bucket_name="renders",
    )


@pytest.fixture
def rendering():
    return FakeRenderingClient()


@pytest.fixture
def s3():
    return FakeS3Client()


@pytest.fixture
def dispatcher(settings, rendering, s3):
    return RenderDispatcher(settings, rendering_client=rendering, storage=ObjectStorage("renders", s3))


@pytest.fixture
def client(dispatcher):
    app = create_app()
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    return TestClient(app)
