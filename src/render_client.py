"""
Request composer for the render playground page.

Holds everything the Streamlit page needs that is not widget code: form
validation, the multipart submission, interpreting the response by option and
choosing how to preview it.
"""

import base64
import json
import os
from dataclasses import dataclass
from typing import Any

import requests
from pydantic import BaseModel, HttpUrl, TypeAdapter, ValidationError, field_validator

from api.models.render import RenderOption
from src.logging_config import logger

RENDER_PATH = "/api/render"
DEFAULT_OPTION = RenderOption.CONTENT
REQUEST_TIMEOUT_SECONDS = 90
STORAGE_KEY_HEADER = "x-r2-key"

_HTTP_URL = TypeAdapter(HttpUrl)


def resolve_render_url(base_or_endpoint: str | None = None) -> str:
    if base_or_endpoint is None:
        base_or_endpoint = os.getenv("API_BASE_URL", "http://localhost:8000")
    base_or_endpoint = base_or_endpoint.strip() or "http://localhost:8000"

    if base_or_endpoint.endswith(RENDER_PATH):
        return base_or_endpoint
    return f"{base_or_endpoint.rstrip('/')}{RENDER_PATH}"


def resolve_tls_verify(raw: str | None = None) -> bool | str:
    """Map API_TLS_VERIFY to a requests ``verify`` value (bool or CA bundle path)."""
    if raw is None:
        raw = os.getenv("API_TLS_VERIFY", "true")
    raw = raw.strip()
    if raw.lower() in {"false", "0", "no", "off"}:
        return False
    return raw if raw not in {"", "true", "1"} else True


class RenderForm(BaseModel):
    option: RenderOption
    url: str
    prompt: str = ""

    @field_validator("option", mode="before")
    @classmethod
    def _known_option(cls, value: Any) -> Any:
        if isinstance(value, RenderOption):
            return value
        if not value:
            raise ValueError("Please select an option.")
        if value not in {option.value for option in RenderOption}:
            raise ValueError("Invalid option selected.")
        return value

    @field_validator("url", mode="before")
    @classmethod
    def _valid_url(cls, value: Any) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("Please enter a URL.")
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError("Please enter a valid URL.") from exc
        return value

    @field_validator("prompt", mode="before")
    @classmethod
    def _strip_prompt(cls, value: Any) -> str:
        return (value or "").strip()


def validate_form(option: str | None, url: str | None, prompt: str | None = None) -> tuple[RenderForm | None, dict[str, str]]:
    """Return the validated form, or ``None`` and one message per invalid field."""
    try:
        return RenderForm(option=option, url=url, prompt=prompt), {}
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "form"
            ctx_error = (error.get("ctx") or {}).get("error")
            errors.setdefault(field, str(ctx_error) if ctx_error else error["msg"])
        return None, errors


def build_form_data(form: RenderForm) -> dict[str, str]:
    data = {"options": form.option.value, "url": form.url}
    if form.prompt:
        data["prompt"] = form.prompt
    return data


@dataclass(frozen=True)
class BinaryPayload:
    content: bytes
    content_type: str
    storage_key: str | None = None


RenderResponse = BinaryPayload | dict[str, Any]


def interpret_response(option: RenderOption, response: requests.Response) -> RenderResponse:
    """Binary for screenshot/pdf, parsed JSON for everything else."""
    if option.is_binary:
        return BinaryPayload(
            content=response.content,
            content_type=response.headers.get("content-type", "application/octet-stream"),
            storage_key=response.headers.get(STORAGE_KEY_HEADER),
        )
    return response.json()


def submit_render(
    form: RenderForm,
    endpoint: str | None = None,
    session: requests.Session | None = None,
    timeout: int = REQUEST_TIMEOUT_SECONDS,
    verify: bool | str = True,
    request_id: str | None = None,
) -> RenderResponse:
    """
    POST the form as multipart/form-data and interpret the reply.

    Raises ``requests.RequestException`` for transport and HTTP errors and
    ``ValueError`` when a JSON reply cannot be parsed.
    """
    endpoint = endpoint or resolve_render_url()
    http = session or requests.Session()
    # (None, value) tuples make requests encode plain multipart fields.
    files = {name: (None, value) for name, value in build_form_data(form).items()}
    headers = {"X-Request-Id": request_id} if request_id else None

    logger.info(
        "Render submit request_id=%s option=%s url=%s endpoint=%s",
        request_id,
        form.option.value,
        form.url,
        endpoint,
    )
    response = http.post(endpoint, files=files, headers=headers, timeout=timeout, verify=verify)
    if response.status_code >= 400:
        logger.error(
            "Render submit failed request_id=%s status=%s body=%s",
            request_id,
            response.status_code,
            response.text[:1500],
        )
    response.raise_for_status()
    return interpret_response(form.option, response)


@dataclass(frozen=True)
class Preview:
    kind: str  # "live_url" | "image" | "pdf_frame" | "code"
    source: str | bytes
    language: str | None = None
    filename: str | None = None


VIEWER_LANGUAGES: dict[RenderOption, tuple[str, str]] = {
    RenderOption.MARKDOWN: ("markdown", "response.md"),
    RenderOption.SNAPSHOT: ("html", "response.html"),
}
DEFAULT_VIEWER_LANGUAGE = ("json", "response.json")


def viewer_language(option: RenderOption) -> tuple[str, str]:
    return VIEWER_LANGUAGES.get(option, DEFAULT_VIEWER_LANGUAGE)


def preview_for(option: RenderOption, url: str, response: RenderResponse | None) -> Preview | None:
    if response is None:
        return None

    if option is RenderOption.CONTENT:
        return Preview(kind="live_url", source=url)

    if isinstance(response, BinaryPayload):
        if option is RenderOption.SCREENSHOT:
            return Preview(kind="image", source=response.content, filename="screenshot.png")
        encoded = base64.b64encode(response.content).decode("ascii")
        return Preview(
            kind="pdf_frame",
            source=f"data:application/pdf;base64,{encoded}",
            filename="document.pdf",
        )

    language, filename = viewer_language(option)
    data = response.get("data")
    if language != "json" and isinstance(data, str):
        text = data
    else:
        text = json.dumps(response, indent=2, ensure_ascii=False)
    return Preview(kind="code", source=text, language=language, filename=filename)
