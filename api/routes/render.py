import uuid
from collections.abc import Iterator
from time import perf_counter

from fastapi import APIRouter, Depends, Form, Header
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from api.core.config import Settings
from api.models.render import BinaryArtifact, RenderOption
from api.services.render_dispatcher import RenderDispatcher
from src.logging_config import logger

router = APIRouter(prefix="/api", tags=["render"])

STORAGE_KEY_HEADER = "x-r2-key"


def get_settings() -> Settings:
    return Settings()


def get_dispatcher(settings: Settings = Depends(get_settings)) -> Iterator[RenderDispatcher]:
    dispatcher = RenderDispatcher(settings)
    try:
        yield dispatcher
    finally:
        dispatcher.close()


@router.post("/render")
async def render(
    options: str | None = Form(default=None),
    url: str = Form(...),
    prompt: str | None = Form(default=None),
    x_request_id: str | None = Header(default=None),
    dispatcher: RenderDispatcher = Depends(get_dispatcher),
) -> Response:
    started_at = perf_counter()
    request_id = x_request_id or str(uuid.uuid4())
    logger.info(
        "Render request accepted request_id=%s options=%s url=%s has_prompt=%s",
        request_id,
        options,
        url,
        bool(prompt),
    )

    result = await run_in_threadpool(dispatcher.dispatch, options, url, prompt)

    if isinstance(result, BinaryArtifact):
        headers = {STORAGE_KEY_HEADER: result.storage_key} if result.storage_key else None
        response: Response = Response(
            content=result.content,
            status_code=200,
            media_type=result.content_type,
            headers=headers,
        )
    else:
        response = JSONResponse(content=result.to_payload(), status_code=200)

    logger.info(
        "Render request finished request_id=%s total_ms=%s",
        request_id,
        round((perf_counter() - started_at) * 1000, 1),
    )
    return response


@router.get("/render")
async def render_help() -> dict[str, object]:
    return {
        "detail": (
            "Use POST /api/render with multipart form-data: "
            "fields 'options', 'url' and optional 'prompt'."
        ),
        "options": {option.value: option.description for option in RenderOption},
    }
