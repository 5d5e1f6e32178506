from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request

from api.core.config import settings
from api.routes.health import router as health_router
from api.routes.render import router as render_router
from src.logging_config import logger


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.api_name,
        version=settings.api_version,
        description=(
            "Forwards rendering requests to the Cloudflare Browser Rendering API. "
            "PDF and markdown results are also stored in R2."
        ),
    )

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "hello world", "service": settings.api_name}

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):  # type: ignore[no-untyped-def]
        logger.exception("Unhandled error path=%s type=%s", request.url.path, exc.__class__.__name__)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "detail": "Unexpected server error.",
                "type": exc.__class__.__name__,
            },
        )

    app.include_router(health_router)
    app.include_router(render_router)
    return app


app = create_app()
