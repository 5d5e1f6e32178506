from collections.abc import Callable

from fastapi import APIRouter

from api.core.config import ConfigurationError, Settings

router = APIRouter(tags=["health"])


def _configured(check: Callable[[], None]) -> bool:
    try:
        check()
    except ConfigurationError:
        return False
    return True


@router.get("/health")
def health() -> dict[str, object]:
    current = Settings()
    return {
        "status": "ok",
        "service": current.api_name,
        "version": current.api_version,
        "rendering_configured": _configured(current.require_rendering),
        "storage_configured": _configured(current.require_storage),
    }
