import base64
from collections.abc import Callable
from time import perf_counter

from api.core.config import Settings
from api.models.render import BinaryArtifact, JsonEnvelope, RenderOption, RenderResult
from api.services.browser_rendering import BrowserRenderingClient
from api.services.object_storage import ObjectStorage, build_storage_key
from src.logging_config import logger


class RenderDispatcher:
    """
    Route one rendering request to the matching Browser Rendering call.

    Screenshot and PDF come back as raw bytes. PDF and markdown results are
    also written to object storage; the key is returned alongside the result.
    """

    def __init__(
        self,
        settings: Settings,
        rendering_client: BrowserRenderingClient | None = None,
        storage: ObjectStorage | None = None,
    ) -> None:
        settings.require_rendering()
        self.settings = settings
        self.rendering = rendering_client or BrowserRenderingClient(
            api_token=settings.cloudflare_api_token,
            account_id=settings.cloudflare_account_id,
            base_url=settings.cloudflare_api_base_url,
            timeout=settings.render_timeout_seconds,
        )
        self._storage_backend = storage
        self._handlers: dict[RenderOption, Callable[[str, str], RenderResult]] = {
            RenderOption.CONTENT: self._content,
            RenderOption.SCREENSHOT: self._screenshot,
            RenderOption.PDF: self._pdf,
            RenderOption.SNAPSHOT: self._snapshot,
            RenderOption.SCRAPE: self._scrape,
            RenderOption.JSON: self._json,
            RenderOption.LINKS: self._links,
            RenderOption.MARKDOWN: self._markdown,
        }

    @property
    def handled_options(self) -> frozenset[RenderOption]:
        return frozenset(self._handlers)

    def storage(self) -> ObjectStorage:
        if self._storage_backend is None:
            self._storage_backend = ObjectStorage.from_settings(self.settings)
        return self._storage_backend

    def close(self) -> None:
        self.rendering.close()
        if self._storage_backend is not None:
            self._storage_backend.close()

    def dispatch(self, options: str | None, url: str, prompt: str | None = None) -> RenderResult:
        started_at = perf_counter()
        option = RenderOption.parse(options)
        if option.value != options:
            logger.info("Unrecognised option=%r, falling back to %s", options, option.value)

        result = self._handlers[option](url, prompt or "")
        logger.info(
            "Dispatch done option=%s url=%s binary=%s storage_key=%s duration_ms=%s",
            option.value,
            url,
            isinstance(result, BinaryArtifact),
            result.storage_key,
            round((perf_counter() - started_at) * 1000, 1),
        )
        return result

    def _content(self, url: str, _prompt: str) -> JsonEnvelope:
        return JsonEnvelope(data=self.rendering.content(url))

    def _screenshot(self, url: str, _prompt: str) -> BinaryArtifact:
        snapshot = self.rendering.snapshot(url)
        image = base64.b64decode(snapshot["screenshot"])
        return BinaryArtifact(content=image, content_type="image/png")

    def _pdf(self, url: str, _prompt: str) -> BinaryArtifact:
        storage = self.storage()
        document = self.rendering.pdf(url)
        key = storage.upload_multipart(
            build_storage_key("pdf", url, "pdf"), document, "application/pdf"
        )
        return BinaryArtifact(content=document, content_type="application/pdf", storage_key=key)

    def _snapshot(self, url: str, _prompt: str) -> JsonEnvelope:
        return JsonEnvelope(data=self.rendering.snapshot(url).get("content"))

    def _scrape(self, url: str, _prompt: str) -> JsonEnvelope:
        return JsonEnvelope(data=self.rendering.scrape(url))

    def _json(self, url: str, prompt: str) -> JsonEnvelope:
        return JsonEnvelope(data=self.rendering.json(url, prompt=prompt))

    def _links(self, url: str, _prompt: str) -> JsonEnvelope:
        return JsonEnvelope(data=self.rendering.links(url))

    def _markdown(self, url: str, _prompt: str) -> JsonEnvelope:
        storage = self.storage()
        markdown = self.rendering.markdown(url)
        key = storage.put_object(
            build_storage_key("markdown", url, "md"),
            markdown.encode("utf-8"),
            "text/markdown; charset=utf-8",
        )
        return JsonEnvelope(data=markdown, storage_key=key)
