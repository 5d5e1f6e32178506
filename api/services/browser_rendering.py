from typing import Any

import requests

from src.logging_config import logger

SCRAPE_SELECTORS = ("h1", "a")


class BrowserRenderingError(RuntimeError):
    def __init__(self, message: str, status_code: int, body: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BrowserRenderingClient:
    """Thin client for the Cloudflare Browser Rendering REST endpoints."""

    def __init__(
        self,
        api_token: str,
        account_id: str,
        base_url: str = "https://api.cloudflare.com/client/v4",
        timeout: int = 60,
        session: requests.Session | None = None,
    ) -> None:
        self.account_id = account_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {api_token}"})

    def close(self) -> None:
        self.session.close()

    def _endpoint(self, name: str) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/browser-rendering/{name}"

    def _post(self, name: str, payload: dict[str, Any]) -> requests.Response:
        logger.info("Browser rendering call endpoint=%s url=%s", name, payload.get("url"))
        resp = self.session.post(self._endpoint(name), json=payload, timeout=self.timeout)
        if not resp.ok:
            raise BrowserRenderingError(
                f"POST /browser-rendering/{name} failed: {resp.status_code} {resp.text}",
                resp.status_code,
                resp.text,
            )
        return resp

    def _post_json(self, name: str, payload: dict[str, Any]) -> Any:
        resp = self._post(name, payload)
        body = resp.json()
        if not body.get("success", False):
            raise BrowserRenderingError(
                f"POST /browser-rendering/{name} returned errors: {body.get('errors')}",
                resp.status_code,
                resp.text,
            )
        return body.get("result")

    def content(self, url: str) -> str:
        return self._post_json("content", {"url": url})

    def pdf(self, url: str) -> bytes:
        return self._post("pdf", {"url": url}).content

    def snapshot(self, url: str) -> dict[str, Any]:
        """Return ``{"content": <html>, "screenshot": <base64 png>}``."""
        return self._post_json("snapshot", {"url": url})

    def scrape(self, url: str, selectors: tuple[str, ...] = SCRAPE_SELECTORS) -> list[dict[str, Any]]:
        elements = [{"selector": selector} for selector in selectors]
        return self._post_json("scrape", {"url": url, "elements": elements})

    def json(self, url: str, prompt: str = "") -> dict[str, Any]:
        return self._post_json("json", {"url": url, "prompt": prompt})

    def links(self, url: str) -> list[str]:
        return self._post_json("links", {"url": url})

    def markdown(self, url: str) -> str:
        return self._post_json("markdown", {"url": url})
