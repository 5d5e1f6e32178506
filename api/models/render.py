from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RenderOption(str, Enum):
    CONTENT = "/content"
    SCREENSHOT = "/screenshot"
    PDF = "/pdf"
    SNAPSHOT = "/snapshot"
    SCRAPE = "/scrape"
    JSON = "/json"
    LINKS = "/links"
    MARKDOWN = "/markdown"

    @property
    def description(self) -> str:
        return OPTION_DESCRIPTIONS[self]

    @property
    def is_binary(self) -> bool:
        return self in BINARY_OPTIONS

    @classmethod
    def parse(cls, value: str | None) -> "RenderOption":
        """Map a raw form value to an option, falling back to full content."""
        try:
            return cls(value)
        except ValueError:
            return cls.CONTENT


OPTION_DESCRIPTIONS: dict[RenderOption, str] = {
    RenderOption.CONTENT: "Get the content of a website.",
    RenderOption.SCREENSHOT: "Take a screenshot of a website.",
    RenderOption.PDF: "Convert a website to PDF.",
    RenderOption.SNAPSHOT: "Take a snapshot of a website.",
    RenderOption.SCRAPE: "Scrape a website for data.",
    RenderOption.JSON: "Get the JSON representation of a website.",
    RenderOption.LINKS: "Get all the links on a website.",
    RenderOption.MARKDOWN: "Convert a website to Markdown.",
}

BINARY_OPTIONS = frozenset({RenderOption.SCREENSHOT, RenderOption.PDF})


@dataclass(frozen=True)
class BinaryArtifact:
    content: bytes
    content_type: str
    storage_key: str | None = None


class JsonEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: bool = False
    data: Any = None
    # Only set for markdown, omitted from the payload otherwise.
    storage_key: str | None = Field(default=None, alias="r2Key")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"data"}) | {"data": self.data}


RenderResult = BinaryArtifact | JsonEnvelope
