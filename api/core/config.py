import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(RuntimeError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required configuration: {', '.join(missing)}")
        self.missing = missing


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


@dataclass(frozen=True)
class Settings:
    api_name: str = field(default_factory=lambda: _env("API_NAME", "Browser Rendering Playground API"))
    api_version: str = field(default_factory=lambda: _env("API_VERSION", "1.0.0"))

    cloudflare_api_token: str = field(default_factory=lambda: _env("CLOUDFLARE_API_TOKEN"))
    cloudflare_account_id: str = field(default_factory=lambda: _env("CLOUDFLARE_ACCOUNT_ID"))
    cloudflare_api_base_url: str = field(
        default_factory=lambda: _env("CLOUDFLARE_API_BASE_URL", "https://api.cloudflare.com/client/v4")
    )
    render_timeout_seconds: int = field(default_factory=lambda: int(_env("RENDER_TIMEOUT_SECONDS", "60")))

    r2_endpoint: str = field(default_factory=lambda: _env("R2_ENDPOINT"))
    r2_access_key_id: str = field(default_factory=lambda: _env("R2_ACCESS_KEY_ID"))
    r2_secret_access_key: str = field(default_factory=lambda: _env("R2_SECRET_ACCESS_KEY"))
    r2_bucket_name: str = field(default_factory=lambda: _env("R2_BUCKET_NAME"))

    def require_rendering(self) -> None:
        """Raise if the Browser Rendering credentials are not configured."""
        _require(
            {
                "CLOUDFLARE_API_TOKEN": self.cloudflare_api_token,
                "CLOUDFLARE_ACCOUNT_ID": self.cloudflare_account_id,
            }
        )

    def require_storage(self) -> None:
        """Raise if the R2 bucket settings are not configured."""
        _require(
            {
                "R2_ENDPOINT": self.r2_endpoint,
                "R2_ACCESS_KEY_ID": self.r2_access_key_id,
                "R2_SECRET_ACCESS_KEY": self.r2_secret_access_key,
                "R2_BUCKET_NAME": self.r2_bucket_name,
            }
        )


def _require(values: dict[str, str]) -> None:
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(missing)


settings = Settings()
