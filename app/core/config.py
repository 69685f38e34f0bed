"""Application settings from environment."""
import os
from functools import lru_cache

DEFAULT_TUTOR_API_URL = "https://aitutorbackend-production-1e4f.up.railway.app/ask"


@lru_cache
def get_settings() -> "Settings":
    return Settings()


class Settings:
    """Central config. Load .env in main/cli before using. Properties read env at access time."""

    # Remote tutor (question answering service)
    @property
    def tutor_api_url(self) -> str:
        return os.getenv("TUTOR_API_URL", "").strip() or DEFAULT_TUTOR_API_URL

    @property
    def tutor_timeout_seconds(self) -> float:
        raw = os.getenv("TUTOR_TIMEOUT_SECONDS", "30").strip()
        try:
            return max(1.0, min(120.0, float(raw)))
        except ValueError:
            return 30.0

    # Escape HTML in replies before formatting so only formatter tags reach the page
    @property
    def escape_reply_html(self) -> bool:
        return os.getenv("ESCAPE_REPLY_HTML", "1").strip().lower() not in ("0", "false", "no")

    # API
    @property
    def api_title(self) -> str:
        return os.getenv("API_TITLE", "AI Tutor API").strip()

    @property
    def api_version(self) -> str:
        return os.getenv("API_VERSION", "0.1.0").strip()

    # CORS: comma-separated origins (e.g. http://localhost:3000) or * for all
    @property
    def cors_origins(self) -> list[str]:
        raw = os.getenv("CORS_ORIGINS", "*").strip()
        if not raw or raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
