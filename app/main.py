"""FastAPI application entrypoint."""
import logging
import sys
from pathlib import Path

# Project root (parent of app/)
_ROOT = Path(__file__).resolve().parent.parent
_STATIC = Path(__file__).resolve().parent / "static"

# Load .env FIRST so TUTOR_*, LOG_LEVEL, etc. are set before any app code reads them.
# override=True so .env wins (important when uvicorn reload spawns a worker that may not inherit env).
from dotenv import load_dotenv
load_dotenv(_ROOT / ".env", override=True)

# Ensure project root is on path when run as: python app/main.py
if __name__ == "__main__" or "app" not in sys.modules:
    if str(_ROOT) not in sys.path:
        sys.path.insert(0, str(_ROOT))

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from app.api.routes import router
from app.core.config import get_settings
from app.core.conversation import SessionStore

# Set LOG_LEVEL=DEBUG to see reply previews per session
logging.basicConfig(level=getattr(logging, get_settings().log_level, logging.INFO))
_log = logging.getLogger(__name__)

# Keep third-party HTTP libs quiet (request bodies carry user questions)
for _name in ("httpx", "httpcore", "urllib3"):
    logging.getLogger(_name).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    _log.info(
        "Tutor endpoint: %s (timeout %.0fs, escape HTML: %s)",
        settings.tutor_api_url,
        settings.tutor_timeout_seconds,
        settings.escape_reply_html,
    )
    yield
    _log.info("Shutting down with %d chat session(s) in memory.", len(app.state.sessions))


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.sessions = SessionStore()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["POST", "OPTIONS", "GET"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.include_router(router)

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(_STATIC / "index.html", media_type="text/html")

    return app


app = create_app()


def run() -> None:
    """Dev server. HOST=0.0.0.0 allows network access; RELOAD=0 turns off auto-reload."""
    import os
    import uvicorn
    host = os.getenv("HOST", "127.0.0.1")  # 127.0.0.1 = localhost only
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "1").strip().lower() not in ("0", "false", "no")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    run()
