
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from docvault.middleware.ratelimit import RateLimitMiddleware, make_key_func
from docvault.middleware.size_limit import RequestSizeLimitMiddleware
from docvault.config import Settings, DEV_SECRET, get_settings
from docvault.db.session import Database
from docvault.errors import register_error_handlers
from docvault.extraction import TextExtractor
from docvault.logging import setup_logging
from docvault.storage.files import FileStore
from docvault.utils.security import TokenService
from docvault.auth.routes import router as auth_router
from docvault.documents.routes import router as documents_router
from docvault.uploads.routes import router as upload_router

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads"

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    app.state.db.init_db()
    logger.info("%s started (env=%s, uploads=%s)", settings.app_name, settings.app_env, settings.upload_dir)
    yield
    app.state.db.dispose()

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    if settings.is_production and settings.secret_key == DEV_SECRET:
        raise RuntimeError("JWT_SECRET must be set in production")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.state.settings = settings
    app.state.db = Database(settings.database_url)
    app.state.tokens = TokenService(settings.secret_key, settings.access_token_expire_minutes)
    app.state.file_store = FileStore(
        settings.upload_dir,
        base_url=settings.app_url,
        url_prefix=UPLOADS_PREFIX,
        max_bytes=settings.max_file_size,
    )
    app.state.extractor = TextExtractor()
    app.state.file_store.ensure_ready()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        RateLimitMiddleware,
        window_seconds=settings.rate_limit_window_seconds,
        max_calls=settings.rate_limit_max_calls,
        key_func=make_key_func(app.state.tokens),
    )
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_file_size)

    register_error_handlers(app, expose_details=not settings.is_production)

    app.include_router(auth_router)
    app.include_router(documents_router)
    app.include_router(upload_router)

    app.mount(UPLOADS_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")

    @app.get("/", tags=["root"])
    def root():
        return {"name": settings.app_name, "env": settings.app_env}

    @app.get("/health", tags=["root"])
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


def run():
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
