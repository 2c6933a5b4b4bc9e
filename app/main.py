"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.middleware import RequestContextMiddleware
from app.api.routes import api_router
from app.logging_config import setup_logging
from app.persistence.database import create_engine, create_session_factory, init_database
from app.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    engine = create_engine(settings.database_url)
    app.state.session_factory = None
    app.state.analysis_cache = None
    if engine is not None:
        await init_database(engine)
        app.state.session_factory = create_session_factory(engine)
    yield
    # Shutdown
    if engine is not None:
        await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Conversation Insights API",
    description="Voice agent and chat history backend with cached AI conversation analysis",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


class SPAStaticFiles(StaticFiles):
    """Static files that fall back to index.html for client-side routes."""

    def __init__(self, *args, api_prefix: str = "", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.api_prefix = api_prefix.strip("/")

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as e:
            if e.status_code != 404 or self._is_api_path(path):
                raise
            return await super().get_response("index.html", scope)

    def _is_api_path(self, path: str) -> bool:
        if not self.api_prefix:
            return False
        first_segment = path.replace("\\", "/").split("/", 1)[0]
        return first_segment == self.api_prefix


def mount_web_app(app: FastAPI, directory: Path, api_prefix: str = "") -> None:
    """Serve the built web app at /, returning index.html for deep links."""
    app.mount("/", SPAStaticFiles(directory=str(directory), html=True, api_prefix=api_prefix), name="web")


# Serve the built web app in production
web_dist_dir = Path(__file__).parent.parent / "web" / "dist"
if settings.environment == "production" and web_dist_dir.exists():
    mount_web_app(app, web_dist_dir, api_prefix=settings.api_prefix)
