"""
Today I Learned - FastAPI Application.

Serves the fact board as HTML and the same operations as a JSON API,
backed by either the local database or a hosted REST store.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from til.board import BoardBusyError
from til.config import get_settings
from til.database import init_db
from til.models import HealthResponse
from til.routes import categories_router, facts_router, pages_router
from til.store import FactStore, StoreError, get_store


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    if settings.uses_hosted_store:
        logger.info(f"Using hosted store at {settings.supabase_url}")
    else:
        init_db()
        logger.info("Database initialized")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
## Today I Learned

Share short facts with a trustworthy source, browse them by category,
and vote on how credible they are.

### API Flow

1. Share a fact (POST /api/facts)
2. Browse facts, optionally by category (GET /api/facts?category=science)
3. Vote on a fact (POST /api/facts/{id}/votes)

Facts with more "false" votes than "interesting" and "mindblowing"
votes combined are marked as disputed.
    """,
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
origins = settings.allowed_origins.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


# Include routers
app.include_router(facts_router, prefix="/api")
app.include_router(categories_router, prefix="/api")
app.include_router(pages_router)


@app.exception_handler(BoardBusyError)
async def board_busy_handler(request: Request, exc: BoardBusyError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/health", response_model=HealthResponse)
def health_check(store: FactStore = Depends(get_store)) -> HealthResponse:
    """
    Health check endpoint.

    Returns service health status and the number of facts.
    """
    try:
        facts_count = store.count_facts()
        store_connected = True
    except StoreError:
        facts_count = 0
        store_connected = False

    return HealthResponse(
        status="healthy" if store_connected else "degraded",
        version=settings.app_version,
        store=store.backend,
        store_connected=store_connected,
        facts_count=facts_count
    )


def main():
    import uvicorn
    uvicorn.run(
        "til.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )


if __name__ == "__main__":
    main()
