import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Load configuration from single .env file
load_dotenv("shem-dashboard.env")

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.errors import AppError, error_response
from api.routes import root_router, router
from storage.base import ReadingStore
from storage.memory import InMemoryReadingStore

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


def get_store(backend: str) -> ReadingStore:
    """Initialize the selected reading store with hard fail on misconfiguration"""
    if backend == "memory":
        logger.warning("Using in-memory store: readings are lost on restart")
        return InMemoryReadingStore()
    elif backend == "supabase":
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_KEY")
        if not url or not key:
            logger.error("Supabase: SUPABASE_URL and SUPABASE_KEY must be set in shem-dashboard.env")
            sys.exit(1)

        from storage.supabase import DEFAULT_TABLE, SupabaseReadingStore
        table = os.getenv("SUPABASE_TABLE", DEFAULT_TABLE)
        logger.info("Using store: Supabase")
        return SupabaseReadingStore(url=url, key=key, table=table)
    else:
        logger.error(f"Unknown store backend: {backend}")
        sys.exit(1)


def get_history_limit() -> int:
    raw = os.getenv("HISTORY_LIMIT", str(DEFAULT_HISTORY_LIMIT))
    try:
        limit = int(raw)
    except ValueError:
        limit = 0
    if limit <= 0:
        logger.error(f"HISTORY_LIMIT must be a positive integer, got {raw!r}")
        sys.exit(1)
    return limit


def create_app(store: ReadingStore | None = None, history_limit: int | None = None) -> FastAPI:
    """Create the API application; store and limit default to the environment."""
    app = FastAPI(
        title="SHEM Energy Backend",
        description="Ingestion and read API for the home energy sensor node",
        version="1.0.0",
    )
    app.state.store = store if store is not None else get_store(os.getenv("STORE_BACKEND", "memory"))
    app.state.history_limit = history_limit if history_limit is not None else get_history_limit()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_response(exc))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled exception on {request.url.path}: {type(exc).__name__}: {exc}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    app.include_router(root_router)
    app.include_router(router)
    return app


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="SHEM Energy Backend")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "5000")),
        help="Port to listen on (default: 5000 or $PORT)"
    )
    args = parser.parse_args()

    import uvicorn

    try:
        uvicorn.run("server:create_app", factory=True, host=args.host, port=args.port, log_level="info")
    except KeyboardInterrupt:
        logger.info("Server stopped by user.")
