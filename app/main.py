from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager
from dotenv import load_dotenv
import logging

# Load environment variables as early as possible
load_dotenv()

from .config import Settings, settings as default_settings
from .database import Database
from .db.seed import seed_doctors
from .exceptions import (
    ClinicError,
    clinic_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
)
from .middleware import LoggingMiddleware, SecurityMiddleware
from .routers import bookings_router, doctors_router
from .schemas.common.common import HealthResponse
from .utils import utc_now

# Configure logging
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL),
    format=default_settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


def create_app(config: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {config.APP_NAME}...")
        db = database or Database(config)
        app.state.db = db
        app.state.db_init_ok = True
        app.state.db_init_error = None
        try:
            db.create_db_and_tables()
            if config.SEED_ON_STARTUP:
                with db.session() as session:
                    seed_doctors(session)
            logger.info("Database initialized successfully")
        except Exception as e:
            # Do not crash the app; report via health endpoint
            app.state.db_init_ok = False
            app.state.db_init_error = str(e)
            logger.exception("Database initialization failed")
        yield
        # Shutdown
        logger.info(f"Shutting down {config.APP_NAME}...")
        db.close()

    app = FastAPI(
        title=config.APP_NAME,
        version=config.APP_VERSION,
        debug=config.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if config.DOCS_ENABLED else None),
        redoc_url=("/redoc" if config.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if config.DOCS_ENABLED else None)
    )
    app.state.settings = config

    # Error responses are always {"error": ..., "details"?: [...]}
    app.add_exception_handler(ClinicError, clinic_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)

    # GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=config.GZIP_MIN_SIZE)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins_list,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(bookings_router.router, prefix=config.API_PREFIX)
    app.include_router(doctors_router.router, prefix=config.API_PREFIX)

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(request: Request):
        db: Database = request.app.state.db
        db_ok = getattr(request.app.state, "db_init_ok", True) and db.ping()
        return HealthResponse(
            status="healthy" if db_ok else "degraded",
            service=config.APP_NAME,
            version=config.APP_VERSION,
            timestamp=utc_now().isoformat(),
            database={
                "ok": db_ok,
                "error": getattr(request.app.state, "db_init_error", None),
            },
        )

    return app


app = create_app()


# ------------------------
# Run with correct PORT in local/production
# ------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower()
    )
