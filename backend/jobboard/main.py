"""
FastAPI application entry point for the company/job admin console.

create_app():
- Builds the Database handle (or takes one, for tests)
- Opens it on startup and closes it on shutdown
- Maps core errors to HTTP responses
- Registers all API routers
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard.config import Settings, get_settings
from jobboard.database import Database
from jobboard.exceptions import Conflict, StorageFailure, ValidationFailure
# Import API routers
from jobboard.api import companies, jobs, options

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationFailure)
    async def validation_failure_handler(request: Request, exc: ValidationFailure):
        return JSONResponse(
            status_code=400,
            content={
                "detail": "Validation failed",
                "issues": [issue.to_dict() for issue in exc.issues],
            },
        )

    @app.exception_handler(Conflict)
    async def conflict_handler(request: Request, exc: Conflict):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(StorageFailure)
    async def storage_failure_handler(request: Request, exc: StorageFailure):
        logger.error(f"{request.method} {request.url.path} failed: {exc} ({exc.detail})")
        content = {"detail": str(exc)}
        if request.app.state.settings.debug:
            content["error"] = exc.detail
        return JSONResponse(status_code=500, content=content)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Open the database on startup and dispose of its pool on shutdown.
        """
        logger.info("🚀 Starting admin console API...")
        logger.info(f"🔧 Debug mode: {settings.debug}")
        await database.open()

        yield

        logger.info("👋 Shutting down admin console API...")
        await database.close()

    app = FastAPI(
        title="Company & Jobs Admin API",
        description="Admin API for company records and their job postings",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    allowed_origins = ["http://localhost:3000"]
    if settings.allowed_origins:
        allowed_origins.extend(origin.strip() for origin in settings.allowed_origins.split(","))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """Simple health check endpoint."""
        return {
            "status": "healthy",
            "service": "Company & Jobs Admin API",
            "version": "1.0.0",
        }

    @app.get("/")
    async def root():
        """API root with basic info."""
        return {
            "message": "Company & Jobs Admin API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
        }

    # Register API routers
    app.include_router(companies.router, prefix="/api/companies", tags=["companies"])
    app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
    app.include_router(options.router, prefix="/api/options", tags=["options"])

    return app


configure_logging(get_settings())
app = create_app()
