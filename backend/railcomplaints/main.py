import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from railcomplaints.api.routes import auth, complaints, stats
from railcomplaints.core.config import Settings
from railcomplaints.core.database import create_db_engine, create_session_factory, init_db
from railcomplaints.core.errors import ValidationError
from railcomplaints.core.logging_config import configure_logging
from railcomplaints.core.security import PasswordHasher

logger = logging.getLogger(__name__)


def check_secret_key(settings: Settings) -> None:
    """Refuse the development signing key in production, warn about it elsewhere"""
    if not settings.uses_default_secret:
        return
    if settings.is_production:
        raise RuntimeError("SECRET_KEY must be configured when ENVIRONMENT=production")
    logger.warning(
        "SECRET_KEY is not configured; using the built-in development key. "
        "This is unsafe for production use."
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    The settings, database engine, session factory and password hasher are
    created once here and shared through app.state for the life of the
    process; the engine is disposed on shutdown.

    Serve with: uvicorn railcomplaints.main:create_app --factory
    """
    if settings is None:
        settings = Settings()

    configure_logging(settings.LOG_LEVEL)
    check_secret_key(settings)

    engine = create_db_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: create tables if they don't exist
        init_db(engine)
        logger.info("Rail Complaints API started")
        yield
        # Shutdown: close pooled connections
        engine.dispose()
        logger.info("Rail Complaints API stopped")

    app = FastAPI(
        title="Rail Complaints API",
        description="Authenticated storage for railway passenger complaints",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.password_hasher = PasswordHasher(settings.BCRYPT_ROUNDS)

    # CORS middleware - allows the dashboard frontend to call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Malformed input is a 400 for this API, not FastAPI's default 422
        return JSONResponse(
            status_code=ValidationError.status_code,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    # All API routes are prefixed with /api
    app.include_router(auth.router, prefix="/api")
    app.include_router(complaints.router, prefix="/api")
    app.include_router(stats.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint - API information"""
        return {"message": "Rail Complaints API", "version": "1.0.0"}

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "healthy"}

    return app
