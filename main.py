import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import init_db
from app.core.errors import FlowStatus, InvalidInputError
from app.core.logging_config import setup_logging
from app.api.endpoints import account, auth, health, verification
from app.services.email_service import EmailService

setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS, service=settings.PROJECT_NAME)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Shared collaborators (the email dispatcher) are built once here and
    reached by endpoints through app.state.
    """
    # Startup
    logger.info("Starting up Account Tokens API...")
    init_db()
    app.state.email_service = EmailService(settings)
    logger.info("Email service initialized")

    yield

    # Shutdown
    logger.info("Shutting down Account Tokens API...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Email confirmation, password reset and email change by one-time code",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests with the same tagged shape as flow outcomes."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else InvalidInputError.default_message
    return JSONResponse(
        status_code=422,
        content={
            "status": FlowStatus.FAILED.value,
            "message": message,
            "reason": InvalidInputError.reason,
        },
    )


# Include routers
app.include_router(auth.router, prefix=settings.API_V1_STR)
app.include_router(verification.router, prefix=settings.API_V1_STR)
app.include_router(account.router, prefix=settings.API_V1_STR)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "Account Tokens API",
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
