"""
Main FastAPI application.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError

from app.api.v1 import api_router
from app.core.config import settings
from app.db.base import engine
from app.db.init_db import ensure_vector_extension
from app.models import Base
from app.core.exceptions import (
    CodeReviewError,
    ConfluenceError,
    InvalidGuidelineError,
    InvalidReviewRequestError,
    ModelError,
    ProviderError,
    RequestInterruptedError,
    ResourceNotFoundError,
)
import logging

# Configure logging BEFORE creating the app
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s:\t%(name)s\t%(message)s',
    handlers=[
        logging.StreamHandler()  # Output to console
    ]
)
logging.getLogger("uvicorn").setLevel(logging.INFO)
logger = logging.getLogger(__name__)

# Checked in order; subclasses before their bases
ERROR_STATUS_CODES = [
    (InvalidReviewRequestError, status.HTTP_400_BAD_REQUEST),
    (InvalidGuidelineError, status.HTTP_400_BAD_REQUEST),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND),
    (ProviderError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ModelError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (RequestInterruptedError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConfluenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
]

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Guideline-grounded code reviews for GitHub and GitLab repositories",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS - Always apply middleware
cors_origins = settings.BACKEND_CORS_ORIGINS
if not cors_origins or cors_origins == "*":
    cors_origins = ["*"]
logger.info(f"CORS enabled for origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_code_for(exc: CodeReviewError) -> int:
    """Map a service error to its HTTP status; unknown kinds are 500."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# Global exception handlers
@app.exception_handler(CodeReviewError)
async def code_review_exception_handler(request: Request, exc: CodeReviewError):
    """
    Handle service errors.

    Args:
        request: Request object
        exc: Service exception

    Returns:
        JSON response with message and error code
    """
    status_code = status_code_for(exc)
    logger.warning(f"{request.method} {request.url.path} failed with {exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.error_code},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON response with error details
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors(), "error": "validation_error"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle all unhandled exceptions.

    Args:
        request: Request object
        exc: Exception

    Returns:
        JSON response with a generic message
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred", "error": "internal_error"},
    )


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """
    Run on application startup.
    """
    logger.info(f"Starting {settings.PROJECT_NAME}")
    ensure_vector_extension(engine)
    Base.metadata.create_all(bind=engine)
    logger.info("Documentation available at: http://localhost:8000/docs")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Run on application shutdown.
    """
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - Health check.

    Returns:
        Status message
    """
    return {
        "message": "Code Review Assistant API",
        "status": "healthy",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy"}


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
