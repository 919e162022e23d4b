from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .exceptions import (
    AlreadyExpiredError,
    ApplicationError,
    InvalidConfigError,
    InvalidTransitionError,
    NotFoundError,
)
from .logger import get_logger, setup_logging
from .routers import notes as notes_router
from .routers import timer as timer_router
from .settings import get_settings

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "notes",
        "description": "Notes whose checkbox lines are kept in sync with child notes.",
    },
    {"name": "timer", "description": "The single Pomodoro timer session, advanced by explicit ticks."},
]

_settings = get_settings()
setup_logging(level=_settings.log_level, log_to_file=_settings.log_to_file, log_dir=_settings.log_dir)
logger = get_logger(__name__)

app = FastAPI(
    title="tomatxt Backend",
    description="Command backend for a note-taking tool with checklists and a Pomodoro timer.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

EXCEPTION_STATUS_MAP: dict = {
    NotFoundError: 404,
    InvalidConfigError: 422,
    InvalidTransitionError: 409,
    AlreadyExpiredError: 409,
}


@app.exception_handler(ApplicationError)
async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """
    Return the error code and message of an application error.

    Response format:
        {"error": "RES_NOT_FOUND", "message": "Note 42 not found"}
    """
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    logger.warning(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"error": exc.code, "message": exc.message})


# Global exception handlers for consistent JSON on validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": exc.errors(),
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# Include routers
app.include_router(notes_router.router)
app.include_router(timer_router.router)
