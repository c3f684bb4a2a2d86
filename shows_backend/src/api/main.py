import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import engine, init_db
from .errors import ShowNotFoundError, UnauthorizedError
from .logging_config import setup_logging
from .routers import shows as shows_router
from .settings import get_settings

_settings = get_settings()
setup_logging(_settings.log_level)

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "shows",
        "description": "CRUD operations for Shows plus the IsOld validation pass. Requires x-api-key.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if _settings.auto_init_db:
        init_db()
    logger.info("Shows backend started (database: %s)", engine.dialect.name)
    yield


app = FastAPI(
    title="Shows Backend",
    description="Backend API service for managing TV show records.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
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


@app.exception_handler(UnauthorizedError)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedError) -> Response:
    logger.warning("Rejected %s %s: invalid or missing x-api-key", request.method, request.url.path)
    return Response(status_code=status.HTTP_401_UNAUTHORIZED)


@app.exception_handler(ShowNotFoundError)
async def not_found_exception_handler(request: Request, exc: ShowNotFoundError) -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "database": engine.dialect.name}


app.include_router(shows_router.router)
