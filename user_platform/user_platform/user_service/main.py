from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from .config import settings, validate_runtime_config
from .db import init_db
from .errors import NotFound, UserServiceError
from .routes import auth
from .schemas import HealthResponse
from .utils.event_logger import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Validate configuration and initialize database on startup"""
    validate_runtime_config(settings)
    configure_logging(settings)
    init_db()
    yield


app = FastAPI(
    title="User Service",
    description="User registration and token-based authentication",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)


@app.exception_handler(UserServiceError)
async def user_service_error_handler(request: Request, exc: UserServiceError):
    if isinstance(exc, NotFound):
        logger.error("Inconsistent user state on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are client errors; validation internals stay server-side
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    logger.info("Rejected malformed request on %s: fields=%s", request.url.path, fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request"},
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()
