"""Task Manager API - FastAPI Entry Point."""
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__, config
from .database import init_db, cleanup_expired_tokens
from .errors import AppError
from .middleware import register_middleware
from .services.tokens import TokenIssuer

# Import routers
from .routes import users_router, tasks_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: a missing secret aborts here, before any request is served
    config.check_config()
    init_db()
    expired = cleanup_expired_tokens()
    if expired:
        logger.info("Removed %d expired tokens", expired)
    app.state.token_issuer = TokenIssuer(
        config.JWT_SECRET,
        expires_hours=config.TOKEN_EXPIRY_HOURS,
        algorithm=config.JWT_ALGORITHM,
    )
    logger.info("Task Manager ready (database: %s)", config.DATABASE_PATH)
    yield


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render application errors as {"detail": ...} with their status."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and query strings are client errors (400)."""
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"detail": exc.errors()}),
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Task Manager", version=__version__, lifespan=lifespan)

    register_middleware(app)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(users_router)
    app.include_router(tasks_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run(
        "task_manager.main:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
