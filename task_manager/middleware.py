"""Application middleware."""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from .config import PUBLIC_PATHS, PUBLIC_ROUTES
from .database import connect
from .dependencies import build_auth_service
from .errors import AuthError

logger = logging.getLogger(__name__)


def _authenticate(token_issuer, header: str | None):
    db = connect()
    try:
        return build_auth_service(db, token_issuer).authenticate(header)
    finally:
        db.close()


def _is_routed(request: Request) -> bool:
    """True when some route matches the path, whatever the method."""
    return any(
        route.matches(request.scope)[0] != Match.NONE
        for route in request.app.router.routes
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware to check bearer tokens on all protected routes."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        route_path = path.rstrip("/") or "/"

        # Allow public paths, and let unknown paths fall through to a 404
        if (
            route_path in PUBLIC_PATHS
            or (request.method, route_path) in PUBLIC_ROUTES
            or not _is_routed(request)
        ):
            return await call_next(request)

        try:
            user, token = await run_in_threadpool(
                _authenticate,
                request.app.state.token_issuer,
                request.headers.get("Authorization")
            )
        except AuthError as e:
            logger.debug("%s %s rejected: %s", request.method, path, type(e).__name__)
            return JSONResponse(status_code=e.status_code, content={"detail": e.detail})

        # Valid token - attach user and the matched token to request state
        request.state.user = user
        request.state.token = token
        return await call_next(request)


def register_middleware(app: FastAPI) -> None:
    """Attach app-level middleware (order matters - last added runs first)."""
    app.add_middleware(AuthMiddleware)

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s - %d in %.3fs", request.method, request.url.path,
                     response.status_code, elapsed)
        return response
