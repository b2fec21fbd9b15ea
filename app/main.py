import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.router import router as v1_router
from app.config import settings
from app.core.exception_handlers import (
    app_exception_handler,
    error_response,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.exceptions import AppException, RateLimitError
from app.services.container import build_container

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

RATE_LIMIT_EXEMPT_PATHS = {"/", "/health", "/favicon.ico"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.container
    await container.startup()
    logger.info("OpenAI model: %s", settings.OPENAI_MODEL)
    if not settings.github_oauth_configured:
        logger.warning("GitHub OAuth credentials not provided. PVP mode will not work.")
    yield
    await container.shutdown()


app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
)

# Match table, caches and clients live for the whole process
app.state.container = build_container(settings)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.middleware("http")
async def rate_limit(request: Request, call_next):
    if request.url.path in RATE_LIMIT_EXEMPT_PATHS or request.method == "OPTIONS":
        return await call_next(request)

    client_ip = request.client.host if request.client else "unknown"
    decision = request.app.state.container.rate_limiter.check(client_ip)
    if not decision.allowed:
        logger.warning("Rate limit exceeded for %s on %s", client_ip, request.url.path)
        return error_response(RateLimitError(retry_after=decision.retry_after(time.time())))

    response = await call_next(request)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    response.headers["X-RateLimit-Reset"] = str(int(decision.reset_at))
    return response


# Parse CORS origins from settings
cors_origins = [origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/")
async def api_info():
    return {
        "name": settings.APP_NAME,
        "description": "GitHub developer roasts, comparisons and PVP matches",
        "endpoints": {
            "GET /health": "Health check",
            "POST /api/v1/roast": "Roast, advice and personality profile for a GitHub user",
            "POST /api/v1/compare": "Compare two GitHub users and pick a winner",
            "POST /api/v1/translate": "Translate text to a target language",
            "POST /api/v1/tts": "Text to speech (MP3)",
            "GET /api/v1/leaderboard": "Leaderboard of top developers",
            "GET /api/v1/leaderboard/{username}": "Stats for one user",
            "GET /api/v1/auth/github": "Start GitHub OAuth flow",
            "GET /api/v1/auth/me": "Current session user",
            "POST /api/v1/auth/logout": "Logout",
            "POST /api/v1/pvp/create": "Create a PVP match",
            "POST /api/v1/pvp/join": "Join a PVP match",
            "GET /api/v1/pvp/match/{match_id}": "Match status",
            "POST /api/v1/pvp/ready/{match_id}": "Mark player as ready",
            "GET /api/v1/pvp/my-match": "Current user's match",
            "DELETE /api/v1/pvp/my-match": "Leave the current match",
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Serve the built frontend, falling back to index.html for client-side routes
if settings.FRONTEND_DIST_DIR:
    frontend_dir = Path(settings.FRONTEND_DIST_DIR)
    if frontend_dir.is_dir():
        app.mount("/app", StaticFiles(directory=str(frontend_dir), html=True), name="frontend")
    else:
        logger.warning("FRONTEND_DIST_DIR %s does not exist, not serving frontend", frontend_dir)
