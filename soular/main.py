import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from soular.config.settings import settings
from soular.modules.auth import routes as auth_routes
from soular.modules.profile import routes as profile_routes
from soular.modules.uploads import routes as uploads_routes
from soular.modules.films import routes as films_routes
from soular.modules.comments import routes as comments_routes
from soular.modules.favorites import routes as favorites_routes
from soular.modules.collections import routes as collections_routes
from soular.modules.events import routes as events_routes
from soular.modules.forum import routes as forum_routes
from soular.modules.notifications import routes as notifications_routes
from soular.modules.settings import routes as settings_routes
from soular.modules.subscription import routes as subscription_routes
from soular.modules.admin import routes as admin_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
app.include_router(profile_routes.router, prefix="/api")
app.include_router(uploads_routes.router, prefix="/api")
app.include_router(films_routes.router, prefix="/api")
app.include_router(comments_routes.router, prefix="/api")
app.include_router(favorites_routes.router, prefix="/api")
app.include_router(collections_routes.router, prefix="/api")
app.include_router(events_routes.router, prefix="/api")
app.include_router(forum_routes.router, prefix="/api")
app.include_router(notifications_routes.router, prefix="/api")
app.include_router(settings_routes.router, prefix="/api")
app.include_router(subscription_routes.router, prefix="/api")
app.include_router(admin_routes.router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup (%s)", settings.environment)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to soular-api", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: reports whether the database connection is configured."""
    if not settings.supabase_url or not settings.supabase_key:
        return JSONResponse(status_code=503, content={"status": "not ready", "detail": "Supabase is not configured"})
    return {"status": "ready"}
