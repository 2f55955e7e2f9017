import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core import Config, setup_logging, MalformedBodyError, PrettyJSONResponse, error_response
from .user_service import UserService
from .session_service import SessionService
from .user_routes import create_user_router
from .session_routes import create_session_router
from .demo_routes import create_demo_router

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def apply_cors_headers(request: Request, response: Response) -> Response:
    """
    Attach CORS headers, echoing the caller's Origin.

    Applied by the dispatch middleware instead of CORSMiddleware: these
    headers go on every response (errors and requests without an Origin
    included), and every OPTIONS request is answered with 204, whereas
    CORSMiddleware only decorates cross-origin requests and answers real
    preflights with 200.
    """
    origin = request.headers.get("origin") or Config.DEFAULT_CORS_ORIGIN
    response.headers["Access-Control-Allow-Origin"] = origin
    response.headers["Access-Control-Allow-Methods"] = Config.CORS_ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = Config.CORS_ALLOW_HEADERS
    response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


def create_app() -> FastAPI:
    """
    Build the application with fresh, seeded stores.

    Each call returns an independent app; the module-level `app` is the one
    uvicorn serves.
    """
    user_service = UserService.with_seed_users()
    session_service = SessionService(Config.DEMO_USERNAME, Config.DEMO_PASSWORD)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for FastAPI application"""
        logger.info(f"Starting HTTP Exercise Server on {Config.SERVER_HOST}:{Config.SERVER_PORT}")
        logger.info(f"Seeded {await user_service.count()} users")
        logger.info(f"Logging level: {Config.LOG_LEVEL}")
        yield
        stats = session_service.get_stats()
        logger.info(f"Shutting down HTTP Exercise Server ({stats['active_sessions']} sessions discarded)")

    # Rate Limiting (login brute force)
    limiter = Limiter(key_func=get_remote_address)

    app = FastAPI(
        title="HTTP Exercise Server",
        description="Routing, JSON, cookies, sessions and headers over an in-memory user list",
        version="1.0.0",
        lifespan=lifespan,
        default_response_class=PrettyJSONResponse,
        redirect_slashes=False
    )

    app.state.limiter = limiter
    app.state.user_service = user_service
    app.state.session_service = session_service

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render every HTTP error as {"error": detail}."""
        if exc.status_code == 405:
            # Known path, wrong method: reported like any unmatched route
            return error_response(404, "Not Found")
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(MalformedBodyError)
    async def malformed_body_handler(request: Request, exc: MalformedBodyError):
        logger.error(f"Server Error: {exc}")
        return error_response(500, "Internal Server Error")

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        """Handle rate limit exceeded errors"""
        logger.warning(f"Rate limit exceeded for {get_remote_address(request)}: {exc.detail}")
        return error_response(429, "Too many requests. Please try again later.")

    @app.middleware("http")
    async def dispatch(request: Request, call_next):
        """
        Outermost request boundary: logs the request, answers preflight,
        converts uncaught failures to 500 and adds CORS headers to everything.
        """
        logger.info(f"{request.method} {request.url.path}")

        if request.method == "OPTIONS":
            return apply_cors_headers(request, Response(status_code=204))

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Server Error: {type(e).__name__} - {e}")
            logger.error(f"Traceback: {traceback.format_exc()}")
            response = error_response(500, "Internal Server Error")

        return apply_cors_headers(request, response)

    app.include_router(create_demo_router(user_service))
    app.include_router(create_user_router(user_service))
    app.include_router(create_session_router(session_service, limiter))

    return app


# FastAPI Application
app = create_app()
