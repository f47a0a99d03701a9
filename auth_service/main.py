import time
import logging
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .domain.errors import ConfigurationError
from .infrastructure.db import make_engine, make_session_factory, init_db
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.security import PasswordHasher, TokenIssuer, parse_ttl
from .interfaces.http.errors import register_exception_handlers
from .interfaces.http.routers import auth as auth_router

VERSION = "0.1.0"

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_token_issuer(settings: Settings) -> TokenIssuer:
    """Падает с ConfigurationError, если секрет или срок жизни токена не заданы."""
    if not settings.JWT_SECRET:
        raise ConfigurationError("JWT_SECRET is not set")
    return TokenIssuer(settings.JWT_SECRET, parse_ttl(settings.JWT_EXPIRE), settings.JWT_ALGORITHM)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Auth Service", version=VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        allow_credentials=True,
    )

    # Middleware для кодировки, метрик и логирования запросов
    @app.middleware("http")
    async def add_charset_header(request: Request, call_next):
        start_time = time.time()
        method = request.method
        path = request.url.path

        # необработанное исключение превратится в 500 уже снаружи, в ServerErrorMiddleware
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            if response.headers.get("content-type", "").startswith("application/json"):
                response.headers["content-type"] = "application/json; charset=utf-8"
            return response
        finally:
            duration = time.time() - start_time
            http_requests_total.labels(method=method, endpoint=path, status=status_code).inc()
            http_request_duration_seconds.labels(method=method, endpoint=path).observe(duration)

            logger.info(
                "http_request",
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=round(duration * 1000, 2)
            )

    @app.on_event("startup")
    def on_startup():
        logger.info("Starting auth service", version=VERSION)
        try:
            app.state.token_issuer = build_token_issuer(settings)
        except ConfigurationError as e:
            logger.critical("invalid_configuration", error=e.message)
            raise
        app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

        engine = make_engine(settings.DATABASE_URL)
        init_db(engine)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        logger.info("Database connection established")

    @app.on_event("shutdown")
    def on_shutdown():
        engine = getattr(app.state, "engine", None)
        if engine is not None:
            engine.dispose()

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return metrics_endpoint()

    register_exception_handlers(app)
    app.include_router(auth_router.router)
    return app


app = create_app()
