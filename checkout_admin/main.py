from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse, Response

from checkout_admin.api.auth import router as auth_router
from checkout_admin.api.payment_logs import router as payment_logs_router
from checkout_admin.api.subscriptions import router as subscriptions_router
from checkout_admin.config import Settings, settings, validate_settings
from checkout_admin.db import Database
from checkout_admin.errors import register_error_handlers
from checkout_admin.logging import configure_logging
from checkout_admin.observability import ObservabilityMiddleware

logger = logging.getLogger(__name__)

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[arg-type]
    # ── Startup ──────────────────────────────────────────
    for w in validate_settings(app.state.settings):
        logger.warning("Config warning: %s", w)
    logger.info("Application started (pid=%s)", os.getpid())
    yield

    # ── Shutdown ─────────────────────────────────────────
    logger.info("Application shutting down")
    app.state.database.dispose()


def create_app(
    app_settings: Settings | None = None, database: Database | None = None
) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title="Checkout Admin API", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.database = database or Database.from_settings(app_settings)

    # ── Middleware (order matters: last added = first executed) ──
    register_error_handlers(app)

    cors_origins = [
        o.strip() for o in app_settings.cors_origins.split(",") if o.strip()
    ]
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-Id", "Content-Disposition"],
        )
    app.add_middleware(ObservabilityMiddleware)

    app.include_router(auth_router, prefix="/api")
    app.include_router(payment_logs_router, prefix="/api")
    app.include_router(subscriptions_router, prefix="/api")

    # ── Health Checks ────────────────────────────────────

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/health/ready")
    def readiness_check(request: Request) -> JSONResponse:
        """Readiness probe: verifies database connectivity."""
        checks: dict[str, str] = {}
        db = request.app.state.database.session()
        try:
            db.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except SQLAlchemyError as e:
            checks["database"] = f"error: {e}"
        finally:
            db.close()

        all_ok = all(v == "ok" for v in checks.values())
        return JSONResponse(
            status_code=200 if all_ok else 503,
            content={"status": "ok" if all_ok else "degraded", "checks": checks},
        )

    @app.get("/metrics")
    def metrics() -> Response:
        data = generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
