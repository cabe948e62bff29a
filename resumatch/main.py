# resumatch/main.py
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from resumatch.core.config import settings
from resumatch.core.errors import AuthError
from resumatch.core.logging import get_logger
from resumatch.db.models import init_db
from resumatch.db.session import SessionLocal
from resumatch.middleware.rate_limit import RateLimitMiddleware
from resumatch.routes import analyses, analyze, auth, jobs
from resumatch.schemas.base import UserOut
from resumatch.services.auth_service import AuthService
from resumatch.services.job_service import JobRepository

log = get_logger(__name__)


def _log_auth_change(user: Optional[UserOut]) -> None:
    if user:
        log.info("Auth state: signed in as %s (%s)", user.id, user.role)
    else:
        log.info("Auth state: signed out")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # init DB + default catalog + optional bootstrap admin
    init_db()
    with SessionLocal() as db:
        JobRepository(db).ensure_seeded()
        if settings.admin_email and settings.admin_password:
            try:
                app.state.auth.ensure_admin(db, settings.admin_email, settings.admin_password)
            except AuthError as exc:
                log.warning("Could not create bootstrap admin %s: %s", settings.admin_email, exc)
    yield


def create_app() -> FastAPI:
    # observability
    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn, traces_sample_rate=0.1)

    app = FastAPI(title=settings.api_title, version=settings.api_version, lifespan=lifespan)

    app.state.auth = AuthService()
    app.state.auth.subscribe(_log_auth_change)

    if settings.redis_url:
        app.add_middleware(RateLimitMiddleware, redis_url=settings.redis_url, limit=settings.ip_daily_limit)
    # sessions (login cookie)
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, https_only=False)

    # routers
    app.include_router(auth.router)
    app.include_router(jobs.router)
    app.include_router(analyze.router)
    app.include_router(analyses.router)

    @app.get("/healthz")
    def health():
        return {"ok": True, "model": settings.model_name}

    return app


app = create_app()
