# resumatch/utils/tracking.py
from __future__ import annotations
from typing import Optional

import posthog
from fastapi import Request

from resumatch.core.config import settings as cfg
from resumatch.core.logging import get_logger

log = get_logger(__name__)

# PostHog (optional)
if cfg.posthog_key:
    posthog.api_key = cfg.posthog_key
    posthog.project_api_key = cfg.posthog_key
    posthog.host = cfg.posthog_host


def track(request: Request, event: str, props: Optional[dict] = None) -> None:
    """Best-effort product analytics; never raises."""
    if not cfg.posthog_key:
        return
    try:
        uid = request.session.get("user_id") if "session" in request.scope else None
        ident = str(uid) if uid else (request.client.host if request.client else "0.0.0.0")
        posthog.capture(distinct_id=ident, event=event, properties=props or {})
    except Exception as exc:
        log.debug("posthog capture failed for %s: %s", event, exc)
