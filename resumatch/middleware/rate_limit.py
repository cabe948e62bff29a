import time, ipaddress
from typing import Iterable, Optional

import redis
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.responses import PlainTextResponse

from resumatch.core.logging import get_logger

log = get_logger(__name__)


class RateLimitMiddleware:
    """Per-IP daily gate in front of the expensive endpoints; per-user quotas live in the routes."""

    def __init__(
        self,
        app: ASGIApp,
        redis_url: Optional[str] = None,
        limit: int = 20,
        paths: Iterable[str] = ("/analyze",),
        client=None,
    ):
        self.app = app
        self.r = client if client is not None else redis.from_url(redis_url, decode_responses=True)
        self.limit = limit
        self.paths = set(paths)
        self.window = 86400  # 1 day

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or scope.get("path", "") not in self.paths:
            return await self.app(scope, receive, send)

        client = scope.get("client")
        ip = (client[0] if client else "0.0.0.0")
        try:
            ipaddress.ip_address(ip)
        except ValueError:
            ip = "0.0.0.0"

        day = time.strftime("%Y%m%d")
        key_ip = f"rl:ip:{ip}:{day}"
        try:
            cnt = self.r.incr(key_ip)
            if cnt == 1:
                self.r.expire(key_ip, self.window)
        except redis.RedisError as exc:
            # limiter outage should not take the endpoint down
            log.warning("Rate limiter unavailable: %s", exc)
            return await self.app(scope, receive, send)

        if cnt > self.limit:
            log.info("Rate limit hit for %s (%d requests today)", ip, cnt)
            return await PlainTextResponse("Slow down. Try again tomorrow.", status_code=429)(scope, receive, send)

        return await self.app(scope, receive, send)
