from __future__ import annotations
import time
from collections import deque, defaultdict
from typing import Deque, Dict, Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from ..config import Settings
from ..errors import ErrorResponse, Unauthorized
from ..security import decode_access_token

class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Límite sliding-window por usuario (API key o JWT válido) o, si no, por IP.
    En memoria, para despliegue simple (1 proceso).
    """
    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings
        self.window_s = 60.0
        self.limit = settings.rate_limit_rpm
        self.burst = settings.rate_limit_burst
        self.token_to_user = settings.parsed_api_keys()
        self.exempt: Set[str] = {"/health", "/metrics", "/docs", "/openapi.json"}
        self.buckets: Dict[str, Deque[float]] = defaultdict(deque)
        self.last_sweep = time.monotonic()

    def _identity(self, request: Request) -> str:
        # Sólo credenciales válidas dan clave propia; el resto cuenta contra su IP
        user = self.token_to_user.get(request.headers.get("X-API-Key", ""))
        if user:
            return "key:" + user
        auth = request.headers.get("Authorization", "")
        if auth.lower().startswith("bearer "):
            try:
                return "jwt:" + decode_access_token(self.settings, auth.split(" ", 1)[1].strip()).user_id
            except Unauthorized:
                pass
        client = request.client.host if request.client else "anonymous"
        return "ip:" + client

    def _sweep(self, now: float) -> None:
        stale = [k for k, q in self.buckets.items() if not q or (now - q[-1]) > self.window_s]
        for key in stale:
            del self.buckets[key]
        self.last_sweep = now

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt or request.method == "OPTIONS":
            return await call_next(request)

        now = time.monotonic()
        if now - self.last_sweep > self.window_s:
            self._sweep(now)

        key = self._identity(request)
        q = self.buckets[key]

        # limpia fuera de ventana
        while q and (now - q[0]) > self.window_s:
            q.popleft()

        # aplica burst y límite
        if len(q) >= max(self.limit, self.burst):
            err = ErrorResponse(code="rate_limited", detail="Rate limit exceeded")
            return JSONResponse(status_code=429, content=err.model_dump())

        q.append(now)
        return await call_next(request)
