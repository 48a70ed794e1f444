import time
import asyncio
from collections import deque
from typing import Callable, Iterable
from fastapi import Request
from docvault import responses
from docvault.auth.deps import bearer_token
from docvault.utils.security import TokenService

class RateLimitMiddleware:
    def __init__(
        self,
        app,
        *,
        window_seconds: int,
        max_calls: int,
        key_func: Callable[[Request], str],
        include_path_prefixes: Iterable[str] = ("/api/upload", "/auth/login"),
    ):
        self.app = app
        self.window = window_seconds
        self.max_calls = max_calls
        self.key_func = key_func
        self.include_paths = tuple(include_path_prefixes)

        self._buckets: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()

    def _should_guard(self, path: str) -> bool:
        return any(path.startswith(p) for p in self.include_paths)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or self.max_calls <= 0:
            return await self.app(scope, receive, send)

        path = scope.get("path", "")
        if not self._should_guard(path):
            return await self.app(scope, receive, send)

        request = Request(scope, receive=receive)
        key = self.key_func(request)

        now = time.monotonic()
        async with self._lock:
            cutoff = now - self.window
            for idle in [k for k, b in self._buckets.items() if b[-1] < cutoff]:
                del self._buckets[idle]

            q = self._buckets.setdefault(key, deque())
            while q and q[0] < cutoff:
                q.popleft()

            if len(q) >= self.max_calls:
                retry_after = max(1, int(q[0] + self.window - now))
                resp = responses.error_response(
                    429,
                    f"Too many requests, try again in {retry_after}s",
                    headers={"Retry-After": str(retry_after)},
                    details={"windowSeconds": self.window, "maxCalls": self.max_calls},
                )
                return await resp(scope, receive, send)

            q.append(now)

        return await self.app(scope, receive, send)


def make_key_func(tokens: TokenService) -> Callable[[Request], str]:
    def _key(req: Request) -> str:
        ip = req.client.host if req.client else "unknown"

        token = bearer_token(req)
        if token:
            claims = tokens.verify(token)
            if claims is not None:
                return f"user:{claims.id}"

        return f"ip:{ip}"
    return _key
