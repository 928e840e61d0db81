"""Request instrumentation middleware."""

from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from studycard.telemetry import observe_audio_response, observe_request


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request latency and synthesized audio sizes for Prometheus."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - defensive
            observe_request(request.method, self._route_label(request), 500, time.perf_counter() - start_time)
            raise

        route = self._route_label(request)
        observe_request(request.method, route, response.status_code, time.perf_counter() - start_time)

        if response.headers.get("content-type", "").startswith("audio/"):
            length = response.headers.get("content-length")
            if length and length.isdigit():
                observe_audio_response(route, int(length))
        return response

    @staticmethod
    def _route_label(request: Request) -> str:
        """Prefer the route template so ids do not explode label cardinality."""

        route = request.scope.get("route")
        path = getattr(route, "path", None)
        return path or request.url.path
