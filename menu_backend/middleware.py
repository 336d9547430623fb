import time
import logging
from typing import List, Optional, Tuple

from fastapi import Request
from fastapi.responses import FileResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .application.ports.rate_limiter import RateLimiter
from .exceptions import error_response
from .services.images.cache import DerivedImageCache, SourceNotFound
from .services.images.policy import DEFAULT_ASSET_SPEC, ResizeSpec, is_image_path, resolve_resize_spec

logger = logging.getLogger(__name__)

# (path prefix, max requests, window seconds); the longest matching prefix wins
RateLimitRule = Tuple[str, int, int]


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, limiter: RateLimiter, rules: List[RateLimitRule]):
        super().__init__(app)
        self.limiter = limiter
        self.rules = sorted(rules, key=lambda rule: len(rule[0]), reverse=True)

    def _match(self, path: str) -> Optional[RateLimitRule]:
        if is_image_path(path):
            return None
        for rule in self.rules:
            if path.startswith(rule[0]):
                return rule
        return None

    async def dispatch(self, request: Request, call_next):
        rule = self._match(request.url.path)
        if rule is None:
            return await call_next(request)

        prefix, max_requests, window_seconds = rule
        client_ip = request.client.host if request.client else "unknown"
        remaining = self.limiter.hit(f"{client_ip}:{prefix}", max_requests, window_seconds)

        if remaining < 0:
            logger.warning(f"Rate limit exceeded for IP: {client_ip} on {prefix}")
            return error_response(
                "Too many requests from this IP, please try again later.",
                429,
                headers={"Retry-After": str(window_seconds)},
            )

        response = await call_next(request)
        response.headers["RateLimit-Limit"] = str(max_requests)
        response.headers["RateLimit-Remaining"] = str(remaining)
        return response


class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Add security headers
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Menu images are embedded by the storefront on another origin
        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"

        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        # Log request (guard against missing client info)
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(f"Response: {response.status_code} in {duration:.3f}s")

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error: {str(e)}", exc_info=True)
            message = f"Internal server error: {str(e)}" if self.debug else "Internal server error"
            return error_response(message, 500)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next):
        # Enforce a hard cap on request size using Content-Length when available
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                if int(content_length) > self.max_size:
                    return error_response("File too large", 413)
            except ValueError:
                # Malformed header; downstream upload checks still apply
                pass
        return await call_next(request)


class ImageResizeMiddleware(BaseHTTPMiddleware):
    """
    Serve resized variants of static images.

    ``GET /<path>.<ext>?w=&h=&q=&f=`` is answered from the derived-image
    cache; requests with no resize intent fall through to the static files
    mount.
    """

    def __init__(self, app: ASGIApp, cache: DerivedImageCache, default_spec: ResizeSpec = DEFAULT_ASSET_SPEC):
        super().__init__(app)
        self.cache = cache
        self.default_spec = default_spec

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if request.method != "GET" or path.startswith("/api/"):
            return await call_next(request)

        spec = resolve_resize_spec(path, request.query_params, self.default_spec)
        if spec is None:
            return await call_next(request)

        try:
            rendered = await self.cache.get(path, spec)
        except SourceNotFound:
            return error_response("Image not found", 404)

        if rendered.path is not None:
            return FileResponse(rendered.path, media_type=rendered.media_type, headers=rendered.headers)
        return Response(content=rendered.body, media_type=rendered.media_type, headers=rendered.headers)
