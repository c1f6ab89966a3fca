"""HTTP service exposing the sanitizer over JSON."""

import asyncio
import json
from typing import Any, Optional

import structlog
from aiohttp import web

from navguard import __version__
from navguard.sanitization.sanitizer import NavigationSanitizer
from navguard.shared.domain.exceptions import InvalidRequestError
from navguard.shared.infrastructure.config import settings

logger = structlog.get_logger(__name__)


def parse_sanitize_request(body: bytes) -> str:
    """
    Extract the ``code`` field from a sanitize request body.

    Raises:
        InvalidRequestError: If the body is not JSON or ``code`` is not a string
    """
    try:
        data: Any = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError("Invalid JSON", context={"reason": type(e).__name__}) from e

    code = data.get("code") if isinstance(data, dict) else None
    if not isinstance(code, str):
        raise InvalidRequestError(
            "`code` must be a string",
            context={"reason": f"code is {type(code).__name__}"},
        )
    return code


class HTTPServer:
    """
    aiohttp application serving ``POST /sanitize`` and ``GET /health``.

    Request bodies larger than ``max_request_bytes`` are refused with 413 by
    aiohttp before they reach the parser.
    """

    def __init__(
        self,
        sanitizer: Optional[NavigationSanitizer] = None,
        max_request_bytes: Optional[int] = None,
    ):
        self.sanitizer = sanitizer or NavigationSanitizer()
        self.app = web.Application(client_max_size=max_request_bytes or settings.max_request_bytes)
        self.setup_routes()

    def setup_routes(self):
        """Setup HTTP routes"""
        self.app.router.add_route("*", "/sanitize", self.handle_sanitize)
        self.app.router.add_get("/health", self.handle_health)

    async def handle_health(self, request):
        """Health check endpoint"""
        return web.json_response({
            "status": "healthy",
            "service": settings.app_name,
            "version": __version__,
        })

    async def handle_sanitize(self, request):
        """Sanitize the ``code`` field of a JSON body."""
        if request.method != "POST":
            raise web.HTTPNotFound(text="Not Found")

        body = await request.read()

        try:
            code = parse_sanitize_request(body)
        except InvalidRequestError as e:
            logger.warning("sanitize_request_invalid", error=str(e), **e.context)
            return web.json_response({"error": str(e)}, status=400)

        logger.info("sanitize_request_received", code_length=len(code))

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, self.sanitizer.sanitize, code)

        return web.json_response({"code": report.code})

    async def start(self, host: Optional[str] = None, port: Optional[int] = None):
        """Start the HTTP server and serve until cancelled."""
        host = host or settings.api_host
        port = port or settings.api_port
        logger.info("http_server_starting", host=host, port=port)

        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(runner, host, port)
        await site.start()

        logger.info("http_server_started", url=f"http://{host}:{port}")

        try:
            await asyncio.Future()  # Run forever
        finally:
            logger.info("http_server_stopping")
            await runner.cleanup()


async def main(host: Optional[str] = None, port: Optional[int] = None):
    """Main entry point"""
    server = HTTPServer()
    await server.start(host, port)
