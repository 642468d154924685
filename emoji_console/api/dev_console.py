"""Emoji dev console HTTP server (aiohttp).

Endpoints:
- POST /api/dev/emoji/build-emoji-base               → Canonical table from Unicode data
- POST /api/dev/emoji/build-emoji-base-from-assets   → Canonical table from asset filenames
- POST /api/dev/emoji/merge-gemoji-shortcodes        → Merge gemoji aliases/tags
- POST /api/dev/emoji/merge-iamcal-shortcodes        → Merge iamcal short names
- POST /api/dev/emoji/add-skin-tone-field            → Label skin tones
- POST /api/dev/emoji/build-emoji-set-map?set=       → Set map + debug report
- GET  /api/dev/emoji/emoji-asset-status?set=        → Installed files of a set
- GET  /api/dev/emoji/emoji-map-status?set=          → Set map summary
- POST /api/dev/emoji/download-emoji-set             → Install bundles ({"sets": [...]})
- POST /api/dev/emoji/remove-emoji-set               → Delete a set's assets ({"set": ...})
- GET  /api/dev/emoji/sets                           → Provider listing
- GET  /api/emoji/display?token=                     → Preview rendering
- GET  /health                                       → Liveness probe
- GET  /metrics                                      → Prometheus exposition
- GET  /emoji/...                                    → Installed asset files

Every API route answers with `{"success": true, "data": ...}` or
`{"success": false, "error": {code, message, location, timestamp}}`.
"""

import functools
import json
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from aiohttp import web
from pydantic import BaseModel, ValidationError

from emoji_console.contracts.display import DisplayOptions
from emoji_console.core.errors import EmojiConsoleError, PreconditionError
from emoji_console.core.metrics import observe_request_latency, render_latest
from emoji_console.core.observability import clear_correlation_id, set_correlation_id
from emoji_console.core.services.emoji_assets import EmojiAssetService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/dev/emoji"

Handler = Callable[["EmojiConsoleServer", web.Request], Awaitable[Any]]


def _to_payload(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_payload(v) for v in value]
    return value


def _error_response(code: str, message: str, location: str, status: int) -> web.Response:
    return web.json_response(
        {
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "location": location,
                "timestamp": datetime.now(UTC).isoformat(),
            },
        },
        status=status,
    )


def api_handler(location: str) -> Callable[[Handler], Callable[..., Awaitable[web.StreamResponse]]]:
    """Wrap a handler returning a payload into the response envelope.

    Domain errors map to their own code and status; anything else is logged
    with its traceback and answered as INTERNAL_ERROR without details.
    """

    def decorator(func: Handler) -> Callable[..., Awaitable[web.StreamResponse]]:
        @functools.wraps(func)
        async def wrapper(self: "EmojiConsoleServer", request: web.Request) -> web.StreamResponse:
            set_correlation_id(request.headers.get("X-Request-ID") or uuid.uuid4().hex)
            started = time.perf_counter()
            status = 200
            try:
                data = await func(self, request)
                return web.json_response({"success": True, "data": _to_payload(data)})
            except EmojiConsoleError as e:
                status = e.status
                logger.warning(f"{location} failed: [{e.code}] {e.message}")
                return _error_response(e.code, e.message, location, e.status)
            except web.HTTPException:
                raise
            except Exception as e:
                status = 500
                logger.error(f"Unexpected error in {location}: {e}", exc_info=True)
                return _error_response("INTERNAL_ERROR", "Internal Server Error", location, 500)
            finally:
                observe_request_latency(location, str(status), time.perf_counter() - started)
                clear_correlation_id()

        return wrapper

    return decorator


async def _json_body(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PreconditionError("Request body must be JSON", code="INVALID_REQUEST") from e
    if not isinstance(body, dict):
        raise PreconditionError("Request body must be a JSON object", code="INVALID_REQUEST")
    return body


class EmojiConsoleServer:
    """HTTP server exposing the emoji asset operations."""

    def __init__(self, service: EmojiAssetService) -> None:
        """Initialize console server.

        Args:
            service: Emoji asset service backing every route
        """
        self.service = service
        self.app = web.Application()
        self._runner: web.AppRunner | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Setup HTTP routes."""
        r = self.app.router
        r.add_post(f"{API_PREFIX}/build-emoji-base", self.build_emoji_base)
        r.add_post(f"{API_PREFIX}/build-emoji-base-from-assets", self.build_emoji_base_from_assets)
        r.add_post(f"{API_PREFIX}/merge-gemoji-shortcodes", self.merge_gemoji_shortcodes)
        r.add_post(f"{API_PREFIX}/merge-iamcal-shortcodes", self.merge_iamcal_shortcodes)
        r.add_post(f"{API_PREFIX}/add-skin-tone-field", self.add_skin_tone_field)
        r.add_post(f"{API_PREFIX}/build-emoji-set-map", self.build_emoji_set_map)
        r.add_get(f"{API_PREFIX}/emoji-asset-status", self.emoji_asset_status)
        r.add_get(f"{API_PREFIX}/emoji-map-status", self.emoji_map_status)
        r.add_post(f"{API_PREFIX}/download-emoji-set", self.download_emoji_set)
        r.add_post(f"{API_PREFIX}/remove-emoji-set", self.remove_emoji_set)
        r.add_get(f"{API_PREFIX}/sets", self.list_sets)
        r.add_get("/api/emoji/display", self.display)
        r.add_get("/health", self.health_check)
        r.add_get("/metrics", self.metrics)

        # Installed assets are served where the set maps point (/emoji/<set>/...)
        emoji_root = self.service.store.public_root / "emoji"
        emoji_root.mkdir(parents=True, exist_ok=True)
        r.add_static("/emoji/", emoji_root, show_index=False)
        logger.info(f"Serving emoji assets from {emoji_root}")

    # ------------------------------------------------------------------
    # Canonical table
    # ------------------------------------------------------------------

    @api_handler(f"{API_PREFIX}/build-emoji-base")
    async def build_emoji_base(self, request: web.Request) -> Any:
        return await self.service.build_base_from_unicode()

    @api_handler(f"{API_PREFIX}/build-emoji-base-from-assets")
    async def build_emoji_base_from_assets(self, request: web.Request) -> Any:
        return await self.service.build_base_from_assets()

    @api_handler(f"{API_PREFIX}/merge-gemoji-shortcodes")
    async def merge_gemoji_shortcodes(self, request: web.Request) -> Any:
        return await self.service.merge_gemoji()

    @api_handler(f"{API_PREFIX}/merge-iamcal-shortcodes")
    async def merge_iamcal_shortcodes(self, request: web.Request) -> Any:
        return await self.service.merge_iamcal()

    @api_handler(f"{API_PREFIX}/add-skin-tone-field")
    async def add_skin_tone_field(self, request: web.Request) -> Any:
        return await self.service.add_skin_tones()

    # ------------------------------------------------------------------
    # Set maps
    # ------------------------------------------------------------------

    @api_handler(f"{API_PREFIX}/build-emoji-set-map")
    async def build_emoji_set_map(self, request: web.Request) -> Any:
        return await self.service.build_set_map(request.query.get("set"))

    @api_handler(f"{API_PREFIX}/emoji-asset-status")
    async def emoji_asset_status(self, request: web.Request) -> Any:
        return await self.service.asset_status(request.query.get("set"))

    @api_handler(f"{API_PREFIX}/emoji-map-status")
    async def emoji_map_status(self, request: web.Request) -> Any:
        return await self.service.map_status(request.query.get("set"))

    # ------------------------------------------------------------------
    # Asset bundles
    # ------------------------------------------------------------------

    @api_handler(f"{API_PREFIX}/download-emoji-set")
    async def download_emoji_set(self, request: web.Request) -> Any:
        body = await _json_body(request)
        results = await self.service.download_sets(body.get("sets"))
        return {
            "status": "Selected sets downloaded and extracted.",
            "sets": _to_payload(results),
        }

    @api_handler(f"{API_PREFIX}/remove-emoji-set")
    async def remove_emoji_set(self, request: web.Request) -> Any:
        body = await _json_body(request)
        return await self.service.remove_set(body.get("set"))

    @api_handler(f"{API_PREFIX}/sets")
    async def list_sets(self, request: web.Request) -> Any:
        return self.service.list_sets()

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    @api_handler("/api/emoji/display")
    async def display(self, request: web.Request) -> Any:
        token = request.query.get("token", "")
        if not token:
            raise PreconditionError("Missing token parameter", code="INVALID_REQUEST")
        try:
            options = DisplayOptions.model_validate(
                {k: v for k, v in request.query.items() if k in ("set", "fallbackSet", "size", "className")}
            )
        except ValidationError as e:
            raise PreconditionError(
                f"Invalid display options: {e.error_count()} errors", code="INVALID_REQUEST"
            ) from e
        rendering = await self.service.display(token, options)
        return {**_to_payload(rendering), "html": rendering.to_html()}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def health_check(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response({"status": "healthy"})

    async def metrics(self, request: web.Request) -> web.Response:
        """Prometheus metrics endpoint."""
        payload, content_type = render_latest()
        return web.Response(body=payload, headers={"Content-Type": content_type})

    async def start(self, host: str = "0.0.0.0", port: int = 3000) -> None:
        """Start the HTTP server.

        Args:
            host: Host to bind to
            port: Port to bind to
        """
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, host, port)
        await site.start()
        logger.info(f"Emoji console server started on {host}:{port}")

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        await self.service.client.close()
        logger.info("Emoji console server stopped")
