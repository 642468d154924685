"""Remote reference data client (aiohttp).

Fetches the Unicode emoji enumeration, the two alias databases and provider
asset bundles. A non-success status raises `TransportError`; a body that
cannot be decoded raises `ParseError`. There is no retry: operations are
developer-triggered and simply re-run on failure.
"""

import json
import logging
from typing import Any

import aiohttp

from emoji_console.config.settings import Settings, get_settings
from emoji_console.core.errors import ParseError, TransportError
from emoji_console.core.metrics import mark_fetch_error
from emoji_console.core.observability import trace_adapter

logger = logging.getLogger(__name__)


class ReferenceDataClient:
    def __init__(
        self,
        settings: Settings | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "ReferenceDataClient":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.http_timeout_seconds),
                headers={"User-Agent": self.settings.http_user_agent},
            )
            self._owns_session = True
        return self.session

    async def close(self) -> None:
        if self.session and self._owns_session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def _get(self, url: str, source: str) -> bytes:
        session = self._ensure_session()
        try:
            async with session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    logger.warning(f"Failed to fetch {source}. Status: {response.status}")
                    mark_fetch_error(source, "http_status")
                    raise TransportError(
                        f"Failed to fetch {source}: HTTP {response.status}",
                        url=url,
                        status_code=response.status,
                    )
                return await response.read()
        except aiohttp.ClientError as e:
            logger.warning(f"Network error while fetching {source}: {e}")
            mark_fetch_error(source, "network")
            raise TransportError(f"Network error while fetching {source}: {e}", url=url) from e
        except TimeoutError as e:
            logger.warning(f"Timed out fetching {source}")
            mark_fetch_error(source, "timeout")
            raise TransportError(f"Timed out fetching {source}", url=url) from e

    async def fetch_text(self, url: str, source: str) -> str:
        body = await self._get(url, source)
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            mark_fetch_error(source, "decode")
            raise ParseError(f"{source} is not valid UTF-8 text") from e

    async def fetch_json(self, url: str, source: str) -> Any:
        text = await self.fetch_text(url, source)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            mark_fetch_error(source, "decode")
            raise ParseError(f"{source} returned malformed JSON: {e}") from e

    async def fetch_bytes(self, url: str, source: str) -> bytes:
        return await self._get(url, source)

    @trace_adapter
    async def fetch_emoji_test(self) -> str:
        """Unicode `emoji-test.txt`."""
        return await self.fetch_text(self.settings.unicode_emoji_test_url, "unicode")

    @trace_adapter
    async def fetch_gemoji(self) -> Any:
        return await self.fetch_json(self.settings.gemoji_url, "gemoji")

    @trace_adapter
    async def fetch_iamcal(self) -> Any:
        return await self.fetch_json(self.settings.iamcal_url, "iamcal")

    @trace_adapter
    async def fetch_archive(self, url: str, set_key: str) -> bytes:
        """Zip archive for a provider bundle."""
        return await self.fetch_bytes(url, f"bundle:{set_key}")
