"""HTTP tests for the emoji dev console routes."""

import io
import zipfile
from typing import Any

import pytest
from aiohttp.test_utils import TestClient, TestServer

from emoji_console.api.dev_console import EmojiConsoleServer
from emoji_console.core.errors import TransportError
from emoji_console.core.services.emoji_assets import EmojiAssetService

API = "/api/dev/emoji"


class _FakeReferenceData:
    def __init__(self, emoji_test: str, fail: bool = False) -> None:
        self.emoji_test = emoji_test
        self.fail = fail
        self.archives: list[str] = []

    async def fetch_emoji_test(self) -> str:
        if self.fail:
            raise TransportError("Failed to fetch unicode: HTTP 503", url="https://unicode.test", status_code=503)
        return self.emoji_test

    async def fetch_gemoji(self) -> Any:
        return [{"emoji": "👋", "aliases": ["wave"], "tags": ["goodbye"]}]

    async def fetch_iamcal(self) -> Any:
        return [{"unified": "1F600", "short_names": ["grinning"]}]

    async def fetch_archive(self, url: str, set_key: str) -> bytes:
        self.archives.append(set_key)
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("openmoji-svg-color/1F600.svg", "<svg/>")
            zf.writestr("openmoji-svg-color/1F44B.svg", "<svg/>")
        return buf.getvalue()

    async def close(self) -> None:
        return None


async def _client(store, emoji_config, reference) -> TestClient:
    service = EmojiAssetService(store=store, config=emoji_config, client=reference)
    server = EmojiConsoleServer(service)
    client = TestClient(TestServer(server.app))
    await client.start_server()
    return client


@pytest.mark.asyncio
async def test_build_base_and_set_map_flow(store, emoji_config, emoji_test_text, touch_assets) -> None:
    client = await _client(store, emoji_config, _FakeReferenceData(emoji_test_text))
    try:
        resp = await client.post(f"{API}/build-emoji-base")
        assert resp.status == 200
        body = await resp.json()
        assert body == {
            "success": True,
            "data": {"count": 8, "outPath": "dev/emoji/emoji-base.json", "source": "unicode"},
        }

        touch_assets(store.public_root, "openmoji", ["1F600.svg", "FFFF.svg"])
        resp = await client.post(f"{API}/build-emoji-set-map", params={"set": "openmoji"})
        assert resp.status == 200
        data = (await resp.json())["data"]
        assert data["set"] == "openmoji"
        assert data["count"] == 1
        assert data["debugReport"] == "openmoji-debug-report.json"
        assert data["debug"]["unusedFiles"] == ["FFFF.svg"]
        assert "1F44B (expected: 1F44B.svg)" in data["debug"]["missingFiles"]

        resp = await client.get(f"{API}/emoji-map-status", params={"set": "openmoji"})
        status = (await resp.json())["data"]
        assert status["exists"] is True
        assert status["size"] == 1
        assert status["manualCount"] == 0

        resp = await client.get(f"{API}/emoji-asset-status", params={"set": "openmoji"})
        assert (await resp.json())["data"] == {
            "exists": True,
            "fileCount": 2,
            "files": ["1F600.svg", "FFFF.svg"],
        }

        resp = await client.get("/api/emoji/display", params={"token": "😀", "size": "24"})
        rendering = (await resp.json())["data"]
        assert rendering["kind"] == "image"
        assert rendering["src"] == "/emoji/openmoji/1F600.svg"
        assert 'width="24"' in rendering["html"]

        resp = await client.get("/emoji/openmoji/1F600.svg")
        assert resp.status == 200
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_enrichment_routes(store, emoji_config, emoji_test_text) -> None:
    client = await _client(store, emoji_config, _FakeReferenceData(emoji_test_text))
    try:
        await client.post(f"{API}/build-emoji-base")

        resp = await client.post(f"{API}/merge-gemoji-shortcodes")
        assert (await resp.json())["data"]["updated"] == 1
        resp = await client.post(f"{API}/merge-iamcal-shortcodes")
        assert (await resp.json())["data"]["updated"] == 1
        resp = await client.post(f"{API}/add-skin-tone-field")
        assert (await resp.json())["data"]["total"] == 8

        table = store.load_table()
        assert table["1F44B"].shortcodes == ["wave", "goodbye"]
        assert table["1F600"].shortcodes == ["grinning"]
        assert table["1F44F-1F3FD"].skin_tone == "medium"

        resp = await client.get("/api/emoji/display", params={"token": ":wave:"})
        rendering = (await resp.json())["data"]
        assert rendering["kind"] == "text"
        assert rendering["text"] == "👋"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_preconditions_use_error_envelope(store, emoji_config, emoji_test_text) -> None:
    client = await _client(store, emoji_config, _FakeReferenceData(emoji_test_text))
    try:
        resp = await client.post(f"{API}/build-emoji-set-map", params={"set": "openmoji"})
        assert resp.status == 400
        error = (await resp.json())["error"]
        assert error["code"] == "MISSING_EMOJI_BASE"
        assert error["location"] == f"{API}/build-emoji-set-map"
        assert error["timestamp"]

        resp = await client.post(f"{API}/build-emoji-set-map", params={"set": "nope"})
        assert (await resp.json())["error"]["code"] == "INVALID_SET_KEY"

        resp = await client.post(f"{API}/merge-gemoji-shortcodes")
        assert (await resp.json())["error"]["code"] == "MISSING_EMOJI_BASE"

        resp = await client.post(f"{API}/build-emoji-base-from-assets")
        assert (await resp.json())["error"]["code"] == "NO_ASSETS_FOUND"

        resp = await client.get(f"{API}/emoji-asset-status")
        assert resp.status == 400

        resp = await client.get("/api/emoji/display")
        assert (await resp.json())["error"]["code"] == "INVALID_REQUEST"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_transport_failure_writes_nothing(store, emoji_config, emoji_test_text) -> None:
    client = await _client(store, emoji_config, _FakeReferenceData(emoji_test_text, fail=True))
    try:
        resp = await client.post(f"{API}/build-emoji-base")
        assert resp.status == 502
        body = await resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "TRANSPORT_ERROR"
        assert not store.table_exists()
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_download_and_remove(store, emoji_config, emoji_test_text) -> None:
    reference = _FakeReferenceData(emoji_test_text)
    client = await _client(store, emoji_config, reference)
    try:
        resp = await client.post(f"{API}/download-emoji-set", json={"sets": ["openmoji", "blobmoji"]})
        assert resp.status == 400
        assert (await resp.json())["error"]["code"] == "UNSUPPORTED_SET"
        assert reference.archives == []

        resp = await client.post(f"{API}/download-emoji-set", json={"sets": "openmoji"})
        assert (await resp.json())["error"]["code"] == "INVALID_REQUEST"

        resp = await client.post(f"{API}/download-emoji-set", json={"sets": ["openmoji"]})
        assert resp.status == 200
        data = (await resp.json())["data"]
        assert data["sets"] == [{"set": "openmoji", "version": "15.1.0", "fileCount": 2}]

        resp = await client.get(f"{API}/emoji-asset-status", params={"set": "openmoji"})
        assert (await resp.json())["data"]["fileCount"] == 2

        resp = await client.post(f"{API}/remove-emoji-set", json={"set": "openmoji"})
        assert resp.status == 200
        assert (await resp.json())["data"]["status"] == "Removed openmoji assets."

        resp = await client.post(f"{API}/remove-emoji-set", json={"set": "openmoji"})
        assert resp.status == 404
        assert (await resp.json())["error"]["code"] == "SET_NOT_FOUND"

        resp = await client.post(f"{API}/remove-emoji-set", data="not json")
        assert (await resp.json())["error"]["code"] == "INVALID_REQUEST"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_sets_health_and_metrics(store, emoji_config, emoji_test_text) -> None:
    client = await _client(store, emoji_config, _FakeReferenceData(emoji_test_text))
    try:
        resp = await client.get(f"{API}/sets")
        sets = (await resp.json())["data"]
        by_key = {s["key"]: s for s in sets}
        assert by_key["openmoji"]["active"] is True
        assert by_key["twemoji"]["fallback"] is True
        assert by_key["twemoji"]["downloadable"] is True
        assert by_key["sensamoji"]["downloadable"] is False
        assert by_key["blobmoji"]["naming"] == "prefixed_underscore_hex"

        resp = await client.get("/health")
        assert (await resp.json()) == {"status": "healthy"}

        await client.get(f"{API}/sets")
        resp = await client.get("/metrics")
        assert resp.status == 200
        assert "emoji_request_duration_seconds" in await resp.text()
    finally:
        await client.close()
