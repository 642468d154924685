"""
Emoji Asset Service

Orchestrates every dev-console operation: fetch -> pure transform -> atomic
write. Disk-bound work runs in worker threads so the event loop stays
responsive; mutating operations are serialized by one lock, so two rebuilds
never interleave their reads and writes of the same artifact.

Every failure is raised as an `EmojiConsoleError` subclass; nothing is
written when a fetch or parse step fails.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from emoji_console.adapters.asset_bundle import install_bundle
from emoji_console.adapters.reference_data import ReferenceDataClient
from emoji_console.contracts.display import DisplayOptions, EmojiRendering
from emoji_console.contracts.emoji import EmojiTable
from emoji_console.contracts.emoji_config import EmojiSetConfig, EmojiSystemConfig
from emoji_console.contracts.operations import (
    AssetStatus,
    BuildBaseResult,
    BuildSetMapResult,
    DownloadResult,
    MergeResult,
    RemoveResult,
    SetMapStatus,
    SetSummary,
)
from emoji_console.core.errors import (
    EmojiConsoleError,
    NotFoundError,
    PreconditionError,
    invalid_set_key,
)
from emoji_console.core.metrics import mark_display, mark_rebuild
from emoji_console.core.observability import trace_service
from emoji_console.core.services import base_table
from emoji_console.core.services.resolver import EmojiResolver
from emoji_console.core.services.set_map import build_set_map
from emoji_console.core.storage import ArtifactStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Files reported by the asset status view
STATUS_EXTENSIONS = (".svg", ".png")


class EmojiAssetService:
    """Operational facade over the artifact store and reference data."""

    def __init__(
        self,
        store: ArtifactStore,
        config: EmojiSystemConfig,
        client: ReferenceDataClient,
    ) -> None:
        self.store = store
        self.config = config
        self.client = client
        self.resolver = EmojiResolver(store, config)
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_set(self, set_key: str | None) -> EmojiSetConfig:
        set_config = self.config.get_set(set_key) if set_key else None
        if set_config is None:
            raise invalid_set_key(set_key)
        return set_config

    async def _rebuild(self, artifact: str, work: Callable[[], Awaitable[T]]) -> T:
        """Run a mutating operation under the write lock and record its outcome."""
        async with self._write_lock:
            try:
                result = await work()
            except EmojiConsoleError:
                mark_rebuild(artifact, "failed")
                raise
            except Exception:
                mark_rebuild(artifact, "error")
                raise
            mark_rebuild(artifact, "success")
            return result

    def _out_path(self) -> str:
        return self.store.base_path.relative_to(self.store.public_root).as_posix()

    async def _save_table(self, table: EmojiTable) -> None:
        await asyncio.to_thread(self.store.save_table, table)
        self.resolver.invalidate()

    # ------------------------------------------------------------------
    # Canonical table
    # ------------------------------------------------------------------

    @trace_service
    async def build_base_from_unicode(self) -> BuildBaseResult:
        """Rebuild emoji-base.json from the Unicode enumeration."""

        async def work() -> BuildBaseResult:
            text = await self.client.fetch_emoji_test()
            table = await asyncio.to_thread(base_table.parse_emoji_test, text)
            await self._save_table(table)
            return BuildBaseResult(count=len(table), out_path=self._out_path(), source="unicode")

        return await self._rebuild("emoji_base", work)

    @trace_service
    async def build_base_from_assets(self) -> BuildBaseResult:
        """Rebuild emoji-base.json from the filenames of installed sets."""

        async def work() -> BuildBaseResult:
            table = await asyncio.to_thread(
                base_table.build_table_from_assets, self.config, self.store.public_root
            )
            await self._save_table(table)
            return BuildBaseResult(count=len(table), out_path=self._out_path(), source="assets")

        return await self._rebuild("emoji_base", work)

    @trace_service
    async def merge_gemoji(self) -> MergeResult:
        async def work() -> MergeResult:
            table = await asyncio.to_thread(self.store.load_table)
            source = base_table.parse_gemoji(await self.client.fetch_gemoji())
            result = base_table.merge_gemoji(table, source)
            await self._save_table(table)
            return result

        return await self._rebuild("emoji_base:gemoji", work)

    @trace_service
    async def merge_iamcal(self) -> MergeResult:
        async def work() -> MergeResult:
            table = await asyncio.to_thread(self.store.load_table)
            source = base_table.parse_iamcal(await self.client.fetch_iamcal())
            result = base_table.merge_iamcal(table, source)
            await self._save_table(table)
            return result

        return await self._rebuild("emoji_base:iamcal", work)

    @trace_service
    async def add_skin_tones(self) -> MergeResult:
        async def work() -> MergeResult:
            table = await asyncio.to_thread(self.store.load_table)
            result = base_table.apply_skin_tones(table)
            await self._save_table(table)
            return result

        return await self._rebuild("emoji_base:skin_tone", work)

    # ------------------------------------------------------------------
    # Set maps
    # ------------------------------------------------------------------

    @trace_service
    async def build_set_map(self, set_key: str | None) -> BuildSetMapResult:
        """Rebuild `emoji-<set>.json` and its debug report."""
        self._require_set(set_key)
        assert set_key is not None

        async def work() -> BuildSetMapResult:
            table = await asyncio.to_thread(self.store.load_table)
            result = await asyncio.to_thread(
                build_set_map, set_key, table, self.config, self.store.public_root
            )
            await asyncio.to_thread(
                self.store.save_set_map, set_key, result.set_map, result.report
            )
            self.resolver.invalidate(set_key)
            return BuildSetMapResult(
                set_key=set_key,
                count=len(result.set_map),
                manual_count=result.manual_count,
                debug_report=self.store.report_name(set_key),
                debug=result.report,
            )

        return await self._rebuild(f"set_map:{set_key}", work)

    async def asset_status(self, set_key: str | None) -> AssetStatus:
        set_config = self._require_set(set_key)
        asset_dir = self.store.asset_dir(set_config)

        def scan() -> AssetStatus:
            if not asset_dir.is_dir():
                return AssetStatus(exists=False)
            files = sorted(
                p.name
                for p in asset_dir.iterdir()
                if p.is_file() and p.name.endswith(STATUS_EXTENSIONS)
            )
            return AssetStatus(exists=True, file_count=len(files), files=files)

        return await asyncio.to_thread(scan)

    async def map_status(self, set_key: str | None) -> SetMapStatus:
        self._require_set(set_key)
        assert set_key is not None
        return await asyncio.to_thread(self.store.set_map_status, set_key)

    # ------------------------------------------------------------------
    # Asset bundles
    # ------------------------------------------------------------------

    def _validate_download(self, set_keys: Any) -> list[EmojiSetConfig]:
        if not isinstance(set_keys, list) or not set_keys:
            raise PreconditionError(
                "Expected a non-empty list of set keys", code="INVALID_REQUEST"
            )
        configs: list[EmojiSetConfig] = []
        for key in set_keys:
            set_config = self._require_set(key if isinstance(key, str) else None)
            if set_config.bundle is None:
                raise PreconditionError(
                    f"Set '{set_config.key}' has no downloadable bundle", code="UNSUPPORTED_SET"
                )
            configs.append(set_config)
        return configs

    @trace_service
    async def download_sets(self, set_keys: Any) -> list[DownloadResult]:
        """Download and install the bundles of the requested sets, in order.

        All keys are validated before anything is fetched. A failing set
        aborts the remaining ones; sets already installed stay installed.
        """
        configs = self._validate_download(set_keys)

        async def work() -> list[DownloadResult]:
            results: list[DownloadResult] = []
            for set_config in configs:
                bundle = set_config.bundle
                assert bundle is not None
                payload = await self.client.fetch_archive(bundle.url, set_config.key)
                count = await asyncio.to_thread(
                    install_bundle, payload, set_config, self.store.asset_dir(set_config)
                )
                results.append(
                    DownloadResult(set_key=set_config.key, version=bundle.version, file_count=count)
                )
            return results

        return await self._rebuild("asset_bundle", work)

    @trace_service
    async def remove_set(self, set_key: str | None) -> RemoveResult:
        set_config = self._require_set(set_key)
        asset_dir = self.store.asset_dir(set_config)

        async def work() -> RemoveResult:
            if not asset_dir.is_dir():
                raise NotFoundError("Set assets not found.", code="SET_NOT_FOUND")
            await asyncio.to_thread(shutil.rmtree, asset_dir)
            logger.info("Removed asset directory %s", asset_dir)
            return RemoveResult(set_key=set_config.key, status=f"Removed {set_config.key} assets.")

        return await self._rebuild("asset_bundle", work)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def list_sets(self) -> list[SetSummary]:
        return [
            SetSummary(
                key=s.key,
                name=s.name,
                asset_dir=s.asset_dir,
                url_prefix=s.url_prefix,
                ext=s.ext,
                naming=str(s.naming),
                notes=s.notes,
                install_instructions=s.install_instructions,
                downloadable=s.bundle is not None,
                version=s.bundle.version if s.bundle else None,
                active=s.key == self.config.active_set,
                fallback=s.key == self.config.fallback_set,
            )
            for s in self.config.sets.values()
        ]

    async def display(self, token: str, options: DisplayOptions | None = None) -> EmojiRendering:
        """Render a preview; unknown tokens and missing assets fall back to text."""
        options = options or DisplayOptions()
        for key in (options.preferred_set, options.fallback_set):
            if key is not None:
                self._require_set(key)
        rendering = await asyncio.to_thread(self.resolver.display, token, options)
        mark_display(rendering.kind)
        return rendering
