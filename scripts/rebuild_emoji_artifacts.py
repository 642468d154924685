#!/usr/bin/env python3
"""
Offline rebuild of the emoji console artifacts without starting the server.

Runs the same operations as the dev console endpoints, in order, against
the configured public directory.

Usage:
  # Full pipeline: Unicode base, both alias merges, skin tones, every set map
  poetry run python scripts/rebuild_emoji_artifacts.py all

  # Base from installed asset filenames only (no network)
  poetry run python scripts/rebuild_emoji_artifacts.py base --from-assets

  # Rebuild selected set maps
  poetry run python scripts/rebuild_emoji_artifacts.py set-map openmoji twemoji

  # Artifact overview as JSON
  poetry run python scripts/rebuild_emoji_artifacts.py status

Exit Codes:
  0 - All steps succeeded
  1 - A step failed (error code and message are printed)
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from emoji_console.adapters.reference_data import ReferenceDataClient
from emoji_console.config.emoji_system import load_emoji_config
from emoji_console.config.settings import get_settings
from emoji_console.core.errors import EmojiConsoleError
from emoji_console.core.observability import configure_stdlib_json_logging
from emoji_console.core.services.emoji_assets import EmojiAssetService
from emoji_console.core.storage import ArtifactStore

logger = logging.getLogger(__name__)


def _dump(label: str, value: Any) -> None:
    payload = value.model_dump(mode="json", by_alias=True) if hasattr(value, "model_dump") else value
    print(f"{label}: {json.dumps(payload, ensure_ascii=False)}")


async def _set_maps(service: EmojiAssetService, set_keys: list[str], strict: bool) -> None:
    for set_key in set_keys:
        try:
            result = await service.build_set_map(set_key)
        except EmojiConsoleError as e:
            if strict or e.code != "MISSING_ASSET_DIR":
                raise
            print(f"set-map {set_key}: skipped ({e.message})")
            continue
        print(
            f"set-map {set_key}: {result.count} entries, "
            f"{len(result.debug.missing_files)} missing, "
            f"{len(result.debug.unused_files)} unused, {result.manual_count} manual"
        )


async def run(args: argparse.Namespace) -> None:
    settings = get_settings()
    config = load_emoji_config(settings)
    store = ArtifactStore(settings.public_root)

    async with ReferenceDataClient(settings=settings) as client:
        service = EmojiAssetService(store=store, config=config, client=client)

        if args.command == "base":
            if args.from_assets:
                _dump("base", await service.build_base_from_assets())
            else:
                _dump("base", await service.build_base_from_unicode())
        elif args.command == "gemoji":
            _dump("gemoji", await service.merge_gemoji())
        elif args.command == "iamcal":
            _dump("iamcal", await service.merge_iamcal())
        elif args.command == "skin-tones":
            _dump("skin-tones", await service.add_skin_tones())
        elif args.command == "set-map":
            await _set_maps(service, args.sets or list(config.sets), strict=bool(args.sets))
        elif args.command == "status":
            overview = {
                "base": store.table_exists(),
                "sets": {
                    key: {
                        "assets": (await service.asset_status(key)).file_count,
                        "map": (await service.map_status(key)).model_dump(mode="json", by_alias=True),
                    }
                    for key in config.sets
                },
            }
            print(json.dumps(overview, indent=2, ensure_ascii=False))
        elif args.command == "all":
            _dump("base", await service.build_base_from_unicode())
            _dump("gemoji", await service.merge_gemoji())
            _dump("iamcal", await service.merge_iamcal())
            _dump("skin-tones", await service.add_skin_tones())
            await _set_maps(service, list(config.sets), strict=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rebuild emoji console artifacts offline")
    sub = parser.add_subparsers(dest="command", required=True)

    base = sub.add_parser("base", help="Build emoji-base.json")
    base.add_argument(
        "--from-assets", action="store_true", help="Derive keys from installed asset filenames"
    )
    sub.add_parser("gemoji", help="Merge gemoji aliases and tags")
    sub.add_parser("iamcal", help="Merge iamcal short names")
    sub.add_parser("skin-tones", help="Label skin tones")
    set_map = sub.add_parser("set-map", help="Build set maps (default: every installed set)")
    set_map.add_argument("sets", nargs="*", help="Set keys")
    sub.add_parser("status", help="Print an artifact overview")
    sub.add_parser("all", help="Run the full pipeline")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_stdlib_json_logging(level=get_settings().app_log_level)
    try:
        asyncio.run(run(args))
    except EmojiConsoleError as e:
        print(f"❌ [{e.code}] {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
