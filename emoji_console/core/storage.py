"""File-backed artifact store.

Layout under the public root:

    dev/emoji/emoji-base.json              canonical table
    dev/emoji/emoji-<set>.json             per-set asset map
    dev/emoji/<set>-debug-report.json      per-set diagnostic report
    emoji/<set>/...                        provider asset files

Every artifact is serialized completely in memory and written once through
a temp file + `replace`, so readers never observe a partial document.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from emoji_console.contracts.emoji import (
    EMOJI_TABLE_ADAPTER,
    SET_MAP_ADAPTER,
    EmojiSetMap,
    EmojiTable,
    SetMapReport,
    set_map_to_json,
    table_to_json,
)
from emoji_console.contracts.emoji_config import EmojiSetConfig
from emoji_console.contracts.operations import SetMapStatus
from emoji_console.core.errors import ParseError, missing_emoji_base

logger = logging.getLogger(__name__)

MANUAL_KEY_PREFIX = "manual"
_MANUAL_KEY_RE = re.compile(rf"^{MANUAL_KEY_PREFIX}\d+$")


def write_json_atomic(target_path: Path, payload: Any) -> None:
    """Write pretty-printed UTF-8 JSON via a sibling temp file."""
    target_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target_path.with_suffix(target_path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2)
    tmp_path.replace(target_path)


def read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as e:
        raise ParseError(f"Malformed JSON in {path.name}: {e}") from e


def is_manual_key(key: str) -> bool:
    return bool(_MANUAL_KEY_RE.match(key))


class ArtifactStore:
    """Reads and writes the console's JSON artifacts."""

    def __init__(self, public_root: Path) -> None:
        self.public_root = Path(public_root)
        self.artifact_dir = self.public_root / "dev" / "emoji"

    # --- Paths ---
    @property
    def base_path(self) -> Path:
        return self.artifact_dir / "emoji-base.json"

    def set_map_path(self, set_key: str) -> Path:
        return self.artifact_dir / f"emoji-{set_key}.json"

    def report_name(self, set_key: str) -> str:
        return f"{set_key}-debug-report.json"

    def report_path(self, set_key: str) -> Path:
        return self.artifact_dir / self.report_name(set_key)

    def asset_dir(self, set_config: EmojiSetConfig) -> Path:
        return self.public_root / set_config.asset_dir

    # --- Canonical table ---
    def table_exists(self) -> bool:
        return self.base_path.is_file()

    def load_table(self) -> EmojiTable:
        """Load the canonical table.

        Raises:
            PreconditionError: MISSING_EMOJI_BASE when it was never built
            ParseError: when the file is not a valid table
        """
        if not self.table_exists():
            raise missing_emoji_base()
        raw = read_json(self.base_path)
        try:
            return EMOJI_TABLE_ADAPTER.validate_python(raw)
        except ValidationError as e:
            raise ParseError(f"emoji-base.json does not match the table schema: {e}") from e

    def save_table(self, table: EmojiTable) -> Path:
        write_json_atomic(self.base_path, table_to_json(table))
        logger.info("Wrote emoji base with %d entries to %s", len(table), self.base_path)
        return self.base_path

    # --- Set maps ---
    def load_set_map(self, set_key: str) -> EmojiSetMap | None:
        path = self.set_map_path(set_key)
        if not path.is_file():
            return None
        try:
            return SET_MAP_ADAPTER.validate_python(read_json(path))
        except ValidationError as e:
            raise ParseError(f"{path.name} does not match the set map schema: {e}") from e

    def save_set_map(self, set_key: str, set_map: EmojiSetMap, report: SetMapReport) -> None:
        """Persist a set map, then its report; both are serialized up front."""
        map_payload = set_map_to_json(set_map)
        report_payload = report.to_json_dict()
        write_json_atomic(self.set_map_path(set_key), map_payload)
        write_json_atomic(self.report_path(set_key), report_payload)
        logger.info("Wrote set map %s with %d entries", set_key, len(set_map))

    def set_map_status(self, set_key: str) -> SetMapStatus:
        path = self.set_map_path(set_key)
        if not path.is_file():
            return SetMapStatus(exists=False)
        try:
            raw = read_json(path)
        except ParseError:
            logger.warning("Unreadable set map %s", path)
            raw = {}
        keys = list(raw) if isinstance(raw, dict) else []
        modified = datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
        return SetMapStatus(
            exists=True,
            size=len(keys),
            manual_count=sum(1 for k in keys if is_manual_key(k)),
            date=modified.date().isoformat(),
        )
