"""
Set Map Builder

Reconciles the canonical table against the files of one provider and
produces the provider's asset map plus a diagnostic report.

Codepoint-based providers are matched by expected filename. The name-based
provider (literal naming) is matched by normalized English name within its
catalog slice (hand gestures), with ` skin <1-5>` filename suffixes mapped
to the five skin-tone modifiers. Files that match nothing get a synthetic
`manualN` key and are listed in the report for follow-up.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from emoji_console.contracts.common import SKIN_TONE_MODIFIERS, SkinTone
from emoji_console.contracts.emoji import (
    EmojiSetMap,
    EmojiTable,
    ManualAssignment,
    SetMapEntry,
    SetMapReport,
)
from emoji_console.contracts.emoji_config import EmojiSetConfig, EmojiSystemConfig
from emoji_console.core.errors import PreconditionError, invalid_set_key
from emoji_console.core.naming import NamingPolicy, policy_for
from emoji_console.core.storage import MANUAL_KEY_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_SKIN = SkinTone.DEFAULT.value

# Sensa-style skin suffix number -> modifier codepoint (1=light ... 5=dark)
SKIN_SUFFIX_TO_MODIFIER: dict[int, str] = {
    index: modifier for index, modifier in enumerate(SKIN_TONE_MODIFIERS, start=1)
}

_VERSION_PREFIX_RE = re.compile(r"E[0-9.]+ ")
_QUALIFIER_RE = re.compile(r":.*$")
_SKIN_SUFFIX_RE = re.compile(r" skin ([1-5])$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]")
_SPACES_RE = re.compile(r" +")


@dataclass(slots=True)
class SetMapResult:
    set_map: EmojiSetMap
    report: SetMapReport

    @property
    def manual_count(self) -> int:
        return len(self.report.manual_assignments)


def normalize_name(name: str) -> str:
    """Lowercase, keep [a-z0-9 ], collapse spaces, trim."""
    lowered = _NON_ALNUM_RE.sub("", name.lower())
    return _SPACES_RE.sub(" ", lowered).strip()


def base_name(name: str) -> str:
    """`E1.0 thumbs up: light skin tone` -> `thumbs up`."""
    return _QUALIFIER_RE.sub("", _VERSION_PREFIX_RE.sub("", name, count=1)).strip()


def list_asset_files(asset_dir: Path, ext: str) -> list[str]:
    """Sorted names of regular files in `asset_dir` ending with `ext`."""
    return sorted(p.name for p in asset_dir.iterdir() if p.is_file() and p.name.endswith(ext))


# -------------------------
# Codepoint-based providers
# -------------------------


def _build_codepoint_map(
    table: EmojiTable, files: list[str], policy: NamingPolicy
) -> SetMapResult:
    file_set = set(files)
    expected: dict[str, str] = {code: policy.filename_for(code) for code in table}

    set_map: EmojiSetMap = {}
    missing: list[str] = []
    for code, filename in expected.items():
        if filename in file_set:
            set_map[code] = SetMapEntry(asset_path=policy.asset_path_for(code))
        else:
            missing.append(f"{code} (expected: {filename})")

    expected_files = set(expected.values())
    unused = [f for f in files if f not in expected_files]
    return SetMapResult(
        set_map=set_map,
        report=SetMapReport(missing_files=missing, unused_files=unused),
    )


# -------------------------
# Name-based provider
# -------------------------


def _build_name_lookup(table: EmojiTable, set_config: EmojiSetConfig) -> dict[str, dict[str, str]]:
    """normalized name -> skin (modifier codepoint or 'default') -> code.

    The first entry registered for a (name, skin) pair wins, which keeps
    single-tone variants ahead of multi-tone sequences sharing a name.
    """
    keyword = set_config.catalog_subgroup_keyword or ""
    lookup: dict[str, dict[str, str]] = {}
    for code, entry in table.items():
        if entry.group != set_config.catalog_group or not entry.subgroup or not entry.name:
            continue
        if keyword not in entry.subgroup:
            continue
        norm = normalize_name(base_name(entry.name))
        if not norm:
            continue
        segments = code.split("-")
        skin = next((s for s in segments if s in SKIN_TONE_MODIFIERS), DEFAULT_SKIN)
        lookup.setdefault(norm, {}).setdefault(skin, code)
    return lookup


def _build_name_map(
    table: EmojiTable, files: list[str], set_config: EmojiSetConfig, policy: NamingPolicy
) -> SetMapResult:
    lookup = _build_name_lookup(table, set_config)
    set_map: EmojiSetMap = {}
    manual: list[ManualAssignment] = []

    for filename in files:
        stem = policy.code_from_filename(filename)
        if stem is None:
            continue
        skin = DEFAULT_SKIN
        if m := _SKIN_SUFFIX_RE.search(stem):
            skin = SKIN_SUFFIX_TO_MODIFIER.get(int(m.group(1)), DEFAULT_SKIN)
        norm = normalize_name(_SKIN_SUFFIX_RE.sub("", stem))

        variants = lookup.get(norm, {})
        code = variants.get(skin)
        exact = code is not None
        if code is None and skin != DEFAULT_SKIN:
            code = variants.get(DEFAULT_SKIN)

        entry = SetMapEntry(asset_path=policy.asset_path_for(stem))
        if code is not None:
            # A skin variant standing in for the default never displaces an exact file
            if exact or code not in set_map:
                set_map[code] = entry
        else:
            key = f"{MANUAL_KEY_PREFIX}{len(manual) + 1}"
            set_map[key] = entry
            manual.append(ManualAssignment(key=key, file=stem))

    if manual:
        logger.warning(
            "%s: %d files need manual assignment", set_config.key, len(manual)
        )
    return SetMapResult(set_map=set_map, report=SetMapReport(manual_assignments=manual))


# -------------------------
# Entry point
# -------------------------


def build_set_map(
    set_key: str, table: EmojiTable, config: EmojiSystemConfig, public_root: Path
) -> SetMapResult:
    """Build one provider's asset map and diagnostic report in memory.

    Raises:
        PreconditionError: INVALID_SET_KEY for unknown sets, MISSING_ASSET_DIR
            when the provider directory does not exist
    """
    set_config = config.get_set(set_key)
    if set_config is None:
        raise invalid_set_key(set_key)

    asset_dir = public_root / set_config.asset_dir
    if not asset_dir.is_dir():
        raise PreconditionError(
            f"Asset directory not found: {set_config.asset_dir}. "
            "Please download or install the assets for this set first.",
            code="MISSING_ASSET_DIR",
        )

    policy = policy_for(set_config)
    files = list_asset_files(asset_dir, set_config.ext)
    if policy.codepoint_based:
        result = _build_codepoint_map(table, files, policy)
    else:
        result = _build_name_map(table, files, set_config, policy)

    logger.info(
        "Built %s map: %d entries, %d missing, %d unused, %d manual",
        set_key,
        len(result.set_map),
        len(result.report.missing_files),
        len(result.report.unused_files),
        result.manual_count,
    )
    return result
