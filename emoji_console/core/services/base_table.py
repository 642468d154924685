"""
Base Table Builder

Builds the canonical codepoint -> EmojiEntry table and enriches it.

Construction
- `parse_emoji_test`: Unicode `emoji-test.txt` enumeration. Only
  fully-qualified lines are kept, giving one canonical form per emoji.
- `build_table_from_assets`: offline fallback; union of codepoints decoded
  from every codepoint-based provider directory. Entries carry only
  `codepoints`.

Enrichment (each pass idempotent)
- `merge_gemoji`: aliases + tags, matched by literal character.
- `merge_iamcal`: short names, matched by codepoint key.
- `apply_skin_tones`: label recomputed from the key.

Shortcode ownership: a normalized shortcode belongs to the first entry (in
table order) that claimed it. Later claims by a different entry are skipped
and counted as conflicts, so shortcode lookup is never ambiguous. Aliases
and short names outrank gemoji tags: they claim first, and take back a
shortcode another entry holds only as a tag.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from emoji_console.contracts.common import SKIN_TONE_MODIFIERS, SkinTone
from emoji_console.contracts.emoji import EmojiEntry, EmojiTable, GemojiBlock, IamcalBlock
from emoji_console.contracts.emoji_config import EmojiSystemConfig
from emoji_console.contracts.operations import MergeResult
from emoji_console.contracts.reference import (
    GEMOJI_LIST_ADAPTER,
    IAMCAL_LIST_ADAPTER,
    GemojiSourceEntry,
    IamcalSourceEntry,
)
from emoji_console.core.errors import ParseError, PreconditionError
from emoji_console.core.naming import format_codepoints, policy_for

logger = logging.getLogger(__name__)

FULLY_QUALIFIED = "fully-qualified"
VARIATION_SELECTOR_16 = "\ufe0f"

_GROUP_RE = re.compile(r"^#\s*group:\s*(?P<value>.+?)\s*$")
_SUBGROUP_RE = re.compile(r"^#\s*subgroup:\s*(?P<value>.+?)\s*$")
# 1F44D 1F3FB ; fully-qualified # 👍🏻 E1.0 thumbs up: light skin tone
_DATA_RE = re.compile(
    r"^(?P<codes>[0-9A-Fa-f]+(?:\s+[0-9A-Fa-f]+)*)\s*;\s*(?P<status>[a-z-]+)\s*"
    r"#\s*(?P<char>\S+)\s+(?:E(?P<version>\d+(?:\.\d+)?)\s+)?(?P<name>.+?)\s*$"
)


# -------------------------
# Construction
# -------------------------


def parse_emoji_test(text: str) -> EmojiTable:
    """Parse the Unicode emoji-test.txt enumeration into a canonical table.

    Raises:
        ParseError: when the document yields no fully-qualified entries
    """
    table: EmojiTable = {}
    group = ""
    subgroup = ""
    skipped = 0

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("#"):
            if m := _GROUP_RE.match(line):
                group = m.group("value")
            elif m := _SUBGROUP_RE.match(line):
                subgroup = m.group("value")
            continue

        m = _DATA_RE.match(line)
        if not m:
            skipped += 1
            continue
        if m.group("status") != FULLY_QUALIFIED:
            continue

        code = format_codepoints(m.group("codes").split())
        if code is None or code in table:
            continue
        table[code] = EmojiEntry(
            codepoints=code,
            unicode=m.group("char"),
            name=m.group("name"),
            emoji_version=m.group("version"),
            group=group,
            subgroup=subgroup,
            shortcodes=[],
        )

    if not table:
        raise ParseError("No fully-qualified entries found in the Unicode emoji enumeration")
    if skipped:
        logger.warning("Skipped %d unrecognised data lines in emoji-test.txt", skipped)
    logger.info("Parsed %d fully-qualified emoji", len(table))
    return table


def build_table_from_assets(config: EmojiSystemConfig, public_root: Path) -> EmojiTable:
    """Derive the key set from asset filenames of every codepoint-based set.

    Raises:
        PreconditionError: NO_ASSETS_FOUND when no set directory holds a
            decodable file
    """
    codes: set[str] = set()
    for set_key, set_config in config.sets.items():
        policy = policy_for(set_config)
        if not policy.codepoint_based:
            continue
        asset_dir = public_root / set_config.asset_dir
        if not asset_dir.is_dir():
            continue
        found = 0
        for path in asset_dir.iterdir():
            if not path.is_file():
                continue
            code = policy.code_from_filename(path.name)
            if code:
                codes.add(code)
                found += 1
        logger.info("Collected %d codepoints from %s", found, set_key)

    if not codes:
        raise PreconditionError(
            "No emoji assets found in any set directories.", code="NO_ASSETS_FOUND"
        )
    return {code: EmojiEntry(codepoints=code) for code in sorted(codes)}


# -------------------------
# Shortcodes
# -------------------------


def normalize_shortcode(shortcode: str) -> str:
    """`:Wave:` -> `wave`."""
    return shortcode.strip(":").lower()


def _tag_only(entry: EmojiEntry) -> set[str]:
    """Shortcodes an entry holds only because of a gemoji tag."""
    if entry.gemoji is None:
        return set()
    named = {normalize_shortcode(a) for a in entry.gemoji.aliases}
    if entry.iamcal is not None:
        named.update(normalize_shortcode(s) for s in entry.iamcal.short_names)
    return {normalize_shortcode(t) for t in entry.gemoji.tags} - named


class _ShortcodeIndex:
    """Normalized shortcode -> owning entry, with tag-only claims marked weak.

    Aliases and short names are strong claims. A strong claim takes over a
    shortcode that another entry holds only through a tag; every other claim
    on a shortcode owned by a different entry is a conflict.
    """

    def __init__(self, table: EmojiTable) -> None:
        self.table = table
        self.owners: dict[str, str] = {}
        self.weak: set[str] = set()
        weak_claims: list[tuple[str, str]] = []
        for code, entry in table.items():
            tag_only = _tag_only(entry)
            for shortcode in entry.shortcodes or []:
                normalized = normalize_shortcode(shortcode)
                if normalized in tag_only:
                    weak_claims.append((normalized, code))
                else:
                    self.owners.setdefault(normalized, code)
        for normalized, code in weak_claims:
            if normalized not in self.owners:
                self.owners[normalized] = code
                self.weak.add(normalized)

    def merge(self, entry: EmojiEntry, candidates: Iterable[str | None], *, weak: bool = False) -> int:
        """Append claimable candidates to `entry.shortcodes`; return conflict count."""
        merged = list(entry.shortcodes or [])
        conflicts = 0
        for candidate in candidates:
            if not candidate:
                continue
            normalized = normalize_shortcode(candidate)
            if not normalized:
                continue
            owner = self.owners.get(normalized)
            if owner == entry.codepoints:
                if not weak:
                    self.weak.discard(normalized)
                continue
            if owner is not None:
                if weak or normalized not in self.weak:
                    conflicts += 1
                    continue
                self._release(owner, normalized)
            self.owners[normalized] = entry.codepoints
            if weak:
                self.weak.add(normalized)
            else:
                self.weak.discard(normalized)
            merged.append(candidate)
        entry.shortcodes = merged
        return conflicts

    def _release(self, code: str, normalized: str) -> None:
        previous = self.table[code]
        previous.shortcodes = [
            s for s in previous.shortcodes or [] if normalize_shortcode(s) != normalized
        ]
        logger.debug("shortcode %s moved off %s tag", normalized, code)


# -------------------------
# Enrichment
# -------------------------


def parse_gemoji(raw: Any) -> list[GemojiSourceEntry]:
    try:
        return GEMOJI_LIST_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise ParseError(f"Unexpected gemoji document shape: {e.error_count()} errors") from e


def parse_iamcal(raw: Any) -> list[IamcalSourceEntry]:
    try:
        return IAMCAL_LIST_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise ParseError(f"Unexpected iamcal document shape: {e.error_count()} errors") from e


def merge_gemoji(table: EmojiTable, source: list[GemojiSourceEntry]) -> MergeResult:
    """Merge gemoji aliases and tags into entries with the same literal emoji.

    Exact character match first; entries whose gemoji record omits (or adds)
    the U+FE0F variation selector still match through the stripped form.
    """
    by_char: dict[str, GemojiSourceEntry] = {}
    by_bare_char: dict[str, GemojiSourceEntry] = {}
    for record in source:
        if not record.emoji:
            continue
        by_char.setdefault(record.emoji, record)
        by_bare_char.setdefault(record.emoji.replace(VARIATION_SELECTOR_16, ""), record)

    index = _ShortcodeIndex(table)
    result = MergeResult(total=len(table))
    matched: list[tuple[EmojiEntry, GemojiSourceEntry]] = []
    for entry in table.values():
        if not entry.unicode:
            continue
        record = by_char.get(entry.unicode) or by_bare_char.get(
            entry.unicode.replace(VARIATION_SELECTOR_16, "")
        )
        if record is None:
            continue
        entry.gemoji = GemojiBlock(
            aliases=record.aliases,
            tags=record.tags,
            description=record.description or "",
            category=record.category or "",
        )
        matched.append((entry, record))
        result.updated += 1

    # aliases claim before any tag
    for entry, record in matched:
        result.conflicts += index.merge(entry, record.aliases)
    for entry, record in matched:
        result.conflicts += index.merge(entry, record.tags, weak=True)

    logger.info(
        "gemoji merge: %d/%d entries updated, %d shortcode conflicts",
        result.updated,
        result.total,
        result.conflicts,
    )
    return result


def merge_iamcal(table: EmojiTable, source: list[IamcalSourceEntry]) -> MergeResult:
    """Merge iamcal short names into entries with the same codepoint key."""
    by_code: dict[str, IamcalSourceEntry] = {}
    for record in source:
        if not record.unified:
            continue
        code = format_codepoints(record.unified.split("-"))
        if code:
            by_code.setdefault(code, record)

    index = _ShortcodeIndex(table)
    result = MergeResult(total=len(table))
    for code, entry in table.items():
        record = by_code.get(code.upper())
        if record is None:
            continue
        entry.iamcal = IamcalBlock(
            short_names=record.short_names,
            keywords=record.keywords,
            category=record.category or "",
            added_in=record.added_in or "",
        )
        result.conflicts += index.merge(entry, record.short_names)
        result.updated += 1

    logger.info(
        "iamcal merge: %d/%d entries updated, %d shortcode conflicts",
        result.updated,
        result.total,
        result.conflicts,
    )
    return result


def skin_tone_for(code: str) -> str:
    """Label of the first skin-tone modifier present in the key."""
    segments = code.upper().split("-")
    for modifier, label in SKIN_TONE_MODIFIERS.items():
        if modifier in segments:
            return label.value
    return SkinTone.DEFAULT.value


def apply_skin_tones(table: EmojiTable) -> MergeResult:
    """Recompute `skin_tone` for every entry; `updated` counts changes."""
    result = MergeResult(total=len(table))
    for code, entry in table.items():
        tone = skin_tone_for(code)
        if entry.skin_tone != tone:
            entry.skin_tone = tone
            result.updated += 1
    return result
