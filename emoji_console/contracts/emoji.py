"""Pydantic models for the persisted emoji artifacts.

Three artifacts are produced by the console:

- the canonical table (`emoji-base.json`): codepoint key -> EmojiEntry
- one set map per provider (`emoji-<set>.json`): key -> SetMapEntry
- one diagnostic report per provider (`<set>-debug-report.json`)

Persisted JSON uses the camelCase aliases where the model declares them, so
artifacts stay readable by the browser-side tooling.
"""

from typing import Any

from pydantic import Field, TypeAdapter

from .common import BaseContract


class GemojiBlock(BaseContract):
    """Alias data merged from GitHub's gemoji database."""

    aliases: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    category: str = ""


class IamcalBlock(BaseContract):
    """Alias data merged from iamcal's emoji-data database."""

    short_names: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    category: str = ""
    added_in: str = ""


class EmojiEntry(BaseContract):
    """Canonical metadata for one emoji codepoint sequence.

    Entries built from asset filenames only carry `codepoints`; every other
    field is filled in by later enrichment passes.
    """

    codepoints: str = Field(..., description="Uppercase hex codepoints joined by '-'")
    unicode: str | None = Field(None, description="Literal character(s)")
    name: str | None = Field(None, description="Human-readable description")
    emoji_version: str | None = Field(None, description="Emoji version, e.g. '1.0'")
    group: str | None = None
    subgroup: str | None = None
    shortcodes: list[str] | None = Field(None, description="Case-insensitive aliases")
    skin_tone: str | None = Field(None, description="Derived skin tone label")
    gemoji: GemojiBlock | None = None
    iamcal: IamcalBlock | None = None

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class AssetVariant(BaseContract):
    """Optional colour / black-and-white variants of an asset."""

    color: str | None = None
    bw: str | None = None


class SetMapEntry(BaseContract):
    """Location of one provider asset."""

    asset_path: str = Field(..., alias="assetPath")
    svg: AssetVariant | None = None
    png: AssetVariant | None = None

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ManualAssignment(BaseContract):
    """A provider file that could not be matched to any codepoint."""

    key: str
    file: str


class SetMapReport(BaseContract):
    """Diagnostic report written next to each set map."""

    missing_files: list[str] = Field(default_factory=list, alias="missingFiles")
    unused_files: list[str] = Field(default_factory=list, alias="unusedFiles")
    manual_assignments: list[ManualAssignment] = Field(
        default_factory=list, alias="manualAssignments"
    )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


EmojiTable = dict[str, EmojiEntry]
EmojiSetMap = dict[str, SetMapEntry]

EMOJI_TABLE_ADAPTER: TypeAdapter[EmojiTable] = TypeAdapter(EmojiTable)
SET_MAP_ADAPTER: TypeAdapter[EmojiSetMap] = TypeAdapter(EmojiSetMap)


def table_to_json(table: EmojiTable) -> dict[str, Any]:
    return {code: entry.to_json_dict() for code, entry in table.items()}


def set_map_to_json(set_map: EmojiSetMap) -> dict[str, Any]:
    return {key: entry.to_json_dict() for key, entry in set_map.items()}
