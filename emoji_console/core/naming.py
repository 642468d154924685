"""Asset naming policies.

Each provider's filename convention is one of a closed set of policies,
selected by the `naming` discriminant of its `EmojiSetConfig`:

- `UpperHexPolicy`               1F44D-1F3FB.svg          (OpenMoji)
- `LowerHexPolicy`               1f44d-1f3fb.svg          (Twemoji)
- `PrefixedUnderscoreHexPolicy`  emoji_u1f44d_1f3fb.svg   (Blobmoji, Noto)
- `LiteralPolicy`                Clapping hands.svg       (Sensa)

For the hex policies `code_from_filename(filename_for(code)) == code` for
every well-formed codepoint key. The literal policy treats its argument as a
display name and has no such inverse.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from emoji_console.contracts.common import NamingScheme
from emoji_console.contracts.emoji_config import EmojiSetConfig, EmojiSystemConfig

_HEX_SEGMENT_RE = re.compile(r"^[0-9A-Fa-f]{1,6}$")


def format_codepoints(tokens: list[str] | tuple[str, ...]) -> str | None:
    """Canonical key from hex tokens: uppercase, 4-digit padded, '-' joined.

    Returns None when any token is not a hex scalar value.
    """
    if not tokens:
        return None
    segments: list[str] = []
    for token in tokens:
        token = token.strip()
        if not _HEX_SEGMENT_RE.match(token):
            return None
        segments.append(token.upper().zfill(4))
    return "-".join(segments)


class NamingPolicy(ABC):
    """Bidirectional mapping between codepoint keys and provider filenames."""

    codepoint_based = True

    def __init__(self, set_config: EmojiSetConfig) -> None:
        self.set_config = set_config

    @property
    def ext(self) -> str:
        return self.set_config.ext

    @abstractmethod
    def _stem_for(self, code: str) -> str:
        """Filename without extension for a codepoint key."""

    @abstractmethod
    def _code_for_stem(self, stem: str) -> str | None:
        """Inverse of `_stem_for`; None when the stem is not recognised."""

    def filename_for(self, code: str) -> str:
        return f"{self._stem_for(code)}{self.ext}"

    def asset_path_for(self, code: str) -> str:
        return f"{self.set_config.url_prefix.rstrip('/')}/{self.filename_for(code)}"

    def code_from_filename(self, filename: str) -> str | None:
        if not filename.endswith(self.ext):
            return None
        return self._code_for_stem(filename[: -len(self.ext)])


class UpperHexPolicy(NamingPolicy):
    def _stem_for(self, code: str) -> str:
        return code.upper()

    def _code_for_stem(self, stem: str) -> str | None:
        return format_codepoints(stem.split("-"))


class LowerHexPolicy(NamingPolicy):
    def _stem_for(self, code: str) -> str:
        return code.lower()

    def _code_for_stem(self, stem: str) -> str | None:
        return format_codepoints(stem.split("-"))


class PrefixedUnderscoreHexPolicy(NamingPolicy):
    """`<prefix><lowercase codepoints joined by _>`, e.g. emoji_u1f600."""

    def _stem_for(self, code: str) -> str:
        return f"{self.set_config.prefix}{code.lower().replace('-', '_')}"

    def _code_for_stem(self, stem: str) -> str | None:
        prefix = self.set_config.prefix
        if not stem.startswith(prefix):
            return None
        return format_codepoints(stem[len(prefix) :].split("_"))


class LiteralPolicy(NamingPolicy):
    """Name-based provider: the 'code' is a display name used as-is."""

    codepoint_based = False

    def _stem_for(self, code: str) -> str:
        return code

    def _code_for_stem(self, stem: str) -> str | None:
        return stem


_POLICIES: dict[str, type[NamingPolicy]] = {
    NamingScheme.UPPER_HEX.value: UpperHexPolicy,
    NamingScheme.LOWER_HEX.value: LowerHexPolicy,
    NamingScheme.PREFIXED_UNDERSCORE_HEX.value: PrefixedUnderscoreHexPolicy,
    NamingScheme.LITERAL.value: LiteralPolicy,
}


def policy_for(set_config: EmojiSetConfig) -> NamingPolicy:
    """Instantiate the naming policy selected by the set's discriminant."""
    return _POLICIES[NamingScheme(set_config.naming).value](set_config)


def filename_for(set_key: str, code: str, config: EmojiSystemConfig) -> str | None:
    set_config = config.get_set(set_key)
    if set_config is None:
        return None
    return policy_for(set_config).filename_for(code)


def code_from_filename(set_key: str, filename: str, config: EmojiSystemConfig) -> str | None:
    """Codepoint key encoded by `filename` for the given set.

    Returns None for unknown sets, foreign extensions, missing prefixes and
    non-hex stems. For name-based sets the stem is returned unchanged.
    """
    set_config = config.get_set(set_key)
    if set_config is None:
        return None
    return policy_for(set_config).code_from_filename(filename)
