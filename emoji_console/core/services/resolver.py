"""
Emoji Resolver

Turns a user-facing token (literal character, codepoint key or shortcode)
into a renderable asset reference across a preferred/fallback set chain.

Lookups are pure functions over an in-memory table and set maps. The
`EmojiResolver` class wraps them with an explicit cache of loaded
artifacts, which callers invalidate after a rebuild.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from emoji_console.contracts.display import DisplayOptions, EmojiRendering, ResolvedEmoji
from emoji_console.contracts.emoji import EmojiSetMap, EmojiTable
from emoji_console.contracts.emoji_config import EmojiSystemConfig
from emoji_console.core.services.base_table import normalize_shortcode
from emoji_console.core.storage import ArtifactStore

logger = logging.getLogger(__name__)


def normalize_emoji_input(
    token: str, table: EmojiTable, *, shortcodes_enabled: bool = True
) -> str | None:
    """Map a token to a canonical codepoint key, or None when nothing matches.

    Order: exact key, literal character, then shortcode (colons stripped,
    case-insensitive). The first match in table order wins.
    """
    if not token:
        return None
    if token in table:
        return token

    for code, entry in table.items():
        if entry.unicode == token:
            return code

    if not shortcodes_enabled:
        return None
    wanted = normalize_shortcode(token)
    if not wanted:
        return None
    for code, entry in table.items():
        if any(normalize_shortcode(sc) == wanted for sc in entry.shortcodes or []):
            return code
    return None


def resolve_emoji(
    code: str,
    set_key: str,
    table: EmojiTable,
    set_maps: Mapping[str, EmojiSetMap],
) -> ResolvedEmoji | None:
    """Entry for `code` merged with `set_key`'s asset path.

    Returns None when the table lacks the code; `asset_path` is None when the
    set lacks it.
    """
    entry = table.get(code)
    if entry is None:
        return None
    asset = (set_maps.get(set_key) or {}).get(code)
    return ResolvedEmoji(
        **entry.model_dump(),
        asset_path=asset.asset_path if asset else None,
    )


def get_emoji_display(
    token: str,
    options: DisplayOptions | None,
    table: EmojiTable,
    config: EmojiSystemConfig,
    set_maps: Mapping[str, EmojiSetMap],
) -> EmojiRendering:
    """Build an image rendering from the first set with an asset, else text."""
    options = options or DisplayOptions()
    code = normalize_emoji_input(token, table, shortcodes_enabled=config.shortcodes_enabled)
    if code is None:
        return EmojiRendering(kind="text", text=token, css_class=options.css_class)

    chain = [options.preferred_set or config.active_set, options.fallback_set or config.fallback_set]
    for set_key in chain:
        resolved = resolve_emoji(code, set_key, table, set_maps)
        if resolved is not None and resolved.asset_path:
            return EmojiRendering(
                kind="image",
                src=resolved.asset_path,
                alt=resolved.name or resolved.unicode or code,
                title=resolved.name or resolved.unicode or code,
                size=options.size,
                css_class=options.css_class,
                grayscale=config.grayscale,
                codepoints=code,
                set_key=set_key,
            )

    return EmojiRendering(
        kind="text",
        text=table[code].unicode or token,
        css_class=options.css_class,
        codepoints=code,
    )


class EmojiResolver:
    """Resolver over artifacts loaded from an `ArtifactStore`.

    The table and set maps are loaded on first use and kept until
    `invalidate` is called. A set without a persisted map resolves every
    code to a null asset path.

    Loads happen outside the lock and may race with `invalidate` from another
    thread. Each invalidation bumps a generation counter; a load only fills
    the cache if no invalidation happened while it was reading.
    """

    def __init__(self, store: ArtifactStore, config: EmojiSystemConfig) -> None:
        self.store = store
        self.config = config
        self._lock = threading.Lock()
        self._table: EmojiTable | None = None
        self._table_generation = 0
        self._set_maps: dict[str, EmojiSetMap] = {}
        self._map_generations: dict[str, int] = {}

    @property
    def table(self) -> EmojiTable:
        with self._lock:
            if self._table is not None:
                return self._table
            generation = self._table_generation
        table = self.store.load_table()
        with self._lock:
            if generation == self._table_generation:
                self._table = table
        return table

    def load_set_map(self, set_key: str) -> EmojiSetMap:
        with self._lock:
            if set_key in self._set_maps:
                return self._set_maps[set_key]
            generation = self._map_generations.get(set_key, 0)
        set_map = self.store.load_set_map(set_key) or {}
        with self._lock:
            if generation == self._map_generations.get(set_key, 0):
                self._set_maps[set_key] = set_map
            else:
                logger.debug("discarding %s map loaded before invalidation", set_key)
        return set_map

    def invalidate(self, set_key: str | None = None) -> None:
        """Drop one cached set map, or everything when no key is given."""
        with self._lock:
            if set_key is None:
                self._table = None
                self._table_generation += 1
                self._set_maps.clear()
                for key in self._map_generations.keys() | set(self.config.sets):
                    self._map_generations[key] = self._map_generations.get(key, 0) + 1
            else:
                self._set_maps.pop(set_key, None)
                self._map_generations[set_key] = self._map_generations.get(set_key, 0) + 1

    def normalize(self, token: str) -> str | None:
        return normalize_emoji_input(
            token, self.table, shortcodes_enabled=self.config.shortcodes_enabled
        )

    def resolve(self, code: str, set_key: str) -> ResolvedEmoji | None:
        return resolve_emoji(code, set_key, self.table, {set_key: self.load_set_map(set_key)})

    def display(self, token: str, options: DisplayOptions | None = None) -> EmojiRendering:
        options = options or DisplayOptions()
        chain = {
            options.preferred_set or self.config.active_set,
            options.fallback_set or self.config.fallback_set,
        }
        set_maps = {key: self.load_set_map(key) for key in chain}
        return get_emoji_display(token, options, self.table, self.config, set_maps)
