"""Service layer implementing the emoji console operations.

The builders and the resolver are pure functions over in-memory artifacts;
`EmojiAssetService` connects them with the artifact store and the remote
reference data client.
"""

from emoji_console.core.services.base_table import (
    apply_skin_tones,
    build_table_from_assets,
    merge_gemoji,
    merge_iamcal,
    parse_emoji_test,
)
from emoji_console.core.services.set_map import SetMapResult, build_set_map
from emoji_console.core.services.resolver import (
    EmojiResolver,
    get_emoji_display,
    normalize_emoji_input,
    resolve_emoji,
)
from emoji_console.core.services.emoji_assets import EmojiAssetService

__all__ = [
    "apply_skin_tones",
    "build_table_from_assets",
    "merge_gemoji",
    "merge_iamcal",
    "parse_emoji_test",
    "SetMapResult",
    "build_set_map",
    "EmojiResolver",
    "get_emoji_display",
    "normalize_emoji_input",
    "resolve_emoji",
    "EmojiAssetService",
]
