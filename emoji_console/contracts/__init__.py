"""Contract models for data validation."""

from .common import SKIN_TONE_MODIFIERS, CasePolicy, NamingScheme, SkinTone
from .display import DisplayOptions, EmojiRendering, ResolvedEmoji
from .emoji import (
    EmojiEntry,
    EmojiSetMap,
    EmojiTable,
    GemojiBlock,
    IamcalBlock,
    ManualAssignment,
    SetMapEntry,
    SetMapReport,
)
from .emoji_config import AssetBundle, EmojiSetConfig, EmojiSystemConfig
from .operations import (
    AssetStatus,
    BuildBaseResult,
    BuildSetMapResult,
    DownloadResult,
    MergeResult,
    RemoveResult,
    SetMapStatus,
    SetSummary,
)

__all__ = [
    "SKIN_TONE_MODIFIERS",
    "CasePolicy",
    "NamingScheme",
    "SkinTone",
    "DisplayOptions",
    "EmojiRendering",
    "ResolvedEmoji",
    "EmojiEntry",
    "EmojiSetMap",
    "EmojiTable",
    "GemojiBlock",
    "IamcalBlock",
    "ManualAssignment",
    "SetMapEntry",
    "SetMapReport",
    "AssetBundle",
    "EmojiSetConfig",
    "EmojiSystemConfig",
    "AssetStatus",
    "BuildBaseResult",
    "BuildSetMapResult",
    "DownloadResult",
    "MergeResult",
    "RemoveResult",
    "SetMapStatus",
    "SetSummary",
]
