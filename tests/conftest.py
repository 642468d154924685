"""Pytest configuration and fixtures for emoji console tests.

Fixtures build a small, realistic slice of the Unicode enumeration and a
throwaway public directory per test, so no test touches the network or the
real `public/` tree.
"""

from pathlib import Path

import pytest

from emoji_console.config.emoji_system import DEFAULT_SETS
from emoji_console.contracts.emoji import EmojiTable
from emoji_console.contracts.emoji_config import EmojiSystemConfig
from emoji_console.core.services.base_table import parse_emoji_test
from emoji_console.core.storage import ArtifactStore

SAMPLE_EMOJI_TEST = """\
# emoji-test.txt
# Version: 15.1

# group: Smileys & Emotion

# subgroup: face-smiling
1F600                                                  ; fully-qualified     # 😀 E1.0 grinning face
263A FE0F                                              ; fully-qualified     # ☺️ E0.6 smiling face
263A                                                   ; unqualified         # ☺ E0.6 smiling face

# group: People & Body

# subgroup: hand-fingers-open
1F44B                                                  ; fully-qualified     # 👋 E0.6 waving hand
1F44B 1F3FB                                            ; fully-qualified     # 👋🏻 E1.0 waving hand: light skin tone

# subgroup: hands
1F44F                                                  ; fully-qualified     # 👏 E0.6 clapping hands
1F44F 1F3FB                                            ; fully-qualified     # 👏🏻 E1.0 clapping hands: light skin tone
1F44F 1F3FD                                            ; fully-qualified     # 👏🏽 E1.0 clapping hands: medium skin tone

# subgroup: person-gesture
1F646                                                  ; fully-qualified     # 🙆 E0.6 person gesturing OK

#EOF
"""


def make_config(**overrides) -> EmojiSystemConfig:
    fields = {
        "active_set": "openmoji",
        "fallback_set": "twemoji",
        "sets": {s.key: s for s in DEFAULT_SETS},
    }
    fields.update(overrides)
    return EmojiSystemConfig(**fields)


def touch_assets(public_root: Path, set_key: str, names: list[str]) -> Path:
    """Create empty asset files under `<public_root>/emoji/<set_key>/`."""
    asset_dir = public_root / "emoji" / set_key
    asset_dir.mkdir(parents=True, exist_ok=True)
    for name in names:
        (asset_dir / name).write_text("<svg/>", encoding="utf-8")
    return asset_dir


@pytest.fixture
def emoji_config() -> EmojiSystemConfig:
    return make_config()


@pytest.fixture(name="make_config")
def make_config_fixture():
    return make_config


@pytest.fixture(name="touch_assets")
def touch_assets_fixture():
    return touch_assets


@pytest.fixture
def public_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    root.mkdir()
    return root


@pytest.fixture
def store(public_root: Path) -> ArtifactStore:
    return ArtifactStore(public_root)


@pytest.fixture
def sample_table() -> EmojiTable:
    return parse_emoji_test(SAMPLE_EMOJI_TEST)


@pytest.fixture
def emoji_test_text() -> str:
    return SAMPLE_EMOJI_TEST
