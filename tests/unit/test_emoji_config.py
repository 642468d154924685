"""Unit tests for settings-driven emoji configuration."""

import pytest
from pydantic import ValidationError

from emoji_console.config.emoji_system import DEFAULT_SETS, load_emoji_config
from emoji_console.config.settings import Settings
from emoji_console.contracts.common import NamingScheme
from emoji_console.contracts.emoji_config import EmojiSetConfig, EmojiSystemConfig


def test_defaults() -> None:
    config = load_emoji_config(Settings())

    assert config.active_set in config.sets
    assert list(config.sets) == ["openmoji", "twemoji", "blobmoji", "notomoji", "sensamoji"]
    assert config.sets["openmoji"].bundle.version == "15.1.0"
    assert config.sets["blobmoji"].prefix == "emoji_u"


def test_settings_override_flags() -> None:
    settings = Settings(
        EMOJI_ACTIVE_SET="twemoji",
        EMOJI_FALLBACK_SET="openmoji",
        EMOJI_GRAYSCALE=True,
        EMOJI_SHORTCODES_ENABLED=False,
    )
    config = load_emoji_config(settings)

    assert config.active_set == "twemoji"
    assert config.fallback_set == "openmoji"
    assert config.grayscale is True
    assert config.shortcodes_enabled is False


def test_unknown_active_set_is_rejected() -> None:
    with pytest.raises(ValidationError):
        load_emoji_config(Settings(EMOJI_ACTIVE_SET="applemoji"))


def test_config_is_immutable() -> None:
    config = EmojiSystemConfig(
        active_set="openmoji", fallback_set="twemoji", sets={s.key: s for s in DEFAULT_SETS}
    )
    with pytest.raises(ValidationError):
        config.active_set = "twemoji"


def test_literal_provider_requires_catalog_slice() -> None:
    with pytest.raises(ValidationError):
        EmojiSetConfig(
            key="sensa2",
            name="Sensa 2",
            asset_dir="emoji/sensa2",
            url_prefix="/emoji/sensa2",
            case="asis",
            naming=NamingScheme.LITERAL,
        )


def test_public_root_resolves_relative_paths(tmp_path) -> None:
    assert Settings(PUBLIC_DIR=str(tmp_path)).public_root == tmp_path
    assert Settings(PUBLIC_DIR="public").public_root.is_absolute()


def test_case_must_agree_with_naming() -> None:
    with pytest.raises(ValidationError, match="implies case 'lower'"):
        EmojiSetConfig(
            key="twemoji2",
            name="Twemoji 2",
            asset_dir="emoji/twemoji2",
            url_prefix="/emoji/twemoji2",
            case="upper",
            naming=NamingScheme.LOWER_HEX,
        )
