"""Unit tests for zip bundle installation."""

import io
import zipfile

import pytest

from emoji_console.adapters.asset_bundle import install_bundle
from emoji_console.core.errors import ParseError


def _zip(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def test_flattens_matching_members(public_root, emoji_config) -> None:
    payload = _zip(
        {
            "color/svg/1F600.svg": b"<svg>a</svg>",
            "color/svg/nested/1F44D.svg": b"<svg>b</svg>",
            "LICENSE.txt": b"CC BY-SA",
        }
    )
    asset_dir = public_root / "emoji" / "openmoji"

    count = install_bundle(payload, emoji_config.sets["openmoji"], asset_dir)

    assert count == 2
    assert sorted(p.name for p in asset_dir.iterdir()) == ["1F44D.svg", "1F600.svg"]
    assert (asset_dir / "1F600.svg").read_bytes() == b"<svg>a</svg>"


def test_member_filter_limits_extraction(public_root, emoji_config) -> None:
    payload = _zip(
        {
            "twemoji-14.0.2/assets/svg/1f600.svg": b"<svg/>",
            "twemoji-14.0.2/docs/logo.svg": b"<svg/>",
        }
    )
    asset_dir = public_root / "emoji" / "twemoji"

    count = install_bundle(payload, emoji_config.sets["twemoji"], asset_dir)

    assert count == 1
    assert [p.name for p in asset_dir.iterdir()] == ["1f600.svg"]


def test_replaces_previous_contents(public_root, emoji_config, touch_assets) -> None:
    asset_dir = touch_assets(public_root, "openmoji", ["OLD.svg"])

    install_bundle(_zip({"1F600.svg": b"<svg/>"}), emoji_config.sets["openmoji"], asset_dir)

    assert [p.name for p in asset_dir.iterdir()] == ["1F600.svg"]
    assert not any(p.name.endswith(".staging") for p in asset_dir.parent.iterdir())


def test_bad_archive_keeps_existing_assets(public_root, emoji_config, touch_assets) -> None:
    asset_dir = touch_assets(public_root, "openmoji", ["1F600.svg"])

    with pytest.raises(ParseError):
        install_bundle(b"not a zip", emoji_config.sets["openmoji"], asset_dir)
    with pytest.raises(ParseError):
        install_bundle(_zip({"README.md": b"x"}), emoji_config.sets["openmoji"], asset_dir)

    assert [p.name for p in asset_dir.iterdir()] == ["1F600.svg"]
    assert not (asset_dir.parent / ".openmoji.staging").exists()
