"""Unit tests for per-set asset map construction."""

import pytest

from emoji_console.contracts.emoji import EmojiEntry
from emoji_console.core.errors import PreconditionError
from emoji_console.core.services.set_map import base_name, build_set_map, normalize_name


class TestCodepointProviders:
    def test_maps_present_files_and_reports_the_rest(
        self, public_root, emoji_config, sample_table, touch_assets
    ) -> None:
        touch_assets(public_root, "openmoji", ["1F600.svg", "1F44F.svg", "E000.svg", "notes.txt"])

        result = build_set_map("openmoji", sample_table, emoji_config, public_root)

        assert set(result.set_map) == {"1F600", "1F44F"}
        assert result.set_map["1F600"].asset_path == "/emoji/openmoji/1F600.svg"
        assert "263A-FE0F (expected: 263A-FE0F.svg)" in result.report.missing_files
        assert len(result.report.missing_files) == len(sample_table) - 2
        assert result.report.unused_files == ["E000.svg"]
        assert result.report.manual_assignments == []

    def test_prefixed_provider_single_file(self, public_root, emoji_config, touch_assets) -> None:
        table = {"1F600": EmojiEntry(codepoints="1F600", unicode="😀", name="grinning face")}
        touch_assets(public_root, "blobmoji", ["emoji_u1f600.svg"])

        result = build_set_map("blobmoji", table, emoji_config, public_root)

        assert result.set_map["1F600"].asset_path == "/emoji/blobmoji/emoji_u1f600.svg"
        assert result.report.missing_files == []
        assert result.report.unused_files == []

    def test_empty_directory_gives_empty_map(
        self, public_root, emoji_config, sample_table, touch_assets
    ) -> None:
        touch_assets(public_root, "twemoji", [])

        result = build_set_map("twemoji", sample_table, emoji_config, public_root)

        assert result.set_map == {}
        assert len(result.report.missing_files) == len(sample_table)

    def test_unknown_set(self, public_root, emoji_config, sample_table) -> None:
        with pytest.raises(PreconditionError) as exc:
            build_set_map("applemoji", sample_table, emoji_config, public_root)
        assert exc.value.code == "INVALID_SET_KEY"

    def test_missing_asset_directory(self, public_root, emoji_config, sample_table) -> None:
        with pytest.raises(PreconditionError) as exc:
            build_set_map("openmoji", sample_table, emoji_config, public_root)
        assert exc.value.code == "MISSING_ASSET_DIR"
        assert exc.value.status == 400


class TestNameBasedProvider:
    def test_clapping_hands_default_and_medium(
        self, public_root, emoji_config, sample_table, touch_assets
    ) -> None:
        touch_assets(public_root, "sensamoji", ["Clapping hands.svg", "Clapping hands skin 3.svg"])

        result = build_set_map("sensamoji", sample_table, emoji_config, public_root)

        assert result.set_map["1F44F"].asset_path == "/emoji/sensamoji/Clapping hands.svg"
        assert (
            result.set_map["1F44F-1F3FD"].asset_path
            == "/emoji/sensamoji/Clapping hands skin 3.svg"
        )
        assert result.report.manual_assignments == []
        assert result.report.missing_files == []
        assert result.report.unused_files == []

    def test_missing_skin_variant_falls_back_to_default(
        self, public_root, emoji_config, sample_table, touch_assets
    ) -> None:
        touch_assets(public_root, "sensamoji", ["Waving hand skin 4.svg"])

        result = build_set_map("sensamoji", sample_table, emoji_config, public_root)

        assert result.set_map["1F44B"].asset_path == "/emoji/sensamoji/Waving hand skin 4.svg"
        assert result.manual_count == 0

    def test_fallback_never_replaces_the_exact_default_file(
        self, public_root, emoji_config, sample_table, touch_assets
    ) -> None:
        touch_assets(public_root, "sensamoji", ["Waving hand.svg", "Waving hand skin 5.svg"])

        result = build_set_map("sensamoji", sample_table, emoji_config, public_root)

        assert result.set_map["1F44B"].asset_path == "/emoji/sensamoji/Waving hand.svg"

    def test_unmatched_files_get_manual_keys(
        self, public_root, emoji_config, sample_table, touch_assets
    ) -> None:
        # person gesturing OK lives outside the hand subgroups
        touch_assets(
            public_root,
            "sensamoji",
            ["Zebra.svg", "Person gesturing OK.svg", "Clapping hands.svg"],
        )

        result = build_set_map("sensamoji", sample_table, emoji_config, public_root)

        assert [(m.key, m.file) for m in result.report.manual_assignments] == [
            ("manual1", "Person gesturing OK"),
            ("manual2", "Zebra"),
        ]
        assert result.set_map["manual2"].asset_path == "/emoji/sensamoji/Zebra.svg"
        assert result.manual_count == 2
        assert "1F44F" in result.set_map


def test_name_normalisation_helpers() -> None:
    assert base_name("E1.0 thumbs up: light skin tone") == "thumbs up"
    assert base_name("clapping hands: medium skin tone") == "clapping hands"
    assert normalize_name("  Hand  with Fingers-Splayed ") == "hand with fingerssplayed"
