"""Unit tests for the file-backed artifact store."""

import json
from datetime import date

import pytest

from emoji_console.contracts.emoji import ManualAssignment, SetMapEntry, SetMapReport
from emoji_console.core.errors import ParseError, PreconditionError
from emoji_console.core import storage
from emoji_console.core.storage import ArtifactStore, is_manual_key


def test_table_round_trips_through_disk(store: ArtifactStore, sample_table) -> None:
    path = store.save_table(sample_table)

    assert path == store.public_root / "dev" / "emoji" / "emoji-base.json"
    raw = json.loads(path.read_text(encoding="utf-8"))
    # unset fields are omitted and characters are written unescaped
    assert raw["1F600"]["unicode"] == "😀"
    assert "gemoji" not in raw["1F600"]
    assert "😀" in path.read_text(encoding="utf-8")
    assert store.load_table() == sample_table
    assert not path.with_suffix(".json.tmp").exists()


def test_missing_table(store: ArtifactStore) -> None:
    with pytest.raises(PreconditionError) as exc:
        store.load_table()
    assert exc.value.code == "MISSING_EMOJI_BASE"


def test_corrupt_table(store: ArtifactStore) -> None:
    store.base_path.parent.mkdir(parents=True)
    store.base_path.write_text("{", encoding="utf-8")
    with pytest.raises(ParseError):
        store.load_table()


def test_set_map_uses_camel_case_aliases(store: ArtifactStore) -> None:
    report = SetMapReport(
        missing_files=["1F600 (expected: 1F600.svg)"],
        manual_assignments=[ManualAssignment(key="manual1", file="Zebra")],
    )
    store.save_set_map(
        "openmoji", {"1F44D": SetMapEntry(asset_path="/emoji/openmoji/1F44D.svg")}, report
    )

    raw_map = json.loads(store.set_map_path("openmoji").read_text(encoding="utf-8"))
    raw_report = json.loads(store.report_path("openmoji").read_text(encoding="utf-8"))
    assert raw_map == {"1F44D": {"assetPath": "/emoji/openmoji/1F44D.svg"}}
    assert raw_report == {
        "missingFiles": ["1F600 (expected: 1F600.svg)"],
        "unusedFiles": [],
        "manualAssignments": [{"key": "manual1", "file": "Zebra"}],
    }
    assert store.load_set_map("openmoji")["1F44D"].asset_path == "/emoji/openmoji/1F44D.svg"
    assert store.load_set_map("twemoji") is None


def test_set_map_status(store: ArtifactStore) -> None:
    assert store.set_map_status("sensamoji").exists is False

    store.save_set_map(
        "sensamoji",
        {
            "1F44F": SetMapEntry(asset_path="/emoji/sensamoji/Clapping hands.svg"),
            "manual1": SetMapEntry(asset_path="/emoji/sensamoji/Zebra.svg"),
        },
        SetMapReport(),
    )
    status = store.set_map_status("sensamoji")

    assert status.exists is True
    assert status.size == 2
    assert status.manual_count == 1
    assert date.fromisoformat(status.date)


def test_manual_key_pattern() -> None:
    assert is_manual_key("manual12")
    assert not is_manual_key("manual")
    assert not is_manual_key("1F600")


def test_failed_map_write_leaves_old_report(store: ArtifactStore, monkeypatch) -> None:
    store.save_set_map("openmoji", {}, SetMapReport(unused_files=["old.svg"]))
    real_write = storage.write_json_atomic

    def _fail_on_map(path, payload):
        if path == store.set_map_path("openmoji"):
            raise OSError("disk full")
        real_write(path, payload)

    monkeypatch.setattr(storage, "write_json_atomic", _fail_on_map)

    with pytest.raises(OSError):
        store.save_set_map("openmoji", {}, SetMapReport(unused_files=["new.svg"]))

    report = json.loads(store.report_path("openmoji").read_text(encoding="utf-8"))
    assert report["unusedFiles"] == ["old.svg"]
