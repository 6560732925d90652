"""End-to-end tests for the split / lang / merge runs."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from questbook.document import DocumentNotFoundError
from questbook.lang import parse_lang
from questbook.pipeline import run_lang, run_merge, run_split
from questbook.tags import dumps_document
from shared.runtime_settings import SplitSettings


def _settings(tmp_path, **kw) -> SplitSettings:
    values = {
        "quests": str(tmp_path / "config" / "DefaultQuests.json"),
        "output": str(tmp_path / "betterquesting"),
        "lang_path": str(tmp_path / "lang"),
    }
    values.update(kw)
    return SplitSettings(**values)


def _write_doc(settings: SplitSettings, document) -> None:
    path = Path(settings.quests)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


def test_full_split_run(tmp_path, sample_document) -> None:
    settings = _settings(tmp_path)
    sample_document["questDatabase:9"]["0:10"]["properties:10"]["betterquesting:10"]["weight:5"] = 2
    _write_doc(settings, sample_document)

    report = run_split(settings)

    assert report.files_written == 9
    assert report.lang_changes == 16
    assert report.relinked == [4]

    text = (tmp_path / "config" / "DefaultQuests.json").read_text(encoding="utf-8")
    saved = json.loads(text)
    assert text == dumps_document(saved)
    assert '"weight:5": 2.0' in text
    assert saved["questSettings:10"]["betterquesting:10"]["editmode:1"] == 0
    quest4 = saved["questDatabase:9"]["3:10"]
    assert quest4["properties:10"]["betterquesting:10"]["name:8"] == "bq.quest4.name"
    assert quest4["preRequisites:11"] == [2, 3]

    en = parse_lang((tmp_path / "lang" / "en_us.lang").read_text(encoding="utf-8"))
    assert en["bq.quest4.name"] == "[Complete This Chapter]"
    # files are still named after the display text
    assert (tmp_path / "betterquesting" / "Chapters" / "Basics" / "Gears.json").exists()


def test_second_run_is_stable(tmp_path, sample_document) -> None:
    settings = _settings(tmp_path)
    _write_doc(settings, sample_document)
    run_split(settings)
    first = (tmp_path / "config" / "DefaultQuests.json").read_text(encoding="utf-8")

    report = run_split(settings)
    assert report.lang_changes == 0
    assert (tmp_path / "config" / "DefaultQuests.json").read_text(encoding="utf-8") == first


def test_no_change_only_sorts_and_splits(tmp_path, sample_document) -> None:
    settings = _settings(tmp_path, change=False)
    _write_doc(settings, sample_document)

    report = run_split(settings)
    assert report.files_written == 9
    assert report.lang_files == []

    saved = json.loads((tmp_path / "config" / "DefaultQuests.json").read_text(encoding="utf-8"))
    assert saved["questSettings:10"]["betterquesting:10"]["editmode:1"] == 1
    assert saved["questDatabase:9"]["0:10"]["properties:10"]["betterquesting:10"]["name:8"] == "Iron Ingot"
    assert list(saved) == ["format:8", "questDatabase:9", "questLines:9", "questSettings:10"]
    assert not (tmp_path / "lang").exists()


def test_missing_document(tmp_path) -> None:
    with pytest.raises(DocumentNotFoundError, match="--quests"):
        run_split(_settings(tmp_path))
    assert not (tmp_path / "betterquesting").exists()


def test_lang_run(tmp_path, sample_document) -> None:
    settings = _settings(tmp_path)
    _write_doc(settings, sample_document)
    assert run_lang(settings).lang_changes == 16
    assert run_lang(settings).lang_changes == 0
    assert not (tmp_path / "betterquesting").exists()


def test_merge_restores_saved_document(tmp_path, sample_document) -> None:
    settings = _settings(tmp_path)
    _write_doc(settings, sample_document)
    run_split(settings)
    original = (tmp_path / "config" / "DefaultQuests.json").read_text(encoding="utf-8")

    target = tmp_path / "merged" / "DefaultQuests.json"
    run_merge(tmp_path / "betterquesting", target)
    assert target.read_text(encoding="utf-8") == original
