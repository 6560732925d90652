"""Tests for relinking "complete this chapter" quests to chapter tails."""
from __future__ import annotations

from questbook.lang import LangStore, extract_lang_codes
from questbook.tails import chapter_tails, connect_tails, find_chapter

SENTINEL = "[Complete This Chapter]"


def _prereqs(doc, qid):
    for q in doc["questDatabase:9"].values():
        if q["questID:3"] == qid:
            return q["preRequisites:11"]
    raise KeyError(qid)


def test_sample_chapter_tails(sample_document) -> None:
    relinked = connect_tails(sample_document, SENTINEL)
    assert relinked == [4]
    # 1 is required by 2 and 3; 5 is the trophy quest
    assert _prereqs(sample_document, 4) == [2, 3]


def test_leaves_exclude_depended_quests_and_trophy(make_quest, make_chapter, make_document) -> None:
    a, b, c, s, t = 10, 11, 12, 13, 14
    quests = [
        make_quest(c, "Base"),
        make_quest(a, "Alpha", prereqs=[c]),
        make_quest(b, "Beta", prereqs=[c]),
        make_quest(s, SENTINEL, prereqs=[c]),
        make_quest(t, "The chapter is complete!"),
    ]
    doc = make_document(quests, [make_chapter(0, "Main", [s, b, c, a, t])])
    connect_tails(doc, SENTINEL)
    assert sorted(_prereqs(doc, s)) == [a, b]


def test_result_does_not_depend_on_page_order(make_quest, make_chapter, make_document) -> None:
    def build(order):
        quests = [
            make_quest(1, "A"),
            make_quest(2, "B"),
            make_quest(3, "C", prereqs=[1]),
            make_quest(4, SENTINEL),
        ]
        return make_document(quests, [make_chapter(0, "Main", order)])

    first, second = build([1, 2, 3, 4]), build([4, 3, 2, 1])
    connect_tails(first, SENTINEL)
    connect_tails(second, SENTINEL)
    assert sorted(_prereqs(first, 4)) == sorted(_prereqs(second, 4)) == [2, 3]


def test_sentinel_outside_chapters_loses_prerequisites(make_quest, make_chapter, make_document, caplog) -> None:
    quests = [make_quest(1, "A"), make_quest(2, SENTINEL, prereqs=[1])]
    doc = make_document(quests, [make_chapter(0, "Main", [1])])
    with caplog.at_level("WARNING"):
        assert connect_tails(doc, SENTINEL) == []
    assert _prereqs(doc, 2) == []
    assert _prereqs(doc, 1) == []
    assert "not placed in any chapter" in caplog.text


def test_dependents_in_other_chapters_count(make_quest, make_chapter, make_document) -> None:
    quests = [
        make_quest(1, "A"),
        make_quest(2, "B"),
        make_quest(3, SENTINEL),
        make_quest(4, "Next chapter start", prereqs=[1]),
    ]
    doc = make_document(quests, [make_chapter(0, "One", [1, 2, 3]), make_chapter(1, "Two", [4])])
    connect_tails(doc, SENTINEL)
    assert _prereqs(doc, 3) == [2]


def test_sentinel_resolved_through_lang_codes(tmp_path, sample_document) -> None:
    store = LangStore(tmp_path / "lang")
    extract_lang_codes(sample_document, store)
    assert connect_tails(sample_document, SENTINEL, store.resolve) == [4]
    assert _prereqs(sample_document, 4) == [2, 3]


def test_find_chapter_and_tails_helpers(sample_document) -> None:
    chapter = find_chapter(sample_document, 6)
    assert chapter["lineID:3"] == 1
    assert find_chapter(sample_document, 404) is None
    assert chapter_tails(sample_document, chapter, sentinel_id=-1, resolve=lambda s: s) == [6]
