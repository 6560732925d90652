"""Rewire "complete this chapter" quests to the current tail quests of their chapter."""
from __future__ import annotations

import logging
from typing import Callable

from questbook.document import (
    ENTRY_ID,
    LINE_QUESTS,
    PREREQUISITES,
    QUEST_ID,
    Document,
    display_name,
    iter_chapters,
    prerequisites,
    quest_index,
)
from shared.config import CHAPTER_COMPLETE_TEXT

logger = logging.getLogger(__name__)


def find_chapter(document: Document, quest_id: int) -> dict | None:
    """First chapter whose page lists ``quest_id``.

    A quest placed in several chapters only ever resolves to the first one.
    """
    for chapter in iter_chapters(document):
        if any(entry[ENTRY_ID] == quest_id for entry in chapter[LINE_QUESTS].values()):
            return chapter
    return None


def chapter_tails(
    document: Document,
    chapter: dict,
    sentinel_id: int,
    resolve: Callable[[str], str],
) -> list[int]:
    """Quests of ``chapter`` that nothing depends on, in page order.

    The sentinel's own prerequisites are ignored (they are about to be
    replaced), the sentinel is never its own tail, and trophy quests named
    "The chapter is complete!" are skipped.
    """
    quests = quest_index(document)
    depended_on: set[int] = set()
    for qid, quest in quests.items():
        if qid == sentinel_id:
            continue
        depended_on.update(prerequisites(quest))

    tails: list[int] = []
    for entry in chapter[LINE_QUESTS].values():
        qid = entry[ENTRY_ID]
        if qid == sentinel_id or qid in depended_on:
            continue
        if resolve(display_name(quests[qid])) == CHAPTER_COMPLETE_TEXT:
            continue
        tails.append(qid)
    return tails


def connect_tails(document: Document, sentinel: str, resolve: Callable[[str], str] = lambda s: s) -> list[int]:
    """Set the prerequisites of every quest named ``sentinel`` to its chapter's tails.

    Returns the ids of the relinked quests. Sentinels outside any chapter end up
    with no prerequisites.
    """
    relinked: list[int] = []
    for quest in list(quest_index(document).values()):
        if resolve(display_name(quest)) != sentinel:
            continue
        qid = quest[QUEST_ID]
        quest[PREREQUISITES] = []
        chapter = find_chapter(document, qid)
        if chapter is None:
            logger.warning("Quest %s (%s) is not placed in any chapter; prerequisites cleared", qid, sentinel)
            continue
        tails = chapter_tails(document, chapter, qid, resolve)
        quest[PREREQUISITES] = tails
        logger.debug("Quest %s now requires %s", qid, tails)
        relinked.append(qid)
    return relinked
