"""Split a canonical DefaultQuests document into one JSON file per quest.

Layout under the output root::

    _props.json                      global settings + questDatabase index -> questID
    Chapters/<chapter>/_props.json   chapter data, its questLines index, page index -> questID
    Chapters/<chapter>/<quest>.json  {"_pos": page layout entry, "_data": quest}

The ``_index``/``_IDs`` fields are what ``questbook.rebuild`` uses to put every
entry back under its original key.
"""
from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Callable

from questbook.document import (
    ENTRY_ID,
    LINE_QUESTS,
    QUEST_DATABASE,
    QUEST_ID,
    QUEST_LINES,
    Document,
    display_name,
    positions,
    quest_index,
)
from questbook.naming import UniqueNameGenerator

logger = logging.getLogger(__name__)

PROPS_NAME = "_props"
CHAPTERS_DIR = "Chapters"


class _SplitWriter:
    def __init__(self, root: Path):
        self.root = root
        self.count = 0

    def save(self, rel_path: str, payload: Any) -> Path:
        path = self.root / f"{rel_path}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        self.count += 1
        return path


def clear_output(output_dir: Path) -> None:
    """Remove a previous split; a missing directory is fine."""
    try:
        shutil.rmtree(output_dir)
    except FileNotFoundError:
        pass


def split_quests(
    document: Document,
    output_dir: Path,
    resolve: Callable[[str], str] = lambda s: s,
) -> int:
    """Write the split tree for ``document`` and return the number of files written.

    The document is not modified. Everything previously under ``output_dir``
    is deleted first.
    """
    output_dir = Path(output_dir)
    logger.info("Removing previous split at %s", output_dir)
    clear_output(output_dir)
    writer = _SplitWriter(output_dir)

    database = document[QUEST_DATABASE]
    quests = quest_index(document)
    globals_ = {k: v for k, v in document.items() if k not in (QUEST_DATABASE, QUEST_LINES)}
    writer.save(PROPS_NAME, {"_data": globals_, "_IDs": positions(database, QUEST_ID)})

    chapters = document[QUEST_LINES]
    logger.info("Creating %d chapters", len(chapters))

    chapter_names = UniqueNameGenerator(resolve)
    for index, chapter in chapters.items():
        folder = f"{CHAPTERS_DIR}/{chapter_names(display_name(chapter))}"
        entries = chapter[LINE_QUESTS]
        quest_names = UniqueNameGenerator(resolve, reserved=(PROPS_NAME,))

        for entry in entries.values():
            qid = entry[ENTRY_ID]
            quest = quests[qid]
            pos = {k: v for k, v in entry.items() if k != ENTRY_ID}
            writer.save(f"{folder}/{quest_names(display_name(quest))}", {"_pos": pos, "_data": quest})

        chapter_data = {k: v for k, v in chapter.items() if k != LINE_QUESTS}
        writer.save(
            f"{folder}/{PROPS_NAME}",
            {"_index": index, "_data": chapter_data, "_IDs": positions(entries, ENTRY_ID)},
        )
        logger.debug("Chapter %s: %d quests -> %s", index, len(entries), folder)

    logger.info("%d .json files created in %s", writer.count, output_dir)
    return writer.count
