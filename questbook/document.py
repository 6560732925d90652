"""Loading, saving and navigating a DefaultQuests.json document."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

from questbook.tags import dumps_document, entry_index

logger = logging.getLogger(__name__)

QUEST_DATABASE = "questDatabase:9"
QUEST_LINES = "questLines:9"
QUEST_SETTINGS = "questSettings:10"
BQ_PROPS = "betterquesting:10"
PROPERTIES = "properties:10"
QUEST_ID = "questID:3"
LINE_ID = "lineID:3"
PREREQUISITES = "preRequisites:11"
LINE_QUESTS = "quests:9"
ENTRY_ID = "id:3"
EDIT_MODE = "editmode:1"

Document = dict[str, Any]


class DocumentNotFoundError(FileNotFoundError):
    """The DefaultQuests.json path does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"File \"{path}\" couldn't be found. Specify it with the --quests option")
        self.path = path


def load_document(path: Path) -> Document:
    if not path.exists():
        raise DocumentNotFoundError(path)
    logger.info("Loading %s", path)
    return json.loads(path.read_text(encoding="utf-8"))


def save_document(path: Path, document: Document) -> Path:
    """Write the document back with literal-faithful number and string formatting."""
    logger.info("Saving %s", path)
    path.write_text(dumps_document(document), encoding="utf-8")
    return path


def bq_props(obj: dict[str, Any]) -> dict[str, Any]:
    """The ``properties:10/betterquesting:10`` block of a quest or chapter."""
    return obj[PROPERTIES][BQ_PROPS]


def display_name(obj: dict[str, Any]) -> str:
    return bq_props(obj)["name:8"]


def iter_quests(document: Document) -> Iterator[dict[str, Any]]:
    yield from document[QUEST_DATABASE].values()


def iter_chapters(document: Document) -> Iterator[dict[str, Any]]:
    yield from document[QUEST_LINES].values()


def prerequisites(quest: dict[str, Any]) -> list[int]:
    return quest.get(PREREQUISITES, [])


def quest_index(document: Document) -> dict[int, dict[str, Any]]:
    """Map questID -> quest object (same objects as in the document)."""
    return {q[QUEST_ID]: q for q in iter_quests(document)}


def positions(entries: dict[str, dict[str, Any]], id_key: str) -> list[int | None]:
    """Array mapping entry index -> id; indexes missing from the map are ``None``."""
    out: list[int | None] = []
    for key, entry in entries.items():
        i = entry_index(key)
        if i >= len(out):
            out.extend([None] * (i + 1 - len(out)))
        out[i] = entry[id_key]
    return out


def reset_edit_mode(document: Document) -> None:
    """Turn off the in-game editor flag so players don't ship in edit mode."""
    settings = document[QUEST_SETTINGS][BQ_PROPS]
    settings[EDIT_MODE] = 0
