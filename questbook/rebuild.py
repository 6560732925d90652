"""Reassemble a DefaultQuests document from a split tree (inverse of ``questbook.splitter``)."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from questbook.canonical import canonicalize, natural_key
from questbook.document import ENTRY_ID, LINE_QUESTS, QUEST_DATABASE, QUEST_ID, QUEST_LINES, Document
from questbook.splitter import CHAPTERS_DIR, PROPS_NAME

logger = logging.getLogger(__name__)


class SplitTreeError(ValueError):
    """The split tree is missing index files or is inconsistent."""


def _load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _props_path(folder: Path) -> Path:
    return folder / f"{PROPS_NAME}.json"


def _in_entry_order(found: list[tuple[str, dict[str, Any]]]) -> list[dict[str, Any]]:
    """Layouts of one quest placed several times in a chapter, in page order.

    Later placements got `` _0``, `` _1``... appended to the name, so the natural
    order of the file names is the page order.
    """
    return [pos for _, pos in sorted(found, key=lambda f: natural_key(f[0]))]


def rebuild_document(split_dir: Path) -> Document:
    """Read a split tree back into one canonical document.

    Entries go back under the keys recorded by the ``_IDs`` arrays; quests that
    only appear in the global index (never placed in a chapter) have no file and
    are dropped with a warning.
    """
    split_dir = Path(split_dir)
    global_props = _props_path(split_dir)
    if not global_props.exists():
        raise SplitTreeError(f"{global_props} not found; is {split_dir} a split quest tree?")
    root = _load_json(global_props)

    quests: dict[int, dict[str, Any]] = {}
    chapters: dict[str, dict[str, Any]] = {}
    chapters_dir = split_dir / CHAPTERS_DIR
    folders = sorted(p for p in chapters_dir.iterdir() if p.is_dir()) if chapters_dir.is_dir() else []

    for folder in folders:
        props_path = _props_path(folder)
        if not props_path.exists():
            raise SplitTreeError(f"Chapter folder {folder} has no {PROPS_NAME}.json")
        props = _load_json(props_path)

        files: dict[int, list[tuple[str, dict[str, Any]]]] = {}
        for quest_file in sorted(folder.glob("*.json")):
            if quest_file == props_path:
                continue
            record = _load_json(quest_file)
            data = record["_data"]
            qid = data[QUEST_ID]
            quests[qid] = data
            files.setdefault(qid, []).append((quest_file.stem, record.get("_pos") or {}))
        layout = {qid: iter(_in_entry_order(found)) for qid, found in files.items()}

        entries: dict[str, dict[str, Any]] = {}
        for line_index, qid in enumerate(props["_IDs"]):
            if qid is None:
                continue
            pos = next(layout.get(qid, iter(())), None)
            if pos is None:
                raise SplitTreeError(f"{props_path} lists quest {qid} but no quest file in {folder} has it")
            entries[f"{line_index}:10"] = {**pos, ENTRY_ID: qid}

        index = props["_index"]
        if index in chapters:
            raise SplitTreeError(f"Chapter index {index} appears twice (second: {folder})")
        chapters[index] = {**props["_data"], LINE_QUESTS: entries}

    database: dict[str, dict[str, Any]] = {}
    for db_index, qid in enumerate(root["_IDs"]):
        if qid is None:
            continue
        if qid not in quests:
            logger.warning("Quest %s is not placed in any chapter; it has no file and is dropped", qid)
            continue
        database[f"{db_index}:10"] = quests[qid]

    document = {**root["_data"], QUEST_DATABASE: database, QUEST_LINES: chapters}
    logger.info("Rebuilt %d quests in %d chapters from %s", len(database), len(chapters), split_dir)
    return canonicalize(document)
