"""Pytest fixtures: small DefaultQuests documents shaped like a BetterQuesting export."""
from __future__ import annotations

from typing import Any, Callable

import pytest


def _quest(qid: int, name: str, prereqs: list[int] | tuple[int, ...] = (), desc: str = "") -> dict[str, Any]:
    return {
        "preRequisites:11": list(prereqs),
        "properties:10": {
            "betterquesting:10": {
                "autoclaim:1": 0,
                "desc:8": desc or f"About {name}",
                "icon:10": {"Count:3": 1, "Damage:2": 0, "id:8": "minecraft:book"},
                "isMain:1": 0,
                "name:8": name,
                "repeatTime:3": -1,
            }
        },
        "questID:3": qid,
        "rewards:9": {},
        "tasks:9": {"0:10": {"index:3": 0, "taskID:8": "bq_standard:checkbox"}},
    }


def _chapter(line_id: int, name: str, quest_ids: list[int], desc: str = "") -> dict[str, Any]:
    return {
        "lineID:3": line_id,
        "properties:10": {
            "betterquesting:10": {
                "bg_image:8": "",
                "bg_size:3": 256,
                "desc:8": desc or f"Chapter {name}",
                "name:8": name,
                "visibility:8": "NORMAL",
            }
        },
        "quests:9": {
            f"{i}:10": {"id:3": qid, "sizeX:3": 24, "sizeY:3": 24, "x:3": i * 32, "y:3": 0}
            for i, qid in enumerate(quest_ids)
        },
    }


def _document(quests: list[dict[str, Any]], chapters: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "format:8": "2.0.0",
        "questDatabase:9": {f"{i}:10": q for i, q in enumerate(quests)},
        "questLines:9": {f"{i}:10": c for i, c in enumerate(chapters)},
        "questSettings:10": {
            "betterquesting:10": {
                "editmode:1": 1,
                "hardcore:1": 0,
                "home_image:8": "",
                "version:8": "3.0.0",
            }
        },
    }


@pytest.fixture
def make_quest() -> Callable[..., dict[str, Any]]:
    return _quest


@pytest.fixture
def make_chapter() -> Callable[..., dict[str, Any]]:
    return _chapter


@pytest.fixture
def make_document() -> Callable[..., dict[str, Any]]:
    return _document


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """Two chapters; chapter 0 has a sentinel (4) and a trophy quest (5)."""
    quests = [
        _quest(1, "Iron Ingot"),
        _quest(2, "Iron Ingot", prereqs=[1]),
        _quest(3, "Gears", prereqs=[1]),
        _quest(4, "[Complete This Chapter]", prereqs=[2]),
        _quest(5, "The chapter is complete!", prereqs=[4]),
        _quest(6, "Steel"),
    ]
    chapters = [
        _chapter(0, "§6Basics", [1, 2, 3, 4, 5]),
        _chapter(1, "Steel: Age", [6]),
    ]
    return _document(quests, chapters)
