"""Pydantic models for the parts of DefaultQuests.json this tool reads or rewrites.

Only the fields the pipeline touches are declared; everything else in a
quest or chapter (tasks, rewards, icons, layout) passes through untouched
via ``extra="allow"``.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, field_validator

_ENTRY_KEY = re.compile(r"^\d+:10$")


class DocumentShapeError(ValueError):
    """The loaded document does not have the DefaultQuests layout."""


def _check_entry_keys(v: Dict[str, Any], what: str) -> Dict[str, Any]:
    bad = [k for k in v if not _ENTRY_KEY.match(k)]
    if bad:
        raise ValueError(f"{what} keys must look like '<index>:10', got {bad[:3]}")
    return v


class BetterQuestingProps(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: StrictStr = Field(alias="name:8")
    desc: StrictStr = Field(alias="desc:8")


class PropertiesBlock(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    betterquesting: BetterQuestingProps = Field(alias="betterquesting:10")


class QuestModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    quest_id: StrictInt = Field(alias="questID:3")
    prerequisites: List[StrictInt] = Field(default_factory=list, alias="preRequisites:11")
    properties: PropertiesBlock = Field(alias="properties:10")


class QuestLineEntryModel(BaseModel):
    """One quest placed on a chapter page; layout fields are kept as extras."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: StrictInt = Field(alias="id:3")


class QuestLineModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    line_id: StrictInt = Field(alias="lineID:3")
    properties: PropertiesBlock = Field(alias="properties:10")
    quests: Dict[str, QuestLineEntryModel] = Field(default_factory=dict, alias="quests:9")

    @field_validator("quests")
    @classmethod
    def _entry_keys(cls, v: Dict[str, QuestLineEntryModel]) -> Dict[str, QuestLineEntryModel]:
        return _check_entry_keys(v, "quests:9")


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    quest_settings: Dict[str, Any] = Field(default_factory=dict, alias="questSettings:10")
    quest_database: Dict[str, QuestModel] = Field(alias="questDatabase:9")
    quest_lines: Dict[str, QuestLineModel] = Field(alias="questLines:9")

    @field_validator("quest_database")
    @classmethod
    def _database_keys(cls, v: Dict[str, QuestModel]) -> Dict[str, QuestModel]:
        return _check_entry_keys(v, "questDatabase:9")

    @field_validator("quest_lines")
    @classmethod
    def _line_keys(cls, v: Dict[str, QuestLineModel]) -> Dict[str, QuestLineModel]:
        return _check_entry_keys(v, "questLines:9")


def validate_document(document: Any) -> DocumentModel:
    """Check the raw document against the schema and its cross references.

    Raises DocumentShapeError on the first problem; the raw dict is not modified.
    """
    if not isinstance(document, dict):
        raise DocumentShapeError(f"Document root must be an object, got {type(document).__name__}")
    try:
        model = DocumentModel.model_validate(document)
    except ValidationError as e:
        raise DocumentShapeError(str(e)) from e

    seen: set[int] = set()
    for key, quest in model.quest_database.items():
        if quest.quest_id in seen:
            raise DocumentShapeError(f"Duplicate questID:3 {quest.quest_id} at questDatabase:9/{key}")
        seen.add(quest.quest_id)

    for line_key, line in model.quest_lines.items():
        for entry_key, entry in line.quests.items():
            if entry.id not in seen:
                raise DocumentShapeError(
                    f"questLines:9/{line_key}/quests:9/{entry_key} references unknown quest {entry.id}"
                )
    return model
