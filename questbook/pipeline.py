"""End-to-end runs: canonicalize + rewrite DefaultQuests.json, then split it."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from questbook.canonical import canonicalize
from questbook.document import Document, load_document, reset_edit_mode, save_document
from questbook.lang import LangStore, extract_lang_codes, save_lang_tables
from questbook.models import validate_document
from questbook.rebuild import rebuild_document
from questbook.splitter import split_quests
from questbook.tails import connect_tails
from shared.runtime_settings import SplitSettings

logger = logging.getLogger(__name__)


@dataclass
class PipelineReport:
    quests_path: Path
    lang_changes: int = 0
    lang_files: list[Path] = field(default_factory=list)
    relinked: list[int] = field(default_factory=list)
    files_written: int = 0


def load_canonical(path: Path) -> Document:
    """Load, shape-check and key-sort the source document."""
    document = load_document(path)
    validate_document(document)
    logger.info("Sorting quests in %s", path)
    return canonicalize(document)


def apply_lang(document: Document, store: LangStore, report: PipelineReport) -> None:
    result = extract_lang_codes(document, store)
    report.lang_changes = result.changes
    report.lang_files = save_lang_tables(store, result)


def run_split(settings: SplitSettings) -> PipelineReport:
    """The full ``split`` run.

    With ``settings.change`` the edit mode flag is reset, lang codes are
    applied and tail quests relinked before the document is written back;
    the split always works from the written document.
    """
    quests_path = Path(settings.quests)
    document = load_canonical(quests_path)
    store = LangStore(Path(settings.lang_path), settings.lang_prefix)
    report = PipelineReport(quests_path=quests_path)

    if settings.change:
        logger.info("Changing edit mode to 0")
        reset_edit_mode(document)
        apply_lang(document, store, report)
        logger.info("Connecting tail quests to %s", settings.complete)
        report.relinked = connect_tails(document, settings.complete, store.resolve)

    save_document(quests_path, document)
    report.files_written = split_quests(document, Path(settings.output), store.resolve)
    return report


def run_lang(settings: SplitSettings) -> PipelineReport:
    """Only externalize text: rewrite the document and the lang tables."""
    quests_path = Path(settings.quests)
    document = load_canonical(quests_path)
    store = LangStore(Path(settings.lang_path), settings.lang_prefix)
    report = PipelineReport(quests_path=quests_path)
    apply_lang(document, store, report)
    save_document(quests_path, document)
    return report


def run_merge(split_dir: Path, quests_path: Path) -> Document:
    """Rebuild the document from ``split_dir`` and write it to ``quests_path``."""
    document = rebuild_document(split_dir)
    validate_document(document)
    quests_path.parent.mkdir(parents=True, exist_ok=True)
    save_document(quests_path, document)
    return document
