"""Replace inline quest/chapter text with lang codes and maintain the .lang tables.

A ``.lang`` file is one ``key=value`` pair per line; newlines inside values
are written as ``%n``. Keys generated here look like ``bq.quest12.name``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from questbook.canonical import natural_key
from questbook.document import LINE_ID, QUEST_ID, Document, bq_props, iter_chapters, iter_quests
from shared.config import PRIMARY_LOCALE

logger = logging.getLogger(__name__)

UNDEFINED_LANG_CODE = "[undefined lang code]"
TEXT_FIELDS = ("name", "desc")

_LANG_CODE = re.compile(r"(\w+\.)+\w+", re.ASCII)

LangTable = dict[str, str]


def is_lang_code(text: str) -> bool:
    return _LANG_CODE.fullmatch(text) is not None


def parse_lang(text: str) -> LangTable:
    """Parse ``key=value`` lines; lines without ``=`` are ignored."""
    table: LangTable = {}
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        table[key] = value
    return table


def lang_sort_key(key: str) -> tuple:
    """Order by entity root (``quest12``) naturally, ``desc`` before ``name``.

    The root and field are the last two segments, so dotted prefixes sort the same.
    """
    parts = key.split(".")
    root = parts[-2] if len(parts) > 1 else ""
    leaf = parts[-1] if len(parts) > 1 else ""
    return natural_key(root), natural_key(leaf)


def format_lang(table: LangTable) -> str:
    lines = []
    for key in sorted(table, key=lang_sort_key):
        value = table[key].replace("\n", "%n")
        lines.append(f"{key}={value}")
    return "\n".join(lines)


class LangStore:
    """Lang tables of one run, loaded lazily per locale and shared by reference.

    Every pass of a run (extraction, tail relinking, file naming) must use the
    same store so that codes created by extraction resolve afterwards.
    """

    def __init__(self, lang_path: Path, prefix: str = "bq", primary: str = PRIMARY_LOCALE):
        self.lang_path = Path(lang_path)
        self.prefix = prefix
        self.primary = primary
        self._tables: dict[str, LangTable] = {}

    def lang_file(self, locale: str) -> Path:
        return self.lang_path / f"{locale}.lang"

    def discover_locales(self) -> list[str]:
        """Locale codes of the ``*.lang`` files present, or the primary locale if none."""
        codes = sorted(p.stem for p in self.lang_path.glob("*.lang")) if self.lang_path.is_dir() else []
        if not codes:
            logger.info("No .lang files found in %s. Using %s as default", self.lang_path, self.primary)
            codes = [self.primary]
        return codes

    def table(self, locale: str) -> LangTable:
        if locale not in self._tables:
            path = self.lang_file(locale)
            if path.exists():
                self._tables[locale] = parse_lang(path.read_text(encoding="utf-8"))
                logger.debug("Loaded %d lang entries from %s", len(self._tables[locale]), path)
            else:
                self._tables[locale] = {}
        return self._tables[locale]

    def resolve(self, text: str) -> str:
        """Display text of ``text`` in the primary locale; plain text is returned unchanged."""
        if not is_lang_code(text):
            return text
        return self.table(self.primary).get(text, text)


@dataclass
class ExtractionResult:
    document: Document
    tables: dict[str, LangTable]
    used: set[str] = field(default_factory=set)
    changes: int = 0

    def pruned_tables(self) -> dict[str, LangTable]:
        """Per-locale tables restricted to used keys, in file order."""
        out: dict[str, LangTable] = {}
        for locale, table in self.tables.items():
            keys = sorted((k for k in table if k in self.used), key=lang_sort_key)
            out[locale] = {k: table[k] for k in keys}
        return out


def extract_lang_codes(document: Document, store: LangStore, locales: list[str] | None = None) -> ExtractionResult:
    """Move quest and chapter names/descriptions into the lang tables.

    Mutates ``document`` in place. Text that already is a lang code is kept;
    everything else is replaced by ``<prefix>.quest<ID>.<field>`` (or
    ``chapter<ID>``) and its text stored under that key in every locale.
    """
    codes = locales or store.discover_locales()
    result = ExtractionResult(document=document, tables={c: store.table(c) for c in codes})
    tables = list(result.tables.values())

    def check_and_add(obj: dict, lang_root: str, field_name: str) -> None:
        props = bq_props(obj)
        bq_key = f"{field_name}:8"
        text = props[bq_key]

        if is_lang_code(text):
            defined = [t[text] for t in tables if text in t]
            if not defined:
                logger.warning("Lang code %s is not defined in any locale", text)
                fallback = UNDEFINED_LANG_CODE
            else:
                fallback = defined[0]
            for t in tables:
                t.setdefault(text, fallback)
            result.used.add(text)
            return

        lang_code = f"{store.prefix}.{lang_root}.{field_name}"
        for t in tables:
            t[lang_code] = text
        result.used.add(lang_code)
        if text != lang_code:
            result.changes += 1
        props[bq_key] = lang_code

    for quest in iter_quests(document):
        for name in TEXT_FIELDS:
            check_and_add(quest, f"quest{quest[QUEST_ID]}", name)

    for chapter in iter_chapters(document):
        for name in TEXT_FIELDS:
            check_and_add(chapter, f"chapter{chapter[LINE_ID]}", name)

    logger.info("Lang codes applied: %d change(s), %d key(s) in use", result.changes, len(result.used))
    return result


def save_lang_tables(store: LangStore, result: ExtractionResult) -> list[Path]:
    """Write every locale's table, keeping only the keys the document uses."""
    written: list[Path] = []
    for locale, table in result.pruned_tables().items():
        path = store.lang_file(locale)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(format_lang(table), encoding="utf-8")
        written.append(path)
    return written
