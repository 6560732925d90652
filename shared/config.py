"""Shared configuration constants used by the CLI and the questbook pipeline."""
from __future__ import annotations

import os


def _env_flag(name: str, default: bool = False) -> bool:
    """Read boolean env flag."""
    val = os.environ.get(name, "").strip().lower()
    if not val:
        return default
    return val in ("1", "true", "yes", "on")


# Source document written by the BetterQuesting editor (relative to the instance root)
QUESTS_PATH = os.environ.get("BQ_QUESTS_PATH", "config/betterquesting/DefaultQuests.json")

# Quest name marking the "complete this chapter" quest that gets rewired to the chapter tails
COMPLETE_TEXT = os.environ.get("BQ_COMPLETE_TEXT", "[Complete This Chapter]")

# Root of the split tree
OUTPUT_DIR = os.environ.get("BQ_OUTPUT_DIR", "betterquesting")

# When false only the split runs: no edit mode reset, lang codes or tail relinking
CHANGE = _env_flag("BQ_CHANGE", default=True)

# Lang tables: <LANG_PATH>/<locale>.lang, keys <LANG_PREFIX>.quest<ID>.name
LANG_PATH = os.environ.get("BQ_LANG_PATH", "resources/betterquesting/lang/")
LANG_PREFIX = os.environ.get("BQ_LANG_PREFIX", "bq")

# Locale used to resolve lang codes back to display text (file names, sentinel matching)
PRIMARY_LOCALE = "en_us"

# Quests with this resolved name are never used as chapter tails
CHAPTER_COMPLETE_TEXT = "The chapter is complete!"
