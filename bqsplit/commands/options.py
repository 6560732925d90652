"""Flags shared by the commands that read DefaultQuests.json."""
from __future__ import annotations

from pathlib import Path

from shared import config
from shared.runtime_settings import SplitSettings, load_split_settings


def add_document_arguments(p) -> None:
    p.add_argument("--quests", type=str, default=None, help=f"Path to DefaultQuests.json (default: {config.QUESTS_PATH})")
    p.add_argument("--lang-path", type=str, default=None, help=f"Directory of <locale>.lang files (default: {config.LANG_PATH})")
    p.add_argument("--lang-prefix", type=str, default=None, help=f"First segment of generated lang codes (default: {config.LANG_PREFIX})")
    p.add_argument("--config", type=str, default=None, help="YAML file with option defaults (keys: quests, output, lang_path, ...)")


def settings_from_args(args) -> SplitSettings:
    overrides = {
        "quests": args.quests,
        "lang_path": args.lang_path,
        "lang_prefix": args.lang_prefix,
        "complete": getattr(args, "complete", None),
        "output": getattr(args, "output", None),
        "change": getattr(args, "change", None),
    }
    config_path = Path(args.config).expanduser() if args.config else None
    return load_split_settings(overrides, config_path=config_path)
