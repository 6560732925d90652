"""`bqsplit split` – canonicalize DefaultQuests.json and split it into files."""
from __future__ import annotations

from bqsplit.commands.options import add_document_arguments, settings_from_args
from questbook.document import DocumentNotFoundError
from questbook.pipeline import run_split
from shared import config


def register(subparsers) -> None:
    p = subparsers.add_parser("split", help="Sort, externalize text, relink tails and split DefaultQuests.json")
    add_document_arguments(p)
    p.add_argument("--complete", type=str, default=None, help=f"Name of the quest rewired to chapter tails (default: {config.COMPLETE_TEXT})")
    p.add_argument("--output", type=str, default=None, help=f"Output root for the split tree (default: {config.OUTPUT_DIR})")
    p.add_argument("--no-change", dest="change", action="store_false", help="Only sort and split; skip edit mode reset, lang codes and tail relinking")
    p.set_defaults(change=None, func=run)


def run(args) -> int:
    try:
        settings = settings_from_args(args)
    except (ValueError, OSError) as e:
        print(f"ERROR: invalid options: {e}")
        return 2

    try:
        report = run_split(settings)
    except DocumentNotFoundError as e:
        print(f"ERROR: {e}")
        return 1

    if settings.change:
        print(f"Lang codes changed: {report.lang_changes} ({len(report.lang_files)} lang files written)")
        print(f"Quests relinked to chapter tails: {len(report.relinked)}")
    print(f"Saved {report.quests_path}")
    print(f".json files created: {report.files_written} in {settings.output}")
    return 0
