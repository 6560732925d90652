"""`bqsplit lang` – move quest and chapter text into .lang tables."""
from __future__ import annotations

from bqsplit.commands.options import add_document_arguments, settings_from_args
from questbook.document import DocumentNotFoundError
from questbook.pipeline import run_lang


def register(subparsers) -> None:
    p = subparsers.add_parser("lang", help="Replace inline quest text with lang codes and rewrite .lang files")
    add_document_arguments(p)
    p.set_defaults(func=run)


def run(args) -> int:
    try:
        settings = settings_from_args(args)
    except (ValueError, OSError) as e:
        print(f"ERROR: invalid options: {e}")
        return 2

    try:
        report = run_lang(settings)
    except DocumentNotFoundError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Lang codes changed: {report.lang_changes}")
    for path in report.lang_files:
        print(f"  wrote {path}")
    return 0
