"""`bqsplit merge` – rebuild DefaultQuests.json from a split tree."""
from __future__ import annotations

from pathlib import Path

from questbook.pipeline import run_merge
from questbook.rebuild import SplitTreeError
from shared import config


def register(subparsers) -> None:
    p = subparsers.add_parser("merge", help="Rebuild DefaultQuests.json from a split tree")
    p.add_argument("--input", type=str, default=config.OUTPUT_DIR, help=f"Split tree root (default: {config.OUTPUT_DIR})")
    p.add_argument("--quests", type=str, default=config.QUESTS_PATH, help=f"Document to write (default: {config.QUESTS_PATH})")
    p.set_defaults(func=run)


def run(args) -> int:
    split_dir = Path(args.input).expanduser()
    quests_path = Path(args.quests).expanduser()

    if not split_dir.is_dir():
        print(f"ERROR: split directory not found: {split_dir}")
        return 1

    try:
        document = run_merge(split_dir, quests_path)
    except SplitTreeError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Rebuilt {len(document['questDatabase:9'])} quests in {len(document['questLines:9'])} chapters")
    print(f"Saved {quests_path}")
    return 0
