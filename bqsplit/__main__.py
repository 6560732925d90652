"""Entry point for ``python -m bqsplit <command>``.

Commands:
    split – sort DefaultQuests.json, apply lang codes, relink tails, split into files
    lang  – only move quest/chapter text into .lang tables
    merge – rebuild DefaultQuests.json from a split tree
"""
from bqsplit.cli import main

if __name__ == "__main__":
    main()
