"""Canonical key ordering for quest documents."""
from __future__ import annotations

import re
import unicodedata
from typing import Any

_DIGIT_RUN = re.compile(r"(\d+)")


def _base_char(ch: str) -> str:
    """Fold case and accents ('É' -> 'e')."""
    decomposed = unicodedata.normalize("NFKD", ch)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (stripped or ch).casefold()


def natural_key(text: str) -> tuple:
    """Sort key comparing digit runs as numbers, ignoring case and accents.

    Punctuation and whitespace sort before numbers, numbers before letters,
    so ``"a:10"`` < ``"a2"`` < ``"ab"`` and ``"2:10"`` < ``"10:10"``.
    """
    parts: list[tuple] = []
    for chunk in _DIGIT_RUN.split(text):
        if not chunk:
            continue
        if chunk.isdecimal():
            parts.append((1, int(chunk), ""))
            continue
        for ch in chunk:
            if ch.isalpha():
                parts.append((2, 0, _base_char(ch)))
            else:
                parts.append((0, 0, ch))
    return tuple(parts)


def natural_compare(a: str, b: str) -> int:
    ka, kb = natural_key(a), natural_key(b)
    return (ka > kb) - (ka < kb)


def canonicalize(tree: Any) -> Any:
    """Return a copy of ``tree`` with every map's keys in natural order.

    Lists keep their order; maps inside them are canonicalized too. Scalars
    are returned as-is. The input is never mutated.
    """
    if isinstance(tree, dict):
        return {k: canonicalize(tree[k]) for k in sorted(tree, key=natural_key)}
    if isinstance(tree, list):
        return [canonicalize(v) for v in tree]
    return tree
