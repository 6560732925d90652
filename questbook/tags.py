"""NBT type tags carried by DefaultQuests.json keys, and literal-faithful serialization.

BetterQuesting exports NBT as JSON, suffixing every key with the numeric NBT
type id (``"questID:3"``, ``"properties:10"``). The game's parser is strict about
float literals, so the rewritten document is rendered the way the game's own
exporter renders numbers and then patched line by line (``restore_literals``).
"""
from __future__ import annotations

import json
import math
import re
from decimal import Decimal
from enum import IntEnum
from typing import Any


class TagKind(IntEnum):
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12

    @property
    def is_integer(self) -> bool:
        return self in (TagKind.BYTE, TagKind.SHORT, TagKind.INT, TagKind.LONG)

    @property
    def is_float(self) -> bool:
        return self in (TagKind.FLOAT, TagKind.DOUBLE)

    @property
    def is_container(self) -> bool:
        return self in (TagKind.LIST, TagKind.COMPOUND, TagKind.BYTE_ARRAY, TagKind.INT_ARRAY, TagKind.LONG_ARRAY)


def parse_key(key: str) -> tuple[str, TagKind | None]:
    """Split ``"name:8"`` into ``("name", TagKind.STRING)``.

    Keys without a known numeric suffix return ``(key, None)``.
    """
    name, sep, suffix = key.rpartition(":")
    if not sep or not suffix.isdigit():
        return key, None
    try:
        return name, TagKind(int(suffix))
    except ValueError:
        return key, None


def tagged(name: str, kind: TagKind) -> str:
    return f"{name}:{int(kind)}"


def entry_index(key: str) -> int:
    """Numeric position encoded in a list-like map key (``"12:10"`` -> 12)."""
    return int(key.split(":")[0])


def format_number(value: int | float) -> str:
    """Render a number the way the BetterQuesting exporter (JS ``Number#toString``) does.

    Integral floats lose their fraction (``3.0`` -> ``3``), exponents appear only
    below 1e-6 or from 1e21 up, and are written ``1.5e+21`` / ``1e-7``.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers here")
    if isinstance(value, int):
        return str(value)
    if math.isnan(value) or math.isinf(value):
        return "null"
    if value == 0:
        return "0"
    if value < 0:
        return "-" + format_number(-value)
    if value.is_integer() and value < 1e21:
        return str(int(value))

    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        return digits + "0" * (n - k)
    if 0 < n <= 21:
        return digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return "0." + "0" * (-n) + digits
    e = n - 1
    exp = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return digits + exp
    return digits[0] + "." + digits[1:] + exp


def _render(value: Any, level: int, out: list[str]) -> None:
    if isinstance(value, dict):
        if not value:
            out.append("{}")
            return
        pad = "  " * (level + 1)
        out.append("{\n")
        for i, (k, v) in enumerate(value.items()):
            if i:
                out.append(",\n")
            out.append(pad + json.dumps(k, ensure_ascii=False) + ": ")
            _render(v, level + 1, out)
        out.append("\n" + "  " * level + "}")
    elif isinstance(value, list):
        if not value:
            out.append("[]")
            return
        pad = "  " * (level + 1)
        out.append("[\n")
        for i, v in enumerate(value):
            if i:
                out.append(",\n")
            out.append(pad)
            _render(v, level + 1, out)
        out.append("\n" + "  " * level + "]")
    elif isinstance(value, str):
        out.append(json.dumps(value, ensure_ascii=False))
    elif value is True:
        out.append("true")
    elif value is False:
        out.append("false")
    elif value is None:
        out.append("null")
    elif isinstance(value, (int, float)):
        out.append(format_number(value))
    else:
        raise TypeError(f"Cannot serialize {type(value).__name__} into a quest document")


def to_json_text(tree: Any) -> str:
    """Two-space indented JSON with exporter-style numbers and raw unicode."""
    out: list[str] = []
    _render(tree, 0, out)
    return "".join(out)


_DOUBLE_EXPONENT = re.compile(r'^(\s*"[^:]+:6": -?\d+(?:\.\d+)?)e\+(\d+,?)$', re.MULTILINE)
_DOUBLE_POWER_OF_TEN = re.compile(r'^(\s*"[^:]+:6": )1(0{7,})(,?)$', re.MULTILINE)
_FLOAT_INTEGRAL = re.compile(r'^(\s*"[^:]+:(?:6|5)": -?\d+)(,?)$', re.MULTILINE)
_STRING_APOSTROPHE = re.compile(r'^\s*"[^:]+:8": ".*\'.*",?$', re.MULTILINE)


def restore_literals(text: str) -> str:
    """Patch serialized float and string literals into the form the game parser expects.

    ``"x:6": 1.5e+21`` -> ``1.5E21``; ``"x:6": 10000000`` -> ``1.0E7``;
    ``"x:5": 3`` -> ``3.0``; apostrophes in string fields -> ``\\u0027``.
    """
    text = _DOUBLE_EXPONENT.sub(r"\1E\2", text)
    text = _DOUBLE_POWER_OF_TEN.sub(lambda m: f"{m.group(1)}1.0E{len(m.group(2))}{m.group(3)}", text)
    text = _FLOAT_INTEGRAL.sub(r"\1.0\2", text)
    text = _STRING_APOSTROPHE.sub(lambda m: m.group(0).replace("'", "\\u0027"), text)
    return text


def dumps_document(tree: Any) -> str:
    """Serialize a whole DefaultQuests document for writing back in place."""
    return restore_literals(to_json_text(tree))
