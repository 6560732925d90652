"""File-system safe, collision-free names for chapter folders and quest files."""
from __future__ import annotations

import re
from typing import Callable, Iterable

_STYLE_CODE = re.compile(r"§.")
_UNSAFE = re.compile(r'[/\\?%*:|"<>]')


def safe_filename(text: str) -> str:
    """Drop Minecraft ``§`` formatting codes and replace characters file systems reject."""
    return _UNSAFE.sub("-", _STYLE_CODE.sub("", text))


class UniqueNameGenerator:
    """Hands out unique names within one scope (a chapter, or the chapter list).

    Repeated names get ``" _0"``, ``" _1"``... appended, with the counter
    restarting for every new base name.
    """

    def __init__(self, resolve: Callable[[str], str] = lambda s: s, reserved: Iterable[str] = ()):
        self._resolve = resolve
        self._taken: set[str] = set(reserved)

    def __call__(self, text: str) -> str:
        return self.name_for(text)

    def name_for(self, text: str) -> str:
        base = safe_filename(self._resolve(text))
        name = base
        k = 0
        while name in self._taken:
            name = f"{base} _{k}"
            k += 1
        self._taken.add(name)
        return name
