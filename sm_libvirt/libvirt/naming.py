"""Pick volume names that do not collide with what a pool already holds."""

from __future__ import annotations

from typing import Iterable

SUFFIX_SEPARATOR = "."


def _numeric_suffix(suffix: str) -> int:
    try:
        return int(suffix)
    except ValueError:
        return 0


def choose_name(desired: str, existing: Iterable[str]) -> str:
    """Return ``desired`` if unused, else ``desired.N`` with N one past the highest suffix.

    Suffixes that are not integers count as 0. This is check-then-act: two
    callers creating the same label concurrently can be handed the same name.
    """
    existing = list(existing)
    if desired not in existing:
        return desired

    stem = desired + SUFFIX_SEPARATOR
    highest = 0
    for name in existing:
        if name.startswith(stem):
            highest = max(highest, _numeric_suffix(name[len(stem):]))
    return f"{stem}{highest + 1}"
