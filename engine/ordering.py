"""
Display ordering for trait values.

Values such as ``Type1``, ``Type2``, ``Type10`` should list in numeric order
rather than plain string order.  Each value is split into a leading
non-digit prefix and the digit run that follows it:

    "Type10"  → ("Type", 10)
    "Alpha"   → ("Alpha", None)
    "42"      → ("", 42)

Values with different prefixes order by a locale-aware comparison of the
prefix.  Values with the same prefix order by number; when either side has
no digits the pair compares equal, so a stable sort leaves such values in
first-seen order.

Usage::

    from engine.ordering import sort_values

    sort_values(["Type1", "Type10", "Type2", "Alpha"])
    # ['Alpha', 'Type1', 'Type2', 'Type10']
"""

from __future__ import annotations

import locale
import re
from collections.abc import Iterable, Mapping
from functools import cmp_to_key

_PREFIX = re.compile(r"^\D*")
_DIGITS = re.compile(r"\d+")


def split_value(value: str) -> tuple[str, int | None]:
    """Split *value* into its non-digit prefix and first number (or None)."""
    prefix = _PREFIX.match(value).group(0)
    match = _DIGITS.search(value, len(prefix))
    return prefix, (int(match.group(0)) if match else None)


def compare_values(a: str, b: str) -> int:
    """Three-way comparison used as the display sort key.

    Returns:
        Negative if *a* sorts first, positive if *b* does, ``0`` if they
        tie (including same-prefix pairs where a number is missing).
    """
    prefix_a, number_a = split_value(a)
    prefix_b, number_b = split_value(b)

    if prefix_a == prefix_b:
        if number_a is None or number_b is None:
            return 0
        return (number_a > number_b) - (number_a < number_b)

    return locale.strcoll(prefix_a, prefix_b)


def sort_values(values: Iterable[str]) -> list[str]:
    """Return a new list of *values* in display order.  The input is untouched."""
    return sorted(values, key=cmp_to_key(compare_values))


def sort_trait_types(index: Mapping[str, object]) -> list[str]:
    """Return the trait types of *index* in display order (plain sort)."""
    return sorted(index)


def display_index(index: Mapping[str, Iterable[str]]) -> list[tuple[str, list[str]]]:
    """Return ``(trait_type, sorted_values)`` pairs ready for rendering."""
    return [(trait, sort_values(index[trait])) for trait in sort_trait_types(index)]
