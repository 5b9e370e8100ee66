# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Helpers for the integer range notation used in output and parameter
definitions.

Ranges are written as ``"1:3,5"`` (1, 2, 3 and 5). The R style ``c(1:3, 5)``
and the list style ``[1:3, 5]`` wrappers are accepted as well, so parameter
tables written for SWATplusR keep working.
"""

import numbers
import re
from typing import Iterable, List, Sequence, Tuple, Union

_WRAPPER = re.compile(r'^\s*(?:c\s*\((?P<c>.*)\)|\[(?P<b>.*)\])\s*$', re.DOTALL)


def strip_wrapper(text: str) -> str:
    """Remove a surrounding ``c(...)`` or ``[...]``."""
    match = _WRAPPER.match(text)
    if match:
        return match.group('c') if match.group('c') is not None else match.group('b')
    return text.strip()


def split_values(text: str) -> List[str]:
    """Split a comma separated value list, dropping quotes and blanks."""
    inner = strip_wrapper(text)
    values = []
    for part in inner.split(','):
        part = part.strip().strip('"\'')
        if part:
            values.append(part)
    return values


def parse_integer_values(
    value: Union[int, str, Iterable[int]],
    allow_duplicates: bool = True,
) -> List[int]:
    """
    Expand *value* into a sorted list of unique integers.

    Args:
        value: An integer (including numpy integers and integral floats), an
            iterable of integers, or a range string like ``"1:3,5"``
        allow_duplicates: If False, values listed more than once raise

    Returns:
        Sorted list of unique integers

    Raises:
        ValueError: If an element is not an integer, a range is reversed or
            a value is duplicated while ``allow_duplicates`` is False
    """
    if isinstance(value, str):
        items: List[int] = []
        for part in split_values(value):
            if ':' in part:
                start_str, end_str = part.split(':', 1)
                start, end = int(start_str), int(end_str)
                if end < start:
                    raise ValueError(f"Range '{part}' ends before it starts")
                items.extend(range(start, end + 1))
            else:
                items.append(int(part))
    elif isinstance(value, numbers.Number):
        items = [_as_integer(value)]
    else:
        items = [_as_integer(item) for item in value]

    if not allow_duplicates and len(items) != len(set(items)):
        duplicated = sorted({v for v in items if items.count(v) > 1})
        raise ValueError(f"Duplicated values {duplicated}")
    return sorted(set(items))


def _as_integer(item) -> int:
    if isinstance(item, bool) or not isinstance(item, numbers.Real) or not float(item).is_integer():
        raise ValueError(f"Expected integer values, got {item!r}")
    return int(item)


def compress_ranges(values: Sequence[int]) -> List[Tuple[int, int]]:
    """Group sorted integers into ``(first, last)`` runs of consecutive values.

    >>> compress_ranges([1, 2, 3, 7, 9, 10])
    [(1, 3), (7, 7), (9, 10)]
    """
    runs: List[Tuple[int, int]] = []
    for v in sorted(set(values)):
        if runs and v == runs[-1][1] + 1:
            runs[-1] = (runs[-1][0], v)
        else:
            runs.append((v, v))
    return runs
