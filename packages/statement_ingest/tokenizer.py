"""Quote-aware splitting of a single statement line.

Built on :mod:`csv` in its default (non-strict) dialect, which is already
lenient in the ways bank exports need: a quoted field may contain the
delimiter, ``""`` inside quotes is a literal ``"``, an unterminated quote
runs to the end of the line and a quote appearing mid-field (``ab"c``) is
kept as-is.
"""

from __future__ import annotations

import csv


def tokenize(line: str, delimiter: str = ",") -> list[str]:
    """Split ``line`` into fields, honoring quoted segments.

    An empty line yields ``[""]``. A line the reader rejects (for instance a
    field over ``csv.field_size_limit()``) comes back as a single field.
    """

    if len(delimiter) != 1:
        raise ValueError("delimiter must be a single character")

    s = line.rstrip("\r\n")
    if not s:
        return [""]
    try:
        return next(csv.reader([s], delimiter=delimiter))
    except csv.Error:
        return [s]


__all__ = ["tokenize"]
