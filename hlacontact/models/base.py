# hlacontact/models/base.py
"""
Field coercion shared by the row-backed record types.

Rows arrive from CSV readers with loosely typed cells: numbers may be ints,
floats or strings, and empty cells may be None, "" or NaN.
"""
import math
from typing import Any, Mapping, Optional, Sequence, Union

Position = Union[int, str]


def is_missing(value: Any) -> bool:
    """True for None, empty/blank strings and NaN"""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def normalize_position(value: Any) -> Position:
    """Integer position when the value is integral, stripped string otherwise

    45, 45.0, "45" and " 45 " all normalize to 45; insertion codes such as
    "45A" stay strings.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid position: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"Invalid position: {value!r}")
    text = str(value).strip()
    if not text:
        raise ValueError("Empty position")
    try:
        return int(text)
    except ValueError:
        pass
    try:
        as_float = float(text)
    except ValueError:
        return text
    if as_float.is_integer():
        return int(as_float)
    return text


def parse_int_key(key: Any) -> Optional[int]:
    """Integer value of a column key, or None when it is not integral"""
    try:
        position = normalize_position(key)
    except ValueError:
        return None
    return position if isinstance(position, int) else None


def first_present(row: Mapping[str, Any], names: Sequence[str]) -> Any:
    """Value of the first of *names* present and non-missing in *row*"""
    for name in names:
        if name in row and not is_missing(row[name]):
            return row[name]
    return None


def position_sort_key(position: Position):
    """Numeric positions first in numeric order, then string positions"""
    if isinstance(position, int):
        return (0, position, "")
    return (1, 0, str(position))
