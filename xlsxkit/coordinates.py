"""Conversion between spreadsheet cell references and zero-based coordinates."""

from __future__ import annotations

FIXED_REF_CHAR = "$"
RANGE_CHAR = ":"


def _is_upper(char: str) -> bool:
    return "A" <= char <= "Z"


def _is_lower(char: str) -> bool:
    return "a" <= char <= "z"


def get_range_from_string(range_string: str) -> tuple[int, int]:
    """Split a range such as ``"1:3"`` into its lower and upper integers."""
    lower_text, sep, upper_text = range_string.partition(RANGE_CHAR)
    if not sep or not lower_text or not upper_text:
        raise ValueError(f"Invalid range {range_string!r}")
    try:
        lower = int(lower_text)
    except ValueError:
        raise ValueError(
            f"Invalid range (not integer in lower bound) {range_string}"
        ) from None
    try:
        upper = int(upper_text)
    except ValueError:
        raise ValueError(
            f"Invalid range (not integer in upper bound) {range_string}"
        ) from None
    return lower, upper


def col_letters_to_index(letters: str) -> int:
    """Convert column letters (case-insensitive) to a zero-based column index."""
    total = 0
    multiplier = 1
    for position, char in enumerate(reversed(letters)):
        value = 0 if position == 0 else 1
        if _is_upper(char):
            value += ord(char) - ord("A")
        elif _is_lower(char):
            value += ord(char) - ord("a")
        total += value * multiplier
        multiplier *= 26
    return total


def col_index_to_letters(n: int) -> str:
    """Convert a zero-based column index to its column letters."""
    letters = ""
    n += 1
    while n > 0:
        n -= 1
        letters = chr(ord("A") + n % 26) + letters
        n //= 26
    return letters


def row_index_to_string(row_ref: int) -> str:
    """Convert a zero-based row index to its one-based textual form."""
    return str(row_ref + 1)


def letters_only(text: str) -> str:
    """Keep only ASCII letters, upper-casing lower-case ones."""
    return "".join(
        char if _is_upper(char) else char.upper()
        for char in text
        if _is_upper(char) or _is_lower(char)
    )


def digits_only(text: str) -> str:
    """Keep only the ASCII digits of ``text``."""
    return "".join(char for char in text if "0" <= char <= "9")


def get_coords_from_cell_id(cell_id: str) -> tuple[int, int]:
    """Return the zero-based ``(x, y)`` of a reference such as ``"B3"``."""
    digits = digits_only(cell_id)
    if not digits:
        raise ValueError(f"invalid cell reference {cell_id!r}: no row number")
    y = int(digits) - 1
    x = col_letters_to_index(letters_only(cell_id))
    return x, y


def get_cell_id_from_coords(x: int, y: int) -> str:
    """Return the reference such as ``"A1"`` for zero-based coordinates."""
    return get_cell_id_from_coords_with_fixed(x, y, False, False)


def get_cell_id_from_coords_with_fixed(
    x: int, y: int, x_fixed: bool, y_fixed: bool
) -> str:
    """Return the reference for coordinates, marking either part as absolute."""
    column = col_index_to_letters(x)
    if x_fixed:
        column = FIXED_REF_CHAR + column
    row = row_index_to_string(y)
    if y_fixed:
        row = FIXED_REF_CHAR + row
    return column + row


def get_max_min_from_dimension_ref(ref: str) -> tuple[int, int, int, int]:
    """Return ``(minx, miny, maxx, maxy)`` for a dimension such as ``"A1:B2"``."""
    parts = ref.split(RANGE_CHAR)
    if len(parts) < 2:
        raise ValueError(f"invalid dimension reference {ref!r}")
    minx, miny = get_coords_from_cell_id(parts[0])
    maxx, maxy = get_coords_from_cell_id(parts[1])
    return minx, miny, maxx, maxy