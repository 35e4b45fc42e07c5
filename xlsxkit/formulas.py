"""Cell formulas, including expansion of shared formulas."""

from __future__ import annotations

from dataclasses import dataclass

from xlsxkit.coordinates import (
    FIXED_REF_CHAR,
    digits_only,
    get_cell_id_from_coords,
    get_coords_from_cell_id,
    letters_only,
)

_TRIM_CHARS = " \t\n\r"


@dataclass
class CellFormula:
    """The formula element of a raw cell."""

    content: str = ""
    kind: str = ""
    ref: str = ""
    si: int = 0


@dataclass
class SharedFormula:
    """A shared formula anchored at the cell that defines it."""

    x: int = 0
    y: int = 0
    formula: str = ""


def _is_upper(char: str) -> bool:
    return "A" <= char <= "Z"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _shift_references(original: str, dx: int, dy: int) -> str:
    pieces: list[str] = []
    start = 0
    end = 0
    length = len(original)
    in_string = False
    while end < length:
        char = original[end]
        if char == '"':
            in_string = not in_string
        if not in_string and (_is_upper(char) or char == FIXED_REF_CHAR):
            pieces.append(original[start:end])
            start = end
            end += 1
            found_number = False
            while end < length:
                next_char = original[end]
                if _is_digit(next_char) or next_char == FIXED_REF_CHAR:
                    found_number = True
                elif _is_upper(next_char):
                    if found_number:
                        break
                else:
                    break
                end += 1
            if found_number:
                pieces.append(shift_cell(original[start:end], dx, dy))
                start = end
        end += 1
    if start < length:
        pieces.append(original[start:])
    return "".join(pieces)


def formula_for_cell(
    cell_ref: str,
    formula: CellFormula | None,
    shared_formulas: dict[int, SharedFormula],
) -> str:
    """Return the formula text of a cell, expanding shared formulas.

    A shared formula that carries a ``ref`` defines the formula and is
    recorded in ``shared_formulas``; later cells using the same index get
    the formula with its relative references moved to their position.
    """
    if formula is None:
        return ""
    if formula.kind != "shared":
        return formula.content.strip(_TRIM_CHARS)
    try:
        x, y = get_coords_from_cell_id(cell_ref)
    except ValueError:
        return formula.content.strip(_TRIM_CHARS)
    if formula.ref:
        shared_formulas[formula.si] = SharedFormula(x, y, formula.content)
        return formula.content.strip(_TRIM_CHARS)
    anchor = shared_formulas.get(formula.si, SharedFormula())
    result = _shift_references(anchor.formula, x - anchor.x, y - anchor.y)
    return result.strip(_TRIM_CHARS)


def shift_cell(cell_id: str, dx: int, dy: int) -> str:
    """Move a reference by ``dx`` columns and ``dy`` rows, keeping ``$`` parts fixed."""
    try:
        fx, fy = get_coords_from_cell_id(cell_id)
    except ValueError:
        fx, fy = -1, -1

    fixed_col = cell_id.find(FIXED_REF_CHAR) == 0
    fixed_row = cell_id.rfind(FIXED_REF_CHAR) > 0

    if not fixed_col:
        fx += dx
    if not fixed_row:
        fy += dy

    shifted = get_cell_id_from_coords(fx, fy)
    if not fixed_col and not fixed_row:
        return shifted

    column = letters_only(shifted)
    row = digits_only(shifted)
    return (
        (FIXED_REF_CHAR if fixed_col else "")
        + column
        + (FIXED_REF_CHAR if fixed_row else "")
        + row
    )