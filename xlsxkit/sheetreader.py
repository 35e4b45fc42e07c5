"""Reading worksheet XML into rows and cells of a sheet."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from xlsxkit.coordinates import (
    RANGE_CHAR,
    get_coords_from_cell_id,
    get_max_min_from_dimension_ref,
    get_range_from_string,
)
from xlsxkit.formulas import CellFormula, SharedFormula, formula_for_cell
from xlsxkit.reftable import RefTable
from xlsxkit.richtext import XmlRun, run_from_element, xml_to_rich_text
from xlsxkit.rows import Cell, CellType, Hyperlink, Row, Sheet

_TRIM_CHARS = " \t\n\r"
_TRUE_VALUES = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "false", "FALSE", "False"})

_SIMPLE_TYPES = {
    "b": CellType.BOOL,
    "e": CellType.ERROR,
    "str": CellType.STRING_FORMULA,
    "d": CellType.DATE,
    "": CellType.NUMERIC,
    "n": CellType.NUMERIC,
}


@dataclass
class RawCell:
    """A ``<c>`` element of a worksheet."""

    r: str = ""
    t: str = ""
    s: int = 0
    v: str = ""
    f: CellFormula | None = None
    inline_text: str | None = None
    inline_runs: list[XmlRun] | None = None


@dataclass
class RawRow:
    """A ``<row>`` element of a worksheet."""

    r: int = 0
    spans: str = ""
    hidden: bool = False
    ht: str = ""
    custom_height: bool = False
    outline_level: int = 0
    cells: list[RawCell] = field(default_factory=list)


@dataclass
class RawCol:
    """A ``<col>`` element, covering the one-based columns ``min`` to ``max``."""

    min: int = 0
    max: int = 0
    width: float | None = None
    hidden: bool = False
    custom_width: bool = False
    best_fit: bool = False
    phonetic: bool = False
    collapsed: bool = False
    outline_level: int = 0
    style: int | None = None


@dataclass
class Worksheet:
    """The parts of a worksheet document needed to read its cells."""

    dimension_ref: str = ""
    rows: list[RawRow] = field(default_factory=list)
    cols: list[RawCol] | None = None
    merge_cells: list[str] = field(default_factory=list)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    value = value.strip()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value {value!r}")


def _parse_int(value: str | None, default: int = 0) -> int:
    if value is None:
        return default
    return int(value.strip())


def _parse_optional_int(value: str | None) -> int | None:
    return None if value is None else int(value.strip())


def _parse_optional_float(value: str | None) -> float | None:
    return None if value is None else float(value.strip())


def _parse_formula(element: ET.Element) -> CellFormula:
    return CellFormula(
        content=element.text or "",
        kind=element.get("t", ""),
        ref=element.get("ref", ""),
        si=_parse_int(element.get("si")),
    )


def _parse_cell(element: ET.Element) -> RawCell:
    cell = RawCell(
        r=element.get("r", ""),
        t=element.get("t", ""),
        s=_parse_int(element.get("s")),
    )
    for child in element:
        name = _local(child.tag)
        if name == "v":
            cell.v = child.text or ""
        elif name == "f":
            cell.f = _parse_formula(child)
        elif name == "is":
            runs: list[XmlRun] = []
            for part in child:
                part_name = _local(part.tag)
                if part_name == "t":
                    cell.inline_text = part.text or ""
                elif part_name == "r":
                    runs.append(run_from_element(part))
            if cell.inline_text is None:
                cell.inline_runs = runs
    return cell


def _parse_row(element: ET.Element) -> RawRow:
    return RawRow(
        r=_parse_int(element.get("r")),
        spans=element.get("spans", ""),
        hidden=_parse_bool(element.get("hidden")),
        ht=element.get("ht", ""),
        custom_height=_parse_bool(element.get("customHeight")),
        outline_level=_parse_int(element.get("outlineLevel")),
        cells=[_parse_cell(c) for c in element if _local(c.tag) == "c"],
    )


def _parse_col(element: ET.Element) -> RawCol:
    return RawCol(
        min=_parse_int(element.get("min")),
        max=_parse_int(element.get("max")),
        width=_parse_optional_float(element.get("width")),
        hidden=_parse_bool(element.get("hidden")),
        custom_width=_parse_bool(element.get("customWidth")),
        best_fit=_parse_bool(element.get("bestFit")),
        phonetic=_parse_bool(element.get("phonetic")),
        collapsed=_parse_bool(element.get("collapsed")),
        outline_level=_parse_int(element.get("outlineLevel")),
        style=_parse_optional_int(element.get("style")),
    )


def parse_worksheet(data: str | bytes) -> Worksheet:
    """Parse a worksheet XML document."""
    try:
        root = ET.fromstring(data.lstrip())
    except ET.ParseError as exc:
        raise ValueError(f"invalid worksheet XML: {exc}") from exc
    worksheet = Worksheet()
    for child in root:
        name = _local(child.tag)
        if name == "dimension":
            worksheet.dimension_ref = child.get("ref", "")
        elif name == "cols":
            worksheet.cols = [_parse_col(c) for c in child if _local(c.tag) == "col"]
        elif name == "sheetData":
            worksheet.rows = [_parse_row(r) for r in child if _local(r.tag) == "row"]
        elif name == "mergeCells":
            worksheet.merge_cells = [
                c.get("ref", "") for c in child if _local(c.tag) == "mergeCell"
            ]
    return worksheet


def calculate_max_min_from_worksheet(
    worksheet: Worksheet, col_limit: int | None = None
) -> tuple[int, int, int, int]:
    """Work out ``(minx, miny, maxx, maxy)`` from the cells of a worksheet.

    Used when the worksheet carries no usable dimension reference.
    Cells beyond ``col_limit`` columns end the scan of their row.
    """
    minx: int | None = None
    miny: int | None = None
    maxx = 0
    maxy = 0
    for row in worksheet.rows:
        for cell in row.cells:
            x, y = get_coords_from_cell_id(cell.r)
            if col_limit is not None and x + 1 > col_limit:
                break
            minx = x if minx is None else min(minx, x)
            miny = y if miny is None else min(miny, y)
            maxx = max(maxx, x)
            maxy = max(maxy, y)
    return minx or 0, miny or 0, maxx, maxy


def make_row_from_span(spans: str, sheet: Sheet) -> Row:
    """Return an empty row wide enough for the upper bound of ``spans``.

    Rows always start at the first column, whatever the lower bound.
    """
    _, upper = get_range_from_string(spans)
    return sheet.cell_store.make_row_with_len(sheet, upper)


def make_row_from_raw(raw_row: RawRow, sheet: Sheet) -> Row:
    """Return an empty row wide enough for the cells of ``raw_row``.

    Cells without a reference are taken to follow the previous cell.
    """
    upper = -1
    for raw_cell in raw_row.cells:
        if raw_cell.r:
            try:
                x, _ = get_coords_from_cell_id(raw_cell.r)
            except ValueError:
                raise ValueError(f"Invalid Cell Coord, {raw_cell.r}") from None
            upper = max(upper, x)
            continue
        upper += 1
    upper += 1
    row = sheet.cell_store.make_row_with_len(sheet, upper)
    row.set_outline_level(raw_row.outline_level)
    return row


def _fill_inline_string(raw_cell: RawCell, cell: Cell) -> None:
    cell.value = ""
    cell.rich_text = None
    if raw_cell.inline_text is not None:
        cell.value = raw_cell.inline_text.strip(_TRIM_CHARS)
    elif raw_cell.inline_runs is not None:
        cell.rich_text = xml_to_rich_text(raw_cell.inline_runs) or None


def fill_cell_data(
    raw_cell: RawCell,
    ref_table: RefTable | None,
    shared_formulas: dict[int, SharedFormula],
    cell: Cell,
) -> None:
    """Set the value, type and formula of ``cell`` from a raw cell."""
    value = raw_cell.v.strip(_TRIM_CHARS)
    cell.formula = formula_for_cell(raw_cell.r, raw_cell.f, shared_formulas)
    if raw_cell.t == "s":
        cell.cell_type = CellType.STRING
        if value:
            if ref_table is None:
                raise ValueError("shared string cell without a shared string table")
            plain, rich = ref_table.resolve_shared_string(int(value))
            cell.value = plain
            cell.rich_text = rich
    elif raw_cell.t == "inlineStr":
        cell.cell_type = CellType.INLINE
        _fill_inline_string(raw_cell, cell)
    elif raw_cell.t in _SIMPLE_TYPES:
        cell.value = value
        cell.cell_type = _SIMPLE_TYPES[raw_cell.t]
    else:
        raise ValueError(f"invalid cell type {raw_cell.t!r}")
    cell.orig_value = cell.value
    cell.orig_rich_text = cell.rich_text
    cell.modified = False


def _merge_extent(worksheet: Worksheet, cell_ref: str) -> tuple[int, int]:
    for merge in worksheet.merge_cells:
        parts = merge.split(RANGE_CHAR)
        if len(parts) != 2 or parts[0] != cell_ref:
            continue
        minx, miny, maxx, maxy = get_max_min_from_dimension_ref(merge)
        return maxx - minx, maxy - miny
    return 0, 0


def _find_col(cols: list[RawCol] | None, index: int) -> RawCol | None:
    for col in cols or ():
        if col.min <= index <= col.max:
            return col
    return None


def read_rows_from_sheet(
    worksheet: Worksheet,
    ref_table: RefTable | None,
    sheet: Sheet,
    row_limit: int | None = None,
    col_limit: int | None = None,
    link_table: dict[tuple[int, int], Hyperlink] | None = None,
) -> None:
    """Fill ``sheet`` with the rows and cells of ``worksheet``."""
    if not worksheet.rows:
        sheet.max_row = 0
        sheet.max_col = 0
        return
    links = link_table or {}
    ref = worksheet.dimension_ref
    if (
        ref
        and len(ref.split(RANGE_CHAR)) == 2
        and row_limit is None
        and col_limit is None
    ):
        _, _, max_col, max_row = get_max_min_from_dimension_ref(ref)
    else:
        _, _, max_col, max_row = calculate_max_min_from_worksheet(worksheet, col_limit)

    shared_formulas: dict[int, SharedFormula] = {}
    for raw_row in worksheet.rows:
        if raw_row.spans and raw_row.spans.count(RANGE_CHAR) == 1:
            row = make_row_from_span(raw_row.spans, sheet)
        else:
            row = make_row_from_raw(raw_row, sheet)
        sheet.set_current_row(row)
        row.num = raw_row.r - 1
        row.hidden = raw_row.hidden
        try:
            height = float(raw_row.ht)
        except ValueError:
            pass
        else:
            row.set_height(height)
        row.is_custom = raw_row.custom_height
        row.set_outline_level(raw_row.outline_level)

        for raw_cell in raw_row.cells:
            if not raw_cell.r:
                continue
            h_merge, v_merge = _merge_extent(worksheet, raw_cell.r)
            x, y = get_coords_from_cell_id(raw_cell.r)
            if col_limit is not None and col_limit < x + 1:
                break
            cell = Cell(row, x)
            row.push_cell(cell)
            cell.h_merge = h_merge
            cell.v_merge = v_merge
            fill_cell_data(raw_cell, ref_table, shared_formulas, cell)
            hyperlink = links.get((x, y))
            if hyperlink is not None:
                cell.hyperlink = hyperlink
            col = _find_col(worksheet.cols, x + 1)
            cell.hidden = raw_row.hidden or (col is not None and col.hidden)
            cell.modified = True
        sheet.cell_store.write_row(row)

    sheet.max_row = max_row + 1
    sheet.max_col = max_col + 1
    sheet.set_current_row(sheet.row(0))