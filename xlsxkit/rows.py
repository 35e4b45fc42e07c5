"""Rows, cells and sheets backed by a cell store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterator, Protocol

CM_TO_PS = 28.3464567
_MAX_OUTLINE_LEVEL = 255


class CellType(IntEnum):
    """The kind of value a cell holds."""

    STRING = 0
    STRING_FORMULA = 1
    NUMERIC = 2
    BOOL = 3
    INLINE = 4
    ERROR = 5
    DATE = 6


@dataclass
class Hyperlink:
    """A hyperlink attached to a cell."""

    display_string: str = ""
    link: str = ""
    tooltip: str = ""
    location: str = ""


class _CellStore(Protocol):
    def read_row(self, key: str) -> Row: ...

    def write_row(self, row: Row | None) -> None: ...

    def make_row(self, sheet: Sheet) -> Row: ...


class _CellStoreRow(Protocol):
    def add_cell(self) -> Cell: ...

    def push_cell(self, cell: Cell) -> None: ...

    def get_cell(self, col_idx: int) -> Cell: ...

    def iter_cells(self, skip_empty: bool = False) -> Iterator[Cell]: ...

    def cell_count(self) -> int: ...


class Cell:
    """A single cell of a row.

    Assigning ``value`` marks the cell as modified; cells that were never
    given a value count as empty when iterating with ``skip_empty``.
    """

    def __init__(self, row: Row | None = None, num: int = 0) -> None:
        self.row = row
        self.num = num
        self._value = ""
        self.rich_text: list[Any] | None = None
        self.formula = ""
        self.cell_type = CellType.STRING
        self.num_fmt = ""
        self.style: Any = None
        self.date1904 = False
        self.hidden = False
        self.h_merge = 0
        self.v_merge = 0
        self.hyperlink = Hyperlink()
        self.data_validation: Any = None
        self.orig_value = ""
        self.orig_rich_text: list[Any] | None = None
        self.modified = False

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, new_value: str) -> None:
        self._value = new_value
        self.modified = True

    def __repr__(self) -> str:
        return f"Cell(num={self.num}, value={self._value!r})"


class Sheet:
    """A worksheet whose rows live in a cell store."""

    def __init__(self, name: str, cell_store: _CellStore | None = None) -> None:
        if cell_store is None:
            from xlsxkit.memory import MemoryCellStore

            cell_store = MemoryCellStore()
        self.name = name
        self.cell_store = cell_store
        self.max_row = 0
        self.max_col = 0
        self.hidden = False
        self.outline_level_row = 0
        self.outline_level_col = 0
        self.default_col_width = 0.0
        self.default_row_height = 0.0
        self.current_row: Row | None = None

    def set_current_row(self, row: Row | None) -> None:
        """Record ``row`` as the row currently being worked on."""
        self.current_row = row

    def row_key(self, index: int) -> str:
        return f"{self.name}:{index:06d}"

    def row(self, index: int) -> Row:
        """Return the row at a zero-based index, creating an empty one if missing."""
        if index < 0:
            raise IndexError(f"row index out of range: {index}")
        current = self.current_row
        if current is not None and current.num == index:
            return current
        from xlsxkit.memory import RowNotFoundError

        try:
            found = self.cell_store.read_row(self.row_key(index))
        except RowNotFoundError:
            found = self.cell_store.make_row(self)
            found.num = index
            self.cell_store.write_row(found)
            if index >= self.max_row:
                self.max_row = index + 1
        self.set_current_row(found)
        return found


class Row:
    """A row of a sheet; its cells are held by a cell store row."""

    def __init__(self, sheet: Sheet | None, cell_store_row: _CellStoreRow) -> None:
        self.sheet = sheet
        self.cell_store_row = cell_store_row
        self.hidden = False
        self.num = 0
        self.is_custom = False
        self.custom_height = False
        self._height = 0.0
        self._outline_level = 0
        self._cell_count = 0

    @property
    def coordinate(self) -> int:
        """The zero-based row number."""
        return self.num

    @property
    def cell_count(self) -> int:
        """The number of cells added or pushed to this row."""
        return self._cell_count

    @property
    def height(self) -> float:
        """The row height in PostScript points."""
        return self._height

    @property
    def outline_level(self) -> int:
        return self._outline_level

    def _set_height(self, height: float) -> None:
        self._height = height
        self.custom_height = True
        self.is_custom = True

    def set_height(self, height: float) -> None:
        """Set the height in PostScript points."""
        self._set_height(height)

    def set_height_cm(self, height: float) -> None:
        """Set the height in centimetres."""
        self._set_height(height * CM_TO_PS)

    def set_outline_level(self, level: int) -> None:
        """Set the outline level, raising the sheet's level if needed."""
        if not 0 <= level <= _MAX_OUTLINE_LEVEL:
            raise ValueError(f"outline level must be between 0 and 255: {level}")
        self._outline_level = level
        if self.sheet is not None and level > self.sheet.outline_level_row:
            self.sheet.outline_level_row = level
        self.is_custom = True

    def add_cell(self) -> Cell:
        """Append a new cell to the end of the row."""
        self.is_custom = True
        cell = self.cell_store_row.add_cell()
        if self.sheet is not None and cell.num > self.sheet.max_col - 1:
            self.sheet.max_col = cell.num + 1
        self._cell_count += 1
        return cell

    def push_cell(self, cell: Cell) -> None:
        """Place an existing cell at its own column."""
        self.is_custom = True
        self.cell_store_row.push_cell(cell)
        self._cell_count += 1

    def get_cell(self, col_idx: int) -> Cell:
        """Return the cell at a column, creating it if it does not exist."""
        return self.cell_store_row.get_cell(col_idx)

    def iter_cells(self, skip_empty: bool = False) -> Iterator[Cell]:
        """Yield the cells of the row, optionally skipping empty ones."""
        return self.cell_store_row.iter_cells(skip_empty)

    def __iter__(self) -> Iterator[Cell]:
        return self.iter_cells()

    def _sheet_name(self) -> str:
        return self.sheet.name if self.sheet is not None else ""

    def key(self) -> str:
        """The store key of this row."""
        return f"{self._sheet_name()}:{self.num:06d}"

    def make_cell_key(self, col_idx: int) -> str:
        """The store key of a cell in this row."""
        return f"{self._sheet_name()}:{self.num:06d}:{col_idx:06d}"