"""A cell store that keeps every row in memory."""

from __future__ import annotations

from typing import Iterator

from xlsxkit.rows import Cell, Row, Sheet


class RowNotFoundError(LookupError):
    """Raised when a row key is not present in a cell store."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"{reason}: {key}")
        self.key = key
        self.reason = reason


class MemoryRow:
    """The in-memory cells of one row."""

    def __init__(self, sheet: Sheet) -> None:
        self.row = Row(sheet, self)
        self.max_col = -1
        self.cells: list[Cell | None] = []
        sheet.set_current_row(self.row)

    def _grow(self, new_size: int) -> None:
        if new_size > self.max_col + 1:
            self.max_col = new_size - 1
        if new_size > len(self.cells):
            self.cells.extend([None] * (new_size - len(self.cells)))

    def add_cell(self) -> Cell:
        """Create a cell after the rightmost one."""
        cell = Cell(self.row, self.max_col + 1)
        self.push_cell(cell)
        return cell

    def push_cell(self, cell: Cell) -> None:
        """Store a cell at its own column index."""
        self._grow(cell.num + 1)
        self.cells[cell.num] = cell

    def get_cell(self, col_idx: int) -> Cell:
        """Return the cell at a column, creating it if needed."""
        if col_idx < 0:
            raise IndexError(f"column index out of range: {col_idx}")
        if col_idx >= len(self.cells):
            self._grow(col_idx + 1)
        cell = self.cells[col_idx]
        if cell is None:
            cell = Cell(self.row, col_idx)
            self.cells[col_idx] = cell
        return cell

    def iter_cells(self, skip_empty: bool = False) -> Iterator[Cell]:
        """Yield cells up to the sheet's width, optionally skipping empty ones."""
        count = len(self.cells)
        for index in range(count):
            cell = self.cells[index]
            if cell is None:
                if skip_empty:
                    continue
                cell = self.get_cell(index)
            if skip_empty and not cell.modified:
                continue
            cell.row = self.row
            yield cell
        if not skip_empty:
            sheet = self.row.sheet
            max_col = sheet.max_col if sheet is not None else 0
            for index in range(count, max_col):
                yield self.get_cell(index)

    def cell_count(self) -> int:
        """The number of columns spanned by the row."""
        return self.max_col + 1


class MemoryCellStore:
    """The default cell store: all rows and cells live in memory."""

    def __init__(self) -> None:
        self.rows: dict[str, Row] = {}

    def __enter__(self) -> MemoryCellStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the store, dropping every row it holds."""
        self.rows.clear()

    def read_row(self, key: str) -> Row:
        """Return the row stored under ``key``."""
        try:
            return self.rows[key]
        except KeyError:
            raise RowNotFoundError(key, "No such row") from None

    def write_row(self, row: Row | None) -> None:
        """Store a row under its key."""
        if row is not None:
            self.rows[row.key()] = row

    def move_row(self, row: Row, index: int) -> None:
        """Move a stored row to another position in the sheet."""
        old_key = row.key()
        old_num = row.num
        row.num = index
        new_key = row.key()
        if new_key in self.rows:
            row.num = old_num
            raise ValueError(
                f"Target index for row ({index}) would overwrite a row already exists"
            )
        self.rows[new_key] = row
        self.rows.pop(old_key, None)

    def remove_row(self, key: str) -> None:
        """Remove a row; following rows are left where they are."""
        row = self.rows.pop(key, None)
        if row is not None and row.sheet is not None:
            row.sheet.set_current_row(None)

    def make_row_with_len(self, sheet: Sheet, length: int) -> Row:
        """Return an empty row already spanning ``length`` columns."""
        memory_row = MemoryRow(sheet)
        memory_row.max_col = length - 1
        memory_row._grow(length)
        return memory_row.row

    def make_row(self, sheet: Sheet) -> Row:
        """Return an empty row."""
        return MemoryRow(sheet).row


def key_to_row_key(key: str) -> str:
    """Extract the row key from a cell key."""
    parts = key.split(":")
    if len(parts) < 2:
        raise ValueError(f"invalid cell key {key!r}")
    return parts[0] + ":" + parts[1]