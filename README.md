# xlsxkit

Pure-Python building blocks for XLSX (Office Open XML) spreadsheets.
It has no third-party dependencies.

## What it covers

- **Cell coordinates** (`xlsxkit.coordinates`): convert between `"B3"` and zero-based `(1, 2)`. Convert column letters to indexes and back. Parse dimension references such as `"A1:D8"` and ranges such as `"1:3"`.
- **Formulas** (`xlsxkit.formulas`): `formula_for_cell` returns a cell's formula text. For a cell that uses a shared formula, it shifts the relative references to that cell's position. `shift_cell` moves one reference and keeps any `$`-fixed parts.
- **Rich text** (`xlsxkit.richtext`): formatted runs of text (`RichTextRun`, `RichTextFont`, `RichTextColor`) and their XML form (`XmlRun`, `RunProperties`). `run_to_element` and `run_from_element` convert these runs to and from `<r>` elements.
- **Shared strings** (`xlsxkit.reftable`): `RefTable` stores strings and rich texts by index. With `is_write=True` it reuses the existing index for a duplicate. `SharedStringTable` parses and serialises a `sharedStrings.xml` document.
- **Rows and cells** (`xlsxkit.rows`, `xlsxkit.memory`): `Sheet`, `Row` and `Cell`, with the in-memory `MemoryCellStore` holding the rows.
- **Workbook parts** (`xlsxkit.workbook`): covers workbook relationships. `read_workbook_relations` parses them, and `WorkbookRels.make_xlsx_workbook_rels` and `relationships_to_xml` write them out. `truncate_sheet_xml` cuts a worksheet document after a number of rows.
- **Worksheet reading** (`xlsxkit.sheetreader`): `parse_worksheet` parses worksheet XML. `read_rows_from_sheet` then fills a `Sheet` with typed cells, including merge extents, hidden columns and hyperlinks taken from a link table.

## Install

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Coordinates:

```python
from xlsxkit.coordinates import (
    col_index_to_letters,
    col_letters_to_index,
    get_cell_id_from_coords,
    get_coords_from_cell_id,
)

get_coords_from_cell_id("A3")      # (0, 2)
get_cell_id_from_coords(2, 2)      # "C3"
col_letters_to_index("AMI")        # 1022
col_index_to_letters(26)           # "AA"
```

Shifting a cell reference:

```python
from xlsxkit.formulas import shift_cell

shift_cell("A1", 1, 1)    # "B2"
shift_cell("$A1", 1, 1)   # "$A2"
shift_cell("A$1", 1, 1)   # "B$1"
```

The shared string table:

```python
from xlsxkit.reftable import RefTable

table = RefTable()
index = table.add_string("Foo")
table.resolve_shared_string(index)   # ("Foo", None)
table.make_xlsx_sst().to_xml()       # the sharedStrings.xml document
```

Reading a worksheet:

```python
from xlsxkit.reftable import SharedStringTable, make_shared_string_ref_table
from xlsxkit.rows import Sheet
from xlsxkit.sheetreader import parse_worksheet, read_rows_from_sheet

ref_table = make_shared_string_ref_table(SharedStringTable.from_xml(shared_strings_bytes))
worksheet = parse_worksheet(sheet_xml_bytes)
sheet = Sheet("Sheet1")
read_rows_from_sheet(worksheet, ref_table, sheet)

first = sheet.row(0)
print(first.get_cell(0).value)
```

In this example, `shared_strings_bytes` is the content of `xl/sharedStrings.xml`, and `sheet_xml_bytes` is the content of the worksheet part. Leave `row_limit` and `col_limit` as `None` to read every row and column.

Walking the cells of a row:

```python
for cell in first.iter_cells(skip_empty=True):
    print(cell.value)
```

## Errors

Malformed input raises exceptions. No status values are returned:

- `get_coords_from_cell_id("A")` raises `ValueError`.
- `parse_worksheet` raises `ValueError` for XML that is not well formed.
- `fill_cell_data` raises `ValueError` for an unknown cell type.
- `MemoryCellStore.read_row` raises `RowNotFoundError` for an unknown key.
- `MemoryCellStore.move_row` raises `ValueError` if the target row is already taken.

## What it does not do

The package works on the XML content of individual workbook parts. It does not:

- open or save `.xlsx` zip archives;
- read styles, themes or number formats;
- build the hyperlink table from a sheet's relationships;
- write worksheets.

The caller supplies the part contents and, where needed, the hyperlink table.