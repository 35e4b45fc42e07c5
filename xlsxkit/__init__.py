"""Building blocks for XLSX spreadsheets: coordinates, formulas, rich text, shared strings, rows and worksheet reading."""

__version__ = "0.1.0"

__all__ = [
    "coordinates",
    "formulas",
    "memory",
    "reftable",
    "richtext",
    "rows",
    "sheetreader",
    "workbook",
]