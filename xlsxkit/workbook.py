"""Workbook relationships and sheet XML truncation."""

from __future__ import annotations

import posixpath
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from xml.parsers import expat
from xml.sax.saxutils import escape

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
PACKAGE_RELATIONSHIPS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
_REL_BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
WORKSHEET_REL_TYPE = _REL_BASE + "worksheet"
SHARED_STRINGS_REL_TYPE = _REL_BASE + "sharedStrings"
THEME_REL_TYPE = _REL_BASE + "theme"
STYLES_REL_TYPE = _REL_BASE + "styles"
SHEET_ENDING = "</sheetData></worksheet>"

_ATTR_ENTITIES = {'"': "&#34;", "'": "&#39;", "\t": "&#x9;", "\n": "&#xA;", "\r": "&#xD;"}


@dataclass
class Relationship:
    """One relationship of a workbook relationships part."""

    id: str = ""
    target: str = ""
    type: str = ""


class WorkbookRels(dict):
    """Maps relationship ids such as ``"rId1"`` to worksheet targets."""

    def make_xlsx_workbook_rels(self) -> list[Relationship]:
        """Build the relationships for the worksheets plus the fixed parts.

        Worksheets are placed by the number in their id; shared strings,
        theme and styles follow them.
        """
        count = len(self)
        relationships = [Relationship() for _ in range(count + 3)]
        for key, target in self.items():
            try:
                index = int(key[3:])
            except ValueError:
                raise ValueError(f"invalid relationship id {key!r}") from None
            if not 1 <= index <= len(relationships):
                raise ValueError(f"relationship id out of range: {key!r}")
            relationships[index - 1] = Relationship(key, target, WORKSHEET_REL_TYPE)
        fixed = (
            ("sharedStrings.xml", SHARED_STRINGS_REL_TYPE),
            ("theme/theme1.xml", THEME_REL_TYPE),
            ("styles.xml", STYLES_REL_TYPE),
        )
        for target, rel_type in fixed:
            count += 1
            relationships[count - 1] = Relationship(f"rId{count}", target, rel_type)
        return relationships


def _attr(value: str) -> str:
    return escape(value, _ATTR_ENTITIES)


def relationships_to_xml(relationships: list[Relationship]) -> str:
    """Serialise relationships as a workbook relationships document."""
    parts = [XML_HEADER, f'<Relationships xmlns="{PACKAGE_RELATIONSHIPS_NS}">']
    for rel in relationships:
        parts.append(
            f'<Relationship Id="{_attr(rel.id)}" Target="{_attr(rel.target)}"'
            f' Type="{_attr(rel.type)}"></Relationship>'
        )
    parts.append("</Relationships>")
    return "".join(parts)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def read_workbook_relations(data: str | bytes) -> WorkbookRels:
    """Map worksheet relationship ids to their sheet file names without ``.xml``."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"invalid workbook relationships: {exc}") from exc
    sheets = WorkbookRels()
    for element in root:
        if _local(element.tag) != "Relationship":
            continue
        target = element.get("Target", "")
        if target.endswith(".xml") and element.get("Type") == WORKSHEET_REL_TYPE:
            filename = posixpath.basename(target)
            sheets[element.get("Id", "")] = filename.replace(".xml", "", 1)
    return sheets


class _LimitReached(Exception):
    def __init__(self, offset: int) -> None:
        super().__init__(offset)
        self.offset = offset


def truncate_sheet_xml(data: str | bytes, row_limit: int) -> bytes:
    """Cut a worksheet document after ``row_limit`` rows and close it.

    Anything after the kept rows is dropped; a document with no more
    rows than the limit is returned whole.
    """
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    parser = expat.ParserCreate()
    row_count = 0

    def end_element(name: str) -> None:
        nonlocal row_count
        if name.rsplit(":", 1)[-1] != "row":
            return
        row_count += 1
        if row_count >= row_limit:
            close = raw.index(b">", parser.CurrentByteIndex)
            raise _LimitReached(close + 1)

    parser.EndElementHandler = end_element
    try:
        parser.Parse(raw, True)
    except _LimitReached as stop:
        return raw[: stop.offset] + SHEET_ENDING.encode("utf-8")
    except expat.ExpatError as exc:
        raise ValueError(f"invalid sheet XML: {exc}") from exc
    return raw