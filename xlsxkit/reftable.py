"""The shared string table of a workbook."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from xlsxkit.richtext import (
    RichTextRun,
    XmlRun,
    rich_text_to_plain_text,
    rich_text_to_xml,
    run_from_element,
    run_to_element,
    xml_to_rich_text,
)

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


@dataclass
class SharedStringItem:
    """One entry of a shared string table: plain text or rich text runs."""

    text: str | None = None
    runs: list[XmlRun] = field(default_factory=list)


@dataclass
class SharedStringTable:
    """The contents of a shared strings part."""

    count: int = 0
    unique_count: int = 0
    items: list[SharedStringItem] = field(default_factory=list)

    def to_xml(self) -> str:
        """Serialise the table as an XML document."""
        root = ET.Element(
            "sst",
            {
                "xmlns": SPREADSHEET_NS,
                "count": str(self.count),
                "uniqueCount": str(self.unique_count),
            },
        )
        for item in self.items:
            si = ET.SubElement(root, "si")
            if item.text is not None:
                t = ET.SubElement(si, "t")
                if item.text != item.text.strip():
                    t.set(_XML_SPACE, "preserve")
                t.text = item.text
            for run in item.runs:
                si.append(run_to_element(run))
        body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
        return XML_HEADER + body

    @classmethod
    def from_xml(cls, data: str | bytes) -> SharedStringTable:
        """Parse a shared strings XML document."""
        root = ET.fromstring(data.lstrip())
        table = cls(
            count=int(root.get("count", "0")),
            unique_count=int(root.get("uniqueCount", "0")),
        )
        for si in root:
            if _local(si.tag) != "si":
                continue
            item = SharedStringItem()
            for child in si:
                name = _local(child.tag)
                if name == "t":
                    item.text = child.text or ""
                elif name == "r":
                    item.runs.append(run_from_element(child))
            table.items.append(item)
        return table


@dataclass
class _Entry:
    plain_text: str = ""
    rich_text: list[RichTextRun] | None = None


class RefTable:
    """Strings and rich texts addressed by numeric index.

    When ``is_write`` is set, adding a value that is already present
    returns its existing index instead of appending a duplicate.
    """

    def __init__(self, is_write: bool = False) -> None:
        self.is_write = is_write
        self._entries: list[_Entry] = []
        self._known_strings: dict[str, int] = {}
        self._known_rich_texts: dict[str, list[int]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add_string(self, text: str) -> int:
        """Add a plain string and return its index."""
        if self.is_write and text in self._known_strings:
            return self._known_strings[text]
        self._entries.append(_Entry(plain_text=text))
        index = len(self._entries) - 1
        self._known_strings[text] = index
        return index

    def add_rich_text(self, runs: list[RichTextRun]) -> int:
        """Add a rich text and return its index."""
        plain = rich_text_to_plain_text(runs)
        if self.is_write:
            for index in self._known_rich_texts.get(plain, []):
                if self._entries[index].rich_text == runs:
                    return index
        self._entries.append(_Entry(rich_text=list(runs)))
        index = len(self._entries) - 1
        self._known_rich_texts.setdefault(plain, []).append(index)
        return index

    def resolve_shared_string(
        self, index: int
    ) -> tuple[str, list[RichTextRun] | None]:
        """Return ``(plain_text, rich_text)`` for an index.

        Exactly one of them carries the value: rich text is ``None`` for a
        plain string, and the plain text is empty for a rich text.
        """
        if index < 0:
            raise IndexError(f"shared string index out of range: {index}")
        entry = self._entries[index]
        if entry.rich_text is not None:
            return "", entry.rich_text
        return entry.plain_text, None

    def make_xlsx_sst(self) -> SharedStringTable:
        """Build the shared string table to be written out."""
        table = SharedStringTable(count=len(self._entries))
        table.unique_count = table.count
        for entry in self._entries:
            if entry.rich_text is not None:
                table.items.append(
                    SharedStringItem(runs=rich_text_to_xml(entry.rich_text))
                )
            else:
                table.items.append(SharedStringItem(text=entry.plain_text))
        return table


def make_shared_string_ref_table(sst: SharedStringTable) -> RefTable:
    """Build a reference table from a parsed shared string table."""
    table = RefTable(is_write=False)
    for item in sst.items:
        if item.runs:
            table.add_rich_text(xml_to_rich_text(item.runs))
        else:
            table.add_string(item.text or "")
    return table