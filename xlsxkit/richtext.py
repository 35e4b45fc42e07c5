"""Rich text runs and their mapping to and from spreadsheet XML runs."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum, IntEnum

_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


class RichTextFontFamily(IntEnum):
    """Font family classes of a rich text font."""

    UNSPECIFIED = -1
    NOT_APPLICABLE = 0
    ROMAN = 1
    SWISS = 2
    MODERN = 3
    SCRIPT = 4
    DECORATIVE = 5


class RichTextCharset(IntEnum):
    """Character sets of a rich text font."""

    UNSPECIFIED = -1
    ANSI = 0
    DEFAULT = 1
    SYMBOL = 2
    MAC = 77
    SHIFT_JIS = 128
    HANGUL = 129
    JOHAB = 130
    GB2312 = 134
    BIG5 = 136
    GREEK = 161
    TURKISH = 162
    VIETNAMESE = 163
    HEBREW = 177
    ARABIC = 178
    BALTIC = 186
    RUSSIAN = 204
    THAI = 222
    EAST_EUROPE = 238
    OEM = 255


class RichTextVertAlign(str, Enum):
    """Vertical position of a run of text."""

    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


class RichTextUnderline(str, Enum):
    """Underline styles usable on a run of text."""

    SINGLE = "single"
    DOUBLE = "double"


@dataclass
class Color:
    """A colour as stored in spreadsheet XML."""

    rgb: str = ""
    theme: int | None = None
    tint: float = 0.0
    indexed: int | None = None


@dataclass
class RichTextColor:
    """The colour of a rich text run."""

    core_color: Color = field(default_factory=Color)

    @classmethod
    def from_argb(cls, alpha: int, red: int, green: int, blue: int) -> RichTextColor:
        """Build a colour from ARGB components, each in the range 0 to 255."""
        return cls(Color(rgb=f"{alpha:02X}{red:02X}{green:02X}{blue:02X}"))

    @classmethod
    def from_theme_color(cls, theme_color: int) -> RichTextColor:
        """Build a colour from a zero-based theme colour index."""
        return cls(Color(theme=theme_color))


@dataclass
class RichTextFont:
    """Font settings of a rich text run."""

    name: str = ""
    size: float = 0.0
    family: RichTextFontFamily | int = RichTextFontFamily.NOT_APPLICABLE
    charset: RichTextCharset | int = RichTextCharset.ANSI
    color: RichTextColor | None = None
    bold: bool = False
    italic: bool = False
    strike: bool = False
    vert_align: RichTextVertAlign | str | None = None
    underline: RichTextUnderline | str | None = None


@dataclass
class RichTextRun:
    """A run of text with optional font decoration."""

    font: RichTextFont | None = None
    text: str = ""


@dataclass
class RunProperties:
    """The run properties element of an XML run."""

    r_font: str | None = None
    charset: int | None = None
    family: int | None = None
    b: bool = False
    i: bool = False
    strike: bool = False
    outline: bool = False
    shadow: bool = False
    condense: bool = False
    extend: bool = False
    color: Color | None = None
    sz: float | None = None
    u: str | None = None
    vert_align: str | None = None
    scheme: str | None = None


@dataclass
class XmlRun:
    """A run as it appears in spreadsheet XML."""

    rpr: RunProperties | None = None
    text: str = ""


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


def _as_family(value: int) -> RichTextFontFamily | int:
    try:
        return RichTextFontFamily(value)
    except ValueError:
        return value


def _as_charset(value: int) -> RichTextCharset | int:
    try:
        return RichTextCharset(value)
    except ValueError:
        return value


def _as_vert_align(value: str) -> RichTextVertAlign | str:
    try:
        return RichTextVertAlign(value)
    except ValueError:
        return value


def _as_underline(value: str) -> RichTextUnderline | str:
    try:
        return RichTextUnderline(value)
    except ValueError:
        return value


def rich_text_to_xml(runs: list[RichTextRun]) -> list[XmlRun]:
    """Convert rich text runs to their XML run representation."""
    result: list[XmlRun] = []
    for run in runs:
        xml_run = XmlRun(text=run.text)
        font = run.font
        if font is not None:
            props = RunProperties()
            if font.name:
                props.r_font = font.name
            if font.size > 0.0:
                props.sz = font.size
            if font.family != RichTextFontFamily.UNSPECIFIED:
                props.family = int(font.family)
            if font.charset != RichTextCharset.UNSPECIFIED:
                props.charset = int(font.charset)
            if font.color is not None:
                core = font.color.core_color
                props.color = Color(core.rgb, core.theme, core.tint, core.indexed)
            props.b = font.bold
            props.i = font.italic
            props.strike = font.strike
            if font.vert_align:
                props.vert_align = _enum_value(font.vert_align)
            if font.underline:
                props.u = _enum_value(font.underline)
            xml_run.rpr = props
        result.append(xml_run)
    return result


def xml_to_rich_text(runs: list[XmlRun]) -> list[RichTextRun]:
    """Convert XML runs to rich text runs."""
    result: list[RichTextRun] = []
    for xml_run in runs:
        run = RichTextRun(text=xml_run.text)
        props = xml_run.rpr
        if props is not None:
            font = RichTextFont()
            if props.r_font is not None:
                font.name = props.r_font
            if props.sz is not None:
                font.size = props.sz
            font.family = (
                _as_family(props.family)
                if props.family is not None
                else RichTextFontFamily.UNSPECIFIED
            )
            font.charset = (
                _as_charset(props.charset)
                if props.charset is not None
                else RichTextCharset.UNSPECIFIED
            )
            if props.color is not None:
                font.color = RichTextColor(props.color)
            font.bold = props.b
            font.italic = props.i
            font.strike = props.strike
            if props.vert_align is not None:
                font.vert_align = _as_vert_align(props.vert_align)
            if props.u is not None:
                font.underline = _as_underline(props.u)
            run.font = font
        result.append(run)
    return result


def rich_text_to_plain_text(runs: list[RichTextRun]) -> str:
    """Join the text of all runs."""
    return "".join(run.text for run in runs)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _format_float(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


_BOOL_PROPS = ("b", "i", "strike", "outline", "shadow", "condense", "extend")


def _color_to_element(tag: str, color: Color) -> ET.Element:
    element = ET.Element(tag)
    if color.rgb:
        element.set("rgb", color.rgb)
    if color.theme is not None:
        element.set("theme", str(color.theme))
    if color.tint:
        element.set("tint", _format_float(color.tint))
    if color.indexed is not None:
        element.set("indexed", str(color.indexed))
    return element


def _color_from_element(element: ET.Element) -> Color:
    theme = element.get("theme")
    tint = element.get("tint")
    indexed = element.get("indexed")
    return Color(
        rgb=element.get("rgb", ""),
        theme=int(theme) if theme is not None else None,
        tint=float(tint) if tint is not None else 0.0,
        indexed=int(indexed) if indexed is not None else None,
    )


def _props_to_element(props: RunProperties) -> ET.Element:
    element = ET.Element("rPr")
    if props.r_font is not None:
        ET.SubElement(element, "rFont", {"val": props.r_font})
    if props.charset is not None:
        ET.SubElement(element, "charset", {"val": str(props.charset)})
    if props.family is not None:
        ET.SubElement(element, "family", {"val": str(props.family)})
    for name in _BOOL_PROPS:
        if getattr(props, name):
            ET.SubElement(element, name)
    if props.color is not None:
        element.append(_color_to_element("color", props.color))
    if props.sz is not None:
        ET.SubElement(element, "sz", {"val": _format_float(props.sz)})
    if props.u is not None:
        ET.SubElement(element, "u", {"val": props.u})
    if props.vert_align is not None:
        ET.SubElement(element, "vertAlign", {"val": props.vert_align})
    if props.scheme is not None:
        ET.SubElement(element, "scheme", {"val": props.scheme})
    return element


def _bool_val(element: ET.Element) -> bool:
    value = element.get("val")
    return value is None or value not in ("0", "false")


def _props_from_element(element: ET.Element) -> RunProperties:
    props = RunProperties()
    for child in element:
        name = _local(child.tag)
        value = child.get("val")
        if name in _BOOL_PROPS:
            setattr(props, name, _bool_val(child))
        elif name == "rFont":
            props.r_font = value or ""
        elif name == "charset":
            props.charset = int(value or "0")
        elif name == "family":
            props.family = int(value or "0")
        elif name == "color":
            props.color = _color_from_element(child)
        elif name == "sz":
            props.sz = float(value or "0")
        elif name == "u":
            props.u = value if value is not None else "single"
        elif name == "vertAlign":
            props.vert_align = value or ""
        elif name == "scheme":
            props.scheme = value or ""
    return props


def run_to_element(run: XmlRun) -> ET.Element:
    """Build the ``<r>`` element for an XML run."""
    element = ET.Element("r")
    if run.rpr is not None:
        element.append(_props_to_element(run.rpr))
    text_element = ET.SubElement(element, "t")
    if run.text != run.text.strip():
        text_element.set(_XML_SPACE, "preserve")
    text_element.text = run.text
    return element


def run_from_element(element: ET.Element) -> XmlRun:
    """Read an XML run from an ``<r>`` element."""
    run = XmlRun()
    for child in element:
        name = _local(child.tag)
        if name == "rPr":
            run.rpr = _props_from_element(child)
        elif name == "t":
            run.text = child.text or ""
    return run