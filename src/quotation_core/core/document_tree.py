"""
In-memory document tree produced by the quotation engine.

The node types mirror a word-processing document: runs inside paragraphs,
paragraphs inside table cells, and one section holding page geometry, a
footer and the ordered body. An external packer turns the tree into bytes;
``DocumentTree.to_dict()`` gives it a plain, JSON-safe structure.
"""

import base64
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union


class Alignment(str, Enum):
    """Paragraph alignment."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class BorderStyle(str, Enum):
    """Table border line styles."""
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"


class VerticalAlign(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


@dataclass
class TextRun:
    """A run of text sharing one character format."""

    text: str
    font: Optional[str] = None
    size: Optional[int] = None  # half-points
    bold: bool = False
    italic: bool = False
    color: Optional[str] = None


@dataclass
class FieldRun:
    """A dynamic field (page number, page count) resolved by the packer."""

    field_code: str  # "PAGE" or "NUMPAGES"
    font: Optional[str] = None
    size: Optional[int] = None
    color: Optional[str] = None


@dataclass
class ImageRun:
    """An embedded raster image."""

    data: bytes
    mime_type: str
    width: int
    height: int


Run = Union[TextRun, FieldRun, ImageRun]


@dataclass
class Spacing:
    """Paragraph spacing in twips."""

    before: int = 0
    after: int = 0
    line: Optional[int] = None


@dataclass
class Shading:
    fill: str


@dataclass
class Border:
    style: BorderStyle = BorderStyle.SINGLE
    size: int = 1
    color: str = "auto"


@dataclass
class Borders:
    top: Border = field(default_factory=Border)
    bottom: Border = field(default_factory=Border)
    left: Border = field(default_factory=Border)
    right: Border = field(default_factory=Border)

    @classmethod
    def none(cls) -> "Borders":
        return cls(*(Border(BorderStyle.NONE, 0, "auto") for _ in range(4)))

    @classmethod
    def single(cls, color: str, size: int = 1) -> "Borders":
        return cls(*(Border(BorderStyle.SINGLE, size, color) for _ in range(4)))

    @classmethod
    def horizontal(cls, color: str, size: int = 1) -> "Borders":
        """Top and bottom rules only."""
        return cls(
            top=Border(BorderStyle.SINGLE, size, color),
            bottom=Border(BorderStyle.SINGLE, size, color),
            left=Border(BorderStyle.NONE, 0, "auto"),
            right=Border(BorderStyle.NONE, 0, "auto"),
        )


@dataclass
class Margins:
    """Cell margins in twips."""

    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0


@dataclass
class Paragraph:
    runs: List[Run] = field(default_factory=list)
    alignment: Alignment = Alignment.LEFT
    spacing: Optional[Spacing] = None
    shading: Optional[Shading] = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs if isinstance(run, TextRun))


@dataclass
class TableCell:
    children: List[Union["Paragraph", "Table"]] = field(default_factory=list)
    shading: Optional[Shading] = None
    borders: Optional[Borders] = None
    width_percent: Optional[int] = None
    column_span: int = 1
    margins: Optional[Margins] = None
    vertical_align: Optional[VerticalAlign] = None

    @property
    def text(self) -> str:
        return "\n".join(child.text for child in self.children if isinstance(child, Paragraph))


@dataclass
class TableRow:
    cells: List[TableCell] = field(default_factory=list)
    is_header: bool = False


@dataclass
class Table:
    rows: List[TableRow] = field(default_factory=list)
    width_percent: int = 100
    borders: Optional[Borders] = None


Block = Union[Paragraph, Table]


@dataclass
class PageGeometry:
    """Page size and margins in twips."""

    width: int = 12240  # 8.5 inches
    height: int = 15840  # 11 inches
    margin_top: int = 216
    margin_right: int = 288
    margin_bottom: int = 288
    margin_left: int = 288


@dataclass
class Footer:
    children: List[Paragraph] = field(default_factory=list)


@dataclass
class Section:
    page: PageGeometry
    footer: Footer
    children: List[Block] = field(default_factory=list)


@dataclass
class DocumentStyles:
    """Default run style applied to the whole document."""

    font: str = "Calibri"
    size: int = 22


@dataclass
class TraceEntry:
    """One step of template resolution."""

    tier: str
    outcome: str  # selected, skipped, no_match, failed, warning
    reason: str = ""


@dataclass
class DocumentTree:
    """
    Engine output: one styles object and one section.

    ``trace`` records how the template was resolved; it is excluded from
    equality so identical inputs compare equal regardless of resolution
    logging.
    """

    styles: DocumentStyles
    section: Section
    template_type: str = "default"
    trace: List[TraceEntry] = field(default_factory=list, compare=False)

    @property
    def children(self) -> List[Block]:
        return self.section.children

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data representation for external serializers."""
        return _to_plain(self)

    def iter_text(self) -> Iterator[str]:
        """Yield the text of every text run in body order, footer last."""
        for block in self.section.children:
            yield from iter_block_text(block)
        for paragraph in self.section.footer.children:
            yield from iter_block_text(paragraph)


def iter_block_text(block: Any) -> Iterator[str]:
    """Yield the text of every text run under ``block``."""
    if isinstance(block, Paragraph):
        for run in block.runs:
            if isinstance(run, TextRun):
                yield run.text
    elif isinstance(block, Table):
        for row in block.rows:
            for cell in row.cells:
                for child in cell.children:
                    yield from iter_block_text(child)


def iter_runs(block: Any) -> Iterator[Run]:
    """Yield every run under ``block``."""
    if isinstance(block, Paragraph):
        yield from block.runs
    elif isinstance(block, Table):
        for row in block.rows:
            for cell in row.cells:
                for child in cell.children:
                    yield from iter_runs(child)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bytes):
        return base64.b64encode(value).decode('ascii')
    if is_dataclass(value):
        result = {"type": type(value).__name__}
        for f in fields(value):
            result[f.name] = _to_plain(getattr(value, f.name))
        return result
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    return value
