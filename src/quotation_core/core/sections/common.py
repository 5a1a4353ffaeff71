"""
Shared building blocks for the per-brand section builders.

Each brand module (modern, formal, technical, default) exposes a
``SectionBuilders`` record. Builders are plain functions taking the data they
render plus a ``BuildContext``; they return document nodes and raise on
failure. ``build_section`` turns a builder call into a ``SectionResult`` so
the assembler can substitute a placeholder for a failed section.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

from ...exceptions import QuotationCoreError
from ..content_types import BankDetails, Company, QuotationData
from ..document_tree import (
    Alignment, Block, Border, Borders, BorderStyle, ImageRun, Margins, Paragraph,
    Shading, Spacing, Table, TableCell, TableRow, TextRun, VerticalAlign,
)
from ..formatters import format_currency
from ..seal_loader import SealLoader, SealLoadError
from ..style_registry import BrandStyle, CompanyFallbacks, FontSpec
from ..text_templates import TextTemplates, get_text_templates, split_label, split_note_lines

logger = logging.getLogger(__name__)


PLACEHOLDER_COLOR = "#999999"
SEAL_MISSING_COLOR = "#CCCCCC"
SEAL_FAILED_COLOR = "#CC0000"

DOCUMENT_TITLE = "QUOTATION/PERFORMA INVOICE"

ITEM_HEADERS = (
    "S.No.", "Cat. No.", "Specification", "Make", "Pack", "Qty",
    "Unit Rate", "Discount %", "GST %", "Lead Time", "Amount",
)

SUMMARY_LABELS = ("Sub Total", "Tax", "Round Off", "Grand Total")

BANK_FALLBACKS = BankDetails(
    bank_name="HDFC BANK LTD.",
    account_no="50200017511430",
    ifsc_code="HDFC0000590",
    branch_code="0590",
    micro_code="110240081",
    account_type="Current account",
)

SECTION_LABELS = {
    "header": "Header",
    "title": "Title",
    "client": "Client details",
    "items": "Items table",
    "terms": "Terms section",
    "bank": "Bank details",
    "signature": "Signature section",
}


class MissingQuotationError(QuotationCoreError):
    """Raised by client builders when no quotation is supplied."""
    pass


@dataclass
class BuildContext:
    """Everything a builder needs besides the data it renders."""

    style: BrandStyle
    locale: str = "en_IN"
    seal_loader: Optional[SealLoader] = None
    seal_size: int = 100
    templates: TextTemplates = field(default_factory=get_text_templates)

    def money(self, value: Any) -> str:
        return format_currency(value, locale=self.locale)


@dataclass
class SectionResult:
    """Outcome of one builder call: nodes on success, a reason on failure."""

    section: str
    nodes: List[Block] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SectionBuilders:
    """The builder functions of one template type."""

    template_type: str
    header: Callable[[Optional[Company], BuildContext], List[Block]]
    title: Callable[[QuotationData, BuildContext], List[Block]]
    client: Callable[[Optional[QuotationData], BuildContext], List[Block]]
    items: Callable[[QuotationData, BuildContext], List[Block]]
    terms: Callable[[QuotationData, BuildContext], List[Block]]
    bank: Callable[[QuotationData, BuildContext], List[Block]]
    signature: Callable[[Optional[Company], BuildContext], Awaitable[List[Block]]]


def _failed(section: str, error: Exception) -> SectionResult:
    logger.error(f"Error creating {section} section: {type(error).__name__}: {error}")
    return SectionResult(section=section, error=f"{type(error).__name__}: {error}")


def build_section(section: str, builder: Callable[..., List[Block]], *args: Any) -> SectionResult:
    """
    Run a synchronous builder and capture its outcome.

    Raises:
        MissingQuotationError: Propagated unchanged from client builders
    """
    try:
        return SectionResult(section=section, nodes=list(builder(*args)))
    except MissingQuotationError:
        raise
    except Exception as e:
        return _failed(section, e)


async def build_section_async(section: str, builder: Callable[..., Awaitable[List[Block]]], *args: Any) -> SectionResult:
    """Async counterpart of ``build_section``."""
    try:
        return SectionResult(section=section, nodes=list(await builder(*args)))
    except MissingQuotationError:
        raise
    except Exception as e:
        return _failed(section, e)


def placeholder(section: str, style: BrandStyle) -> Paragraph:
    """Gray '<Section> unavailable' paragraph standing in for a failed section."""
    label = SECTION_LABELS.get(section, section.capitalize())
    return Paragraph(runs=[text_run(f"{label} unavailable", style.typography.small, color=PLACEHOLDER_COLOR)])


# Node helpers

def text_run(text: Any, font: FontSpec, color: Optional[str] = None, bold: Optional[bool] = None,
             italic: bool = False, size: Optional[int] = None) -> TextRun:
    return TextRun(
        text=str(text),
        font=font.family,
        size=size or font.size,
        bold=font.bold if bold is None else bold,
        italic=italic,
        color=color,
    )


def paragraph(*runs, alignment: Alignment = Alignment.LEFT, before: int = 0, after: int = 0,
              line: Optional[int] = None, fill: Optional[str] = None) -> Paragraph:
    return Paragraph(
        runs=list(runs),
        alignment=alignment,
        spacing=Spacing(before=before, after=after, line=line),
        shading=Shading(fill) if fill else None,
    )


def cell(*children, fill: Optional[str] = None, borders: Optional[Borders] = None,
         width: Optional[int] = None, span: int = 1, margins: Optional[Margins] = None,
         valign: Optional[VerticalAlign] = None) -> TableCell:
    return TableCell(
        children=list(children),
        shading=Shading(fill) if fill else None,
        borders=borders,
        width_percent=width,
        column_span=span,
        margins=margins,
        vertical_align=valign,
    )


def spacer(before: int, after: int) -> Paragraph:
    return Paragraph(spacing=Spacing(before=before, after=after))


def dash(value: Any) -> str:
    """Render empty values as '-'."""
    if value is None:
        return "-"
    text = str(value)
    return text if text.strip() else "-"


def banner(children: Sequence[Paragraph], fill: str, margins: Margins) -> Table:
    """Single shaded cell spanning the page width."""
    return Table(
        rows=[TableRow(cells=[cell(*children, fill=fill, borders=Borders.none(), margins=margins)])],
        borders=Borders.none(),
    )


def heading(text: str, font: FontSpec, fill: str, text_color: str = "#FFFFFF",
            alignment: Alignment = Alignment.LEFT) -> Paragraph:
    return paragraph(
        text_run(text, font, color=text_color, bold=True),
        alignment=alignment,
        before=200,
        after=100,
        fill=fill,
    )


def labeled_paragraph(line: str, font: FontSpec, label_color: Optional[str] = None,
                      value_color: Optional[str] = None, before: int = 0, after: int = 60) -> Paragraph:
    """Paragraph with a bold 'Label:' run followed by the value."""
    label, value = split_label(line)
    runs = []
    if label:
        runs.append(text_run(label, font, color=label_color, bold=True))
    if value:
        runs.append(text_run(value, font, color=value_color))
    return paragraph(*runs, before=before, after=after)


# Company header

@dataclass
class HeaderFields:
    name: str
    address_line1: str
    address_line2: str
    email: str
    phone: str
    pan: str
    gst: str


def header_fields(company: Optional[Company], fallbacks: CompanyFallbacks, use_legal_name: bool = False) -> HeaderFields:
    """
    Resolve header text, substituting literal fallbacks for anything missing.

    Never raises, including for ``company=None``.
    """
    if company is None:
        return HeaderFields(
            name=fallbacks.name,
            address_line1=fallbacks.address_line1,
            address_line2=fallbacks.address_line2,
            email=fallbacks.email,
            phone=fallbacks.phone,
            pan=fallbacks.pan,
            gst=fallbacks.gst,
        )

    name = (company.legal_name or company.name) if use_legal_name else company.name
    address = company.address
    contact = company.contact_info
    tax = company.tax_info

    return HeaderFields(
        name=name or fallbacks.name,
        address_line1=f"{address.street or ''}, {address.city or ''}" if address else fallbacks.address_line1,
        address_line2=f"{address.state or ''} - {address.postal_code or ''}" if address else fallbacks.address_line2,
        email=(contact.email if contact else "") or fallbacks.email,
        phone=(contact.phone if contact else "") or fallbacks.phone,
        pan=(tax.pan if tax else "") or fallbacks.pan,
        gst=(tax.gst if tax else "") or fallbacks.gst,
    )


# Title block

def title_block(quotation: QuotationData, ctx: BuildContext, color: Optional[str] = None,
                size: Optional[int] = None) -> List[Paragraph]:
    fonts = ctx.style.typography
    lines = ctx.templates.render_lines(
        "reference.txt",
        quotation_ref=quotation.quotation_ref,
        quotation_date=quotation.quotation_date,
    )
    return [
        paragraph(
            text_run(DOCUMENT_TITLE, fonts.title, color=color, bold=True, size=size),
            alignment=Alignment.CENTER,
            before=200,
            after=100,
        ),
        paragraph(
            *(text_run(line, fonts.body, bold=True) for line in lines),
            alignment=Alignment.CENTER,
            before=0,
            after=100,
        ),
    ]


# Items table

@dataclass(frozen=True)
class ItemsTableLayout:
    """Brand-specific presentation of the 11-column items table."""

    widths: Tuple[int, ...]
    header_fill: str
    header_text: str
    border_color: str
    text_color: str
    alternate_fill: str
    emphasis_color: str
    text_font: FontSpec
    number_font: FontSpec
    header_font: FontSpec
    summary_fill: Optional[str] = None


def _item_cells(item, ctx: BuildContext, layout: ItemsTableLayout, fill: Optional[str]) -> List[TableCell]:
    text_font = layout.text_font
    number_font = layout.number_font
    borders = Borders.single(layout.border_color)
    margins = ctx.style.spacing.cell_margins

    discount = item.discount_percent or 0
    gst = item.gst_percent or 18
    make = item.make or "Generic"
    lead_time = item.lead_time or "2-3 weeks"

    values = [
        (text_run(item.sno, number_font, color=layout.text_color), Alignment.CENTER),
        (text_run(item.cat_no or "-", text_font, color=layout.text_color), Alignment.LEFT),
        (text_run(item.product_description or "-", text_font, color=layout.text_color), Alignment.LEFT),
        (text_run(make, text_font, color=layout.emphasis_color, italic=True), Alignment.CENTER),
        (text_run(item.pack_size or "-", text_font, color=layout.text_color), Alignment.CENTER),
        (text_run(item.qty, number_font, color=layout.text_color), Alignment.CENTER),
        (text_run(ctx.money(item.unit_rate), number_font, color=layout.text_color), Alignment.RIGHT),
        (text_run(f"{discount}%", number_font, color=layout.text_color), Alignment.CENTER),
        (text_run(f"{gst}%", number_font, color=layout.text_color), Alignment.CENTER),
        (text_run(lead_time, text_font, color=layout.emphasis_color, bold=True), Alignment.CENTER),
        (text_run(ctx.money(item.total_price), number_font, color=layout.text_color, bold=True), Alignment.RIGHT),
    ]
    return [
        cell(paragraph(run, alignment=alignment), fill=fill, borders=borders, width=width, margins=margins)
        for (run, alignment), width in zip(values, layout.widths)
    ]


def _summary_row(label: str, value: str, layout: ItemsTableLayout, grand_total: bool) -> TableRow:
    borders = Borders.single(layout.border_color)
    fill = layout.summary_fill
    font = layout.number_font
    if grand_total:
        borders.bottom = Border(BorderStyle.DOUBLE, 2, layout.header_fill)
        fill = layout.alternate_fill

    label_cell = cell(
        paragraph(text_run(label, layout.text_font, color=layout.text_color, bold=True), alignment=Alignment.RIGHT),
        fill=fill,
        borders=borders,
        span=len(layout.widths) - 1,
    )
    value_borders = Borders(borders.top, borders.bottom, borders.left, borders.right)
    value_cell = cell(
        paragraph(text_run(value, font, color=layout.header_fill if grand_total else layout.text_color, bold=True),
                  alignment=Alignment.RIGHT),
        fill=fill,
        borders=value_borders,
        width=layout.widths[-1],
    )
    return TableRow(cells=[label_cell, value_cell])


def items_table(quotation: QuotationData, ctx: BuildContext, layout: ItemsTableLayout) -> Table:
    """
    Header row, one row per line item, then Sub Total, Tax, Round Off and
    Grand Total rows.

    Raises:
        TypeError, ValueError: From the currency formatter when a money
                               value is None or not numeric
    """
    header_borders = Borders.single(layout.border_color)
    header = TableRow(
        cells=[
            cell(
                paragraph(text_run(title, layout.header_font, color=layout.header_text, bold=True),
                          alignment=Alignment.CENTER),
                fill=layout.header_fill,
                borders=header_borders,
                width=width,
                valign=VerticalAlign.CENTER,
            )
            for title, width in zip(ITEM_HEADERS, layout.widths)
        ],
        is_header=True,
    )

    rows = [header]
    for index, item in enumerate(quotation.items):
        fill = layout.alternate_fill if index % 2 == 1 else None
        rows.append(TableRow(cells=_item_cells(item, ctx, layout, fill)))

    totals = (quotation.sub_total, quotation.tax, quotation.round_off, quotation.grand_total)
    for label, value in zip(SUMMARY_LABELS, totals):
        rows.append(_summary_row(label, ctx.money(value), layout, grand_total=label == "Grand Total"))

    return Table(rows=rows, borders=Borders.single(layout.border_color))


# Terms and bank details

def numbered_terms_lines(quotation: QuotationData, ctx: BuildContext) -> List[str]:
    return ctx.templates.render_lines(
        "numbered_terms.txt",
        payment_terms=quotation.payment_terms,
        note_lines=split_note_lines(quotation.notes),
    )


def resolve_bank_details(quotation: QuotationData) -> BankDetails:
    """
    Bank details field by field: quotation first, then the company record,
    then the built-in account.
    """
    sources = [quotation.bank_details]
    if quotation.company is not None:
        sources.append(quotation.company.bank_details)
    sources = [source for source in sources if source is not None]

    resolved = {}
    for name in ("bank_name", "account_no", "ifsc_code", "branch_code", "micro_code", "account_type"):
        value = next((getattr(source, name) for source in sources if getattr(source, name)), None)
        resolved[name] = value or getattr(BANK_FALLBACKS, name)
    return BankDetails(**resolved)


def bank_lines(quotation: QuotationData, ctx: BuildContext) -> List[str]:
    return ctx.templates.render_lines("bank_details.txt", bank=resolve_bank_details(quotation))


# Signature block

def signatory_name(company: Optional[Company], fallbacks: CompanyFallbacks) -> str:
    if company is None:
        return fallbacks.name
    return company.legal_name or company.name or fallbacks.name


async def seal_paragraph(company: Optional[Company], ctx: BuildContext) -> Paragraph:
    """
    Seal image paragraph with graceful degradation.

    - URL present and loadable: embedded image
    - URL present but unloadable: red "[Company Seal - Image Load Failed]"
    - no URL: gray "[Company Seal]"
    """
    font = ctx.style.typography.small
    url = company.branding.seal_image_url if company is not None and company.branding else None

    if not url:
        return paragraph(
            text_run("[Company Seal]", font, color=SEAL_MISSING_COLOR, italic=True),
            alignment=Alignment.RIGHT,
            after=100,
        )

    try:
        if ctx.seal_loader is not None:
            seal = await ctx.seal_loader.load(url)
        else:
            async with SealLoader() as loader:
                seal = await loader.load(url)
    except SealLoadError as e:
        logger.warning(f"Company seal could not be loaded for {company.name}: {e}")
        return paragraph(
            text_run("[Company Seal - Image Load Failed]", font, color=SEAL_FAILED_COLOR, italic=True),
            alignment=Alignment.RIGHT,
            after=100,
        )

    logger.debug(f"Embedding company seal ({seal.mime_type}, {seal.size} bytes)")
    return paragraph(
        ImageRun(data=seal.data, mime_type=seal.mime_type, width=ctx.seal_size, height=ctx.seal_size),
        alignment=Alignment.RIGHT,
        after=100,
    )


async def signature_table(company: Optional[Company], ctx: BuildContext, name_color: Optional[str] = None) -> Table:
    """Right-aligned 'For <company>' block with the seal and 'Authorized Signatory'."""
    fonts = ctx.style.typography
    name = signatory_name(company, ctx.style.fallbacks)
    content = [
        paragraph(text_run(f"For {name}", fonts.label, color=name_color, bold=True),
                  alignment=Alignment.RIGHT, before=200, after=100),
        await seal_paragraph(company, ctx),
        paragraph(text_run("Authorized Signatory", fonts.body, color=name_color, bold=True),
                  alignment=Alignment.RIGHT, before=100, after=200),
    ]
    return Table(
        rows=[TableRow(cells=[cell(*content, borders=Borders.none(), margins=ctx.style.spacing.cell_margins)])],
        borders=Borders.none(),
    )


def require_quotation(quotation: Optional[QuotationData], section: str = "client") -> QuotationData:
    if quotation is None:
        raise MissingQuotationError(f"Cannot build {section} section without quotation data")
    return quotation
