"""
Formal template sections: navy letterhead with gold accents and a ledger
style client block.
"""

from typing import List, Optional

from ..content_types import Company, QuotationData
from ..document_tree import Alignment, Block, Borders, Table, TableRow
from ..style_registry import FORMAL
from .common import (
    BuildContext, ItemsTableLayout, SectionBuilders, bank_lines, cell, dash, header_fields,
    heading, items_table, labeled_paragraph, numbered_terms_lines, paragraph, require_quotation,
    signature_table, text_run, title_block,
)

ITEM_WIDTHS = (5, 10, 18, 8, 8, 6, 10, 8, 7, 9, 11)


def build_header(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    """Letterhead banner with a thin gold rule underneath."""
    style = ctx.style
    colors = style.colors
    fonts = style.typography
    white = colors.header_text
    fields = header_fields(company, style.fallbacks, use_legal_name=True)

    letterhead = cell(
        paragraph(text_run(fields.name, fonts.title, color=white),
                  alignment=Alignment.CENTER, before=300, after=150, line=280),
        paragraph(text_run(fields.address_line1, fonts.header, color=white, size=20),
                  alignment=Alignment.CENTER, after=80, line=240),
        paragraph(text_run(fields.address_line2, fonts.header, color=white, size=20),
                  alignment=Alignment.CENTER, after=120, line=240),
        paragraph(
            text_run(f"Tel: {fields.phone}", fonts.small, color=white, size=16),
            text_run(" | ", fonts.small, color=white, size=16),
            text_run(f"Email: {fields.email}", fonts.small, color=white, size=16),
            alignment=Alignment.CENTER, after=120, line=220,
        ),
        paragraph(
            text_run(f"PAN: {fields.pan}", fonts.small, color=white, size=16),
            text_run(" | ", fonts.small, color=white, size=16),
            text_run(f"GST: {fields.gst}", fonts.small, color=white, size=16),
            alignment=Alignment.CENTER, after=200, line=220,
        ),
        fill=colors.primary,
        borders=Borders.none(),
        margins=style.spacing.banner_margins,
    )
    gold_rule = cell(
        paragraph(text_run("", fonts.small, size=4)),
        fill=colors.secondary,
        borders=Borders.none(),
    )
    return [Table(rows=[TableRow(cells=[letterhead]), TableRow(cells=[gold_rule])], borders=Borders.none())]


def build_title(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    return title_block(quotation, ctx, color=ctx.style.colors.primary)


def build_client(quotation: Optional[QuotationData], ctx: BuildContext) -> List[Block]:
    """
    Ledger-style "BILL TO" table.

    Raises:
        MissingQuotationError: If quotation is None
    """
    quotation = require_quotation(quotation)
    colors = ctx.style.colors
    fonts = ctx.style.typography
    bill_to = quotation.bill_to
    borders = Borders.horizontal(colors.border)
    margins = ctx.style.spacing.cell_margins

    rows = [TableRow(cells=[cell(
        paragraph(text_run("BILL TO", fonts.label, color=colors.header_text), alignment=Alignment.LEFT),
        fill=colors.primary,
        borders=borders,
        span=2,
        margins=margins,
    )])]

    entries = (
        ("Company Name:", bill_to.company),
        ("Contact Person:", bill_to.contact_person or bill_to.name),
        ("Address:", bill_to.address),
        ("Telephone:", bill_to.phone),
        ("Email:", bill_to.email),
    )
    for label, value in entries:
        rows.append(TableRow(cells=[
            cell(paragraph(text_run(label, fonts.label, color=colors.primary)),
                 fill=colors.accent, borders=borders, width=30, margins=margins),
            cell(paragraph(text_run(dash(value), fonts.body, color=colors.text)),
                 borders=borders, width=70, margins=margins),
        ]))

    return [Table(rows=rows, borders=borders)]


def build_items(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    layout = ItemsTableLayout(
        widths=ITEM_WIDTHS,
        header_fill=colors.primary,
        header_text=colors.header_text,
        border_color=colors.border,
        text_color=colors.text,
        alternate_fill=colors.alternate_row,
        emphasis_color=colors.primary,
        text_font=fonts.table,
        number_font=fonts.table,
        header_font=fonts.table,
    )
    return [items_table(quotation, ctx, layout)]


def build_terms(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    blocks: List[Block] = [heading("TERMS & CONDITIONS", fonts.label, fill=colors.primary)]
    blocks.extend(labeled_paragraph(line, fonts.body, label_color=colors.primary, value_color=colors.text)
                  for line in numbered_terms_lines(quotation, ctx))
    return blocks


def build_bank(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    borders = Borders.horizontal(colors.border)
    rows = []
    for line in bank_lines(quotation, ctx):
        label, _, value = line.partition(": ")
        rows.append(TableRow(cells=[
            cell(paragraph(text_run(f"{label}:", fonts.label, color=colors.primary)),
                 fill=colors.accent, borders=borders, width=30),
            cell(paragraph(text_run(value, fonts.body, color=colors.text)), borders=borders, width=70),
        ]))
    return [heading("BANK DETAILS", fonts.label, fill=colors.primary), Table(rows=rows, borders=borders)]


async def build_signature(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    return [await signature_table(company, ctx, name_color=ctx.style.colors.primary)]


BUILDERS = SectionBuilders(
    template_type=FORMAL,
    header=build_header,
    title=build_title,
    client=build_client,
    items=build_items,
    terms=build_terms,
    bank=build_bank,
    signature=build_signature,
)
