"""
Technical template sections: green scientific palette, compact grids and
monospaced figures.
"""

from typing import List, Optional

from ..content_types import Company, QuotationData
from ..document_tree import Alignment, Block, Borders, Table, TableRow
from ..style_registry import TECHNICAL
from ..text_templates import split_note_lines
from .common import (
    BuildContext, ItemsTableLayout, SectionBuilders, banner, bank_lines, cell, dash,
    header_fields, items_table, labeled_paragraph, paragraph, require_quotation,
    signature_table, text_run, title_block,
)

ITEM_WIDTHS = (5, 10, 20, 8, 8, 6, 10, 8, 7, 9, 9)


def build_header(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    style = ctx.style
    fonts = style.typography
    white = style.colors.header_text
    fields = header_fields(company, style.fallbacks)

    return [banner(
        [
            paragraph(text_run(fields.name, fonts.title, color=white),
                      alignment=Alignment.CENTER, before=150, after=80),
            paragraph(text_run(fields.address_line1, fonts.header, color=white, size=16),
                      alignment=Alignment.CENTER, after=40),
            paragraph(text_run(fields.address_line2, fonts.header, color=white, size=16),
                      alignment=Alignment.CENTER, after=80),
            paragraph(text_run(f"Email: {fields.email} | Phone: {fields.phone}", fonts.small, color=white),
                      alignment=Alignment.CENTER, after=40),
            paragraph(text_run(f"PAN: {fields.pan} | GST: {fields.gst}", fonts.small, color=white),
                      alignment=Alignment.CENTER, after=150),
        ],
        fill=style.colors.primary,
        margins=style.spacing.banner_margins,
    )]


def build_title(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    return title_block(quotation, ctx, color=ctx.style.colors.primary)


def build_client(quotation: Optional[QuotationData], ctx: BuildContext) -> List[Block]:
    """
    Compact "Client Information" grid.

    Raises:
        MissingQuotationError: If quotation is None
    """
    quotation = require_quotation(quotation)
    colors = ctx.style.colors
    fonts = ctx.style.typography
    bill_to = quotation.bill_to
    borders = Borders.single(colors.border)
    margins = ctx.style.spacing.cell_margins

    rows = [TableRow(cells=[cell(
        paragraph(text_run("Client Information", fonts.label, color=colors.header_text)),
        fill=colors.primary,
        borders=borders,
        span=2,
        margins=margins,
    )])]

    entries = (
        ("Company", dash(bill_to.company)),
        ("Contact", dash(bill_to.contact_person or bill_to.name)),
        ("Address", dash(bill_to.address)),
        ("Phone | Email", f"{dash(bill_to.phone)} | {dash(bill_to.email)}"),
    )
    for label, value in entries:
        rows.append(TableRow(cells=[
            cell(paragraph(text_run(label, fonts.label, color=colors.primary)),
                 fill=colors.background, borders=borders, width=25, margins=margins),
            cell(paragraph(text_run(value, fonts.body, color=colors.text)),
                 borders=borders, width=75, margins=margins),
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
        number_font=fonts.mono,
        header_font=fonts.table,
        summary_fill=colors.background,
    )
    return [items_table(quotation, ctx, layout)]


def build_terms(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    """Terms in a bordered two-row grid: heading cell, then the numbered lines."""
    colors = ctx.style.colors
    fonts = ctx.style.typography
    borders = Borders.single(colors.border)
    lines = ctx.templates.render_lines(
        "technical_terms.txt",
        payment_terms=quotation.payment_terms,
        validity_period=quotation.validity_period,
        note_lines=split_note_lines(quotation.notes),
    )
    heading_cell = cell(
        paragraph(text_run("Terms & Conditions", fonts.label, color=colors.header_text),
                  alignment=Alignment.CENTER, before=120, after=120),
        fill=colors.primary,
        borders=borders,
        margins=ctx.style.spacing.cell_margins,
    )
    body_cell = cell(
        *(labeled_paragraph(line, fonts.body, label_color=colors.primary, value_color=colors.text, after=100)
          for line in lines),
        borders=borders,
        margins=ctx.style.spacing.cell_margins,
    )
    return [Table(rows=[TableRow(cells=[heading_cell]), TableRow(cells=[body_cell])], borders=borders)]


def build_bank(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    borders = Borders.single(colors.border)
    heading_cell = cell(
        paragraph(text_run("Bank Details", fonts.label, color=colors.header_text)),
        fill=colors.primary,
        borders=borders,
        margins=ctx.style.spacing.cell_margins,
    )
    body_cell = cell(
        *(labeled_paragraph(line, fonts.mono, label_color=colors.primary, value_color=colors.text)
          for line in bank_lines(quotation, ctx)),
        borders=borders,
        margins=ctx.style.spacing.cell_margins,
    )
    return [Table(rows=[TableRow(cells=[heading_cell]), TableRow(cells=[body_cell])], borders=borders)]


async def build_signature(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    return [await signature_table(company, ctx, name_color=ctx.style.colors.primary)]


BUILDERS = SectionBuilders(
    template_type=TECHNICAL,
    header=build_header,
    title=build_title,
    client=build_client,
    items=build_items,
    terms=build_terms,
    bank=build_bank,
    signature=build_signature,
)
