"""
Modern template sections: blue, centered, card-style layout.
"""

from typing import List, Optional

from ..content_types import Company, QuotationData
from ..document_tree import Alignment, Block, Borders, Table, TableRow
from ..style_registry import MODERN
from .common import (
    BuildContext, ItemsTableLayout, SectionBuilders, banner, bank_lines, cell, dash,
    header_fields, heading, items_table, labeled_paragraph, paragraph, require_quotation,
    signature_table, text_run, title_block,
)

ITEM_WIDTHS = (5, 10, 18, 8, 8, 6, 10, 8, 7, 9, 11)


def build_header(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    """Centered company banner on the brand primary."""
    style = ctx.style
    fonts = style.typography
    white = style.colors.header_text
    fields = header_fields(company, style.fallbacks)

    return [banner(
        [
            paragraph(text_run(fields.name, fonts.title, color=white),
                      alignment=Alignment.CENTER, before=200, after=100, line=240),
            paragraph(text_run(fields.address_line1, fonts.header, color=white),
                      alignment=Alignment.CENTER, after=50, line=200),
            paragraph(text_run(fields.address_line2, fonts.header, color=white),
                      alignment=Alignment.CENTER, after=100, line=200),
            paragraph(text_run(f"Email: {fields.email} | Phone: {fields.phone}", fonts.header, color=white, size=20),
                      alignment=Alignment.CENTER, after=100, line=200),
            paragraph(text_run(f"PAN: {fields.pan} | GST: {fields.gst}", fonts.header, color=white, size=20),
                      alignment=Alignment.CENTER, after=200, line=200),
        ],
        fill=style.colors.primary,
        margins=style.spacing.banner_margins,
    )]


def build_title(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    return title_block(quotation, ctx, color=ctx.style.colors.primary, size=32)


def build_client(quotation: Optional[QuotationData], ctx: BuildContext) -> List[Block]:
    """
    Card-style "Bill To" grid.

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
        paragraph(text_run("Bill To", fonts.label, color=colors.primary, size=20)),
        fill=colors.secondary,
        borders=borders,
        span=2,
        margins=margins,
    )])]

    entries = (
        ("Company Name", bill_to.company),
        ("Contact Person", bill_to.contact_person or bill_to.name),
        ("Address", bill_to.address),
        ("Phone", bill_to.phone),
        ("Email", bill_to.email),
    )
    for label, value in entries:
        rows.append(TableRow(cells=[
            cell(paragraph(text_run(label, fonts.label, color=colors.primary)),
                 borders=borders, width=35, margins=margins),
            cell(paragraph(text_run(dash(value), fonts.body, color=colors.text)),
                 borders=borders, width=65, margins=margins),
        ]))

    return [Table(rows=rows, borders=borders)]


def _items_layout(ctx: BuildContext) -> ItemsTableLayout:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    return ItemsTableLayout(
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


def build_items(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    return [items_table(quotation, ctx, _items_layout(ctx))]


def build_terms(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    lines = ctx.templates.render_lines(
        "modern_terms.txt",
        payment_terms=quotation.payment_terms,
        delivery_terms=quotation.delivery_terms,
        validity_period=quotation.validity_period,
    )
    blocks: List[Block] = [heading("Terms & Conditions", fonts.label, fill=colors.primary)]
    blocks.extend(labeled_paragraph(line, fonts.body, label_color=colors.primary, value_color=colors.text)
                  for line in lines)
    return blocks


def build_bank(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    blocks: List[Block] = [heading("Bank Details", fonts.label, fill=colors.primary)]
    blocks.extend(labeled_paragraph(line, fonts.body, label_color=colors.primary, value_color=colors.text)
                  for line in bank_lines(quotation, ctx))
    return blocks


async def build_signature(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    return [await signature_table(company, ctx, name_color=ctx.style.colors.primary)]


BUILDERS = SectionBuilders(
    template_type=MODERN,
    header=build_header,
    title=build_title,
    client=build_client,
    items=build_items,
    terms=build_terms,
    bank=build_bank,
    signature=build_signature,
)
