"""
Default template sections.

Used when no brand style resolves. Colors follow the company's own
``branding.primary_color`` when present, otherwise the neutral palette.
"""

from typing import List, Optional

from ..content_types import Company, QuotationData
from ..document_tree import Alignment, Block, Borders, Table, TableRow
from ..style_registry import DEFAULT, BrandStyle, alternate_row_shading
from .common import (
    BuildContext, ItemsTableLayout, SectionBuilders, banner, bank_lines, cell, dash,
    header_fields, heading, items_table, labeled_paragraph, numbered_terms_lines, paragraph,
    require_quotation, signature_table, text_run, title_block,
)

ITEM_WIDTHS = (5, 10, 18, 8, 8, 6, 10, 8, 7, 9, 11)


def header_color(company: Optional[Company], style: BrandStyle) -> str:
    """Company primary color, or the default palette's primary."""
    if company is not None and company.branding and company.branding.primary_color:
        return company.branding.primary_color
    return style.colors.primary


def build_header(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    style = ctx.style
    fonts = style.typography
    white = style.colors.header_text
    fields = header_fields(company, style.fallbacks)

    return [banner(
        [
            paragraph(text_run(fields.name, fonts.title, color=white),
                      alignment=Alignment.CENTER, line=200),
            paragraph(
                text_run(fields.address_line1, fonts.body, color=white, size=24),
                text_run(fields.address_line2, fonts.body, color=white, size=24),
                alignment=Alignment.CENTER, line=200,
            ),
            paragraph(
                text_run(f"Email:- {fields.email}", fonts.body, color=white, size=24),
                text_run(fields.phone, fonts.body, color=white, size=24),
                alignment=Alignment.CENTER, line=200,
            ),
            paragraph(text_run(f"PAN NO.: {fields.pan} | GST NO.: {fields.gst}", fonts.body, color=white, size=24),
                      alignment=Alignment.CENTER, line=200),
        ],
        fill=header_color(company, style),
        margins=style.spacing.banner_margins,
    )]


def build_title(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    return title_block(quotation, ctx)


def build_client(quotation: Optional[QuotationData], ctx: BuildContext) -> List[Block]:
    """
    "To" box followed by the salutation.

    Raises:
        MissingQuotationError: If quotation is None
    """
    quotation = require_quotation(quotation)
    style = ctx.style
    fonts = style.typography
    bill_to = quotation.bill_to
    borders = Borders.single(style.colors.border)
    fill = header_color(quotation.company, style)

    box = Table(
        rows=[
            TableRow(cells=[cell(
                paragraph(text_run("To", fonts.label, color=style.colors.header_text)),
                fill=fill,
                borders=borders,
                margins=style.spacing.cell_margins,
            )]),
            TableRow(cells=[cell(
                paragraph(text_run(dash(bill_to.company), fonts.table, bold=True)),
                paragraph(text_run(dash(bill_to.address), fonts.table)),
                paragraph(
                    text_run("Kind Attn: ", fonts.table, bold=True),
                    text_run(dash(bill_to.contact_person or bill_to.name), fonts.table),
                    text_run(" | Tel: ", fonts.table, bold=True),
                    text_run(dash(bill_to.phone), fonts.table),
                    text_run(" | Email: ", fonts.table, bold=True),
                    text_run(dash(bill_to.email), fonts.table),
                ),
                borders=borders,
                margins=style.spacing.cell_margins,
            )]),
        ],
        borders=borders,
    )
    return [
        box,
        paragraph(text_run("Dear Sir/Madam,", fonts.small), before=100, after=60),
        paragraph(text_run("Thank you for your enquiry. We are pleased to quote our best prices as under:",
                           fonts.small), after=100),
    ]


def build_items(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    colors = ctx.style.colors
    fonts = ctx.style.typography
    primary = header_color(quotation.company, ctx.style)
    layout = ItemsTableLayout(
        widths=ITEM_WIDTHS,
        header_fill=primary,
        header_text=colors.header_text,
        border_color=colors.border,
        text_color=colors.text,
        alternate_fill=alternate_row_shading(primary, 0.9),
        emphasis_color=primary,
        text_font=fonts.table,
        number_font=fonts.table,
        header_font=fonts.table,
    )
    return [items_table(quotation, ctx, layout)]


def build_terms(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    """Numbered terms, plus a "Quotation Created By" block when an employee is set."""
    fonts = ctx.style.typography
    fill = header_color(quotation.company, ctx.style)

    blocks: List[Block] = [heading("Terms & Conditions", fonts.table, fill=fill)]
    blocks.extend(labeled_paragraph(line, fonts.table, after=50) for line in numbered_terms_lines(quotation, ctx))

    if quotation.employee is not None:
        blocks.append(heading("Quotation Created By", fonts.table, fill=fill))
        lines = ctx.templates.render_lines("created_by.txt", employee=quotation.employee)
        blocks.extend(labeled_paragraph(line, fonts.table, after=0) for line in lines)
    return blocks


def build_bank(quotation: QuotationData, ctx: BuildContext) -> List[Block]:
    fonts = ctx.style.typography
    blocks: List[Block] = [heading("Bank Details", fonts.table, fill=header_color(quotation.company, ctx.style))]
    blocks.extend(labeled_paragraph(line, fonts.table, after=40) for line in bank_lines(quotation, ctx))
    return blocks


async def build_signature(company: Optional[Company], ctx: BuildContext) -> List[Block]:
    return [await signature_table(company, ctx)]


BUILDERS = SectionBuilders(
    template_type=DEFAULT,
    header=build_header,
    title=build_title,
    client=build_client,
    items=build_items,
    terms=build_terms,
    bank=build_bank,
    signature=build_signature,
)
