"""
Document assembly.

Orders the outputs of one brand's section builders into a single
``DocumentTree``: document style, page geometry, the "Page N of M" footer
and the body sequence header, title, client, items, terms, bank details
and signature separated by brand spacers.
"""

import logging
from typing import Dict, List, Optional

from ..config import EngineConfig
from .content_types import QuotationData
from .document_tree import (
    Alignment, Block, DocumentStyles, DocumentTree, FieldRun, Footer, PageGeometry,
    Paragraph, Section, TextRun,
)
from .seal_loader import SealLoader
from .sections import SECTION_BUILDERS, BuildContext, SectionBuilders, SectionResult
from .sections.common import build_section, build_section_async, placeholder, spacer
from .style_registry import BrandStyle, get_style
from .text_templates import TextTemplates, get_text_templates

logger = logging.getLogger(__name__)


FOOTER_COLOR = "#4B5563"
FOOTER_SIZE = 20


def page_footer(style: BrandStyle) -> Footer:
    """Centered 'Page N of M' footer built from field runs."""
    font = style.typography.body.family
    return Footer(children=[Paragraph(
        runs=[
            TextRun("Page ", font=font, size=FOOTER_SIZE, color=FOOTER_COLOR),
            FieldRun("PAGE", font=font, size=FOOTER_SIZE, color=FOOTER_COLOR),
            TextRun(" of ", font=font, size=FOOTER_SIZE, color=FOOTER_COLOR),
            FieldRun("NUMPAGES", font=font, size=FOOTER_SIZE, color=FOOTER_COLOR),
        ],
        alignment=Alignment.CENTER,
    )])


class DocumentAssembler:
    """
    Builds a document tree with one brand's section builders.

    Section failures are isolated: a failing builder is replaced by a gray
    "<Section> unavailable" paragraph. ``MissingQuotationError`` raised by
    the client builder is not isolated and propagates to the caller.
    """

    def __init__(self, builders: SectionBuilders):
        self.builders = builders

    @property
    def template_type(self) -> str:
        return self.builders.template_type

    def _nodes(self, result: SectionResult, style: BrandStyle) -> List[Block]:
        if result.ok:
            return result.nodes
        return [placeholder(result.section, style)]

    async def assemble(
        self,
        quotation: QuotationData,
        config: Optional[EngineConfig] = None,
        seal_loader: Optional[SealLoader] = None,
        templates: Optional[TextTemplates] = None,
    ) -> DocumentTree:
        """
        Assemble the document for one quotation.

        Args:
            quotation: Quotation data; ``quotation.company`` feeds the header
                       and signature
            config: Engine configuration (locale, seal size, style overrides)
            seal_loader: Loader used for the company seal; one is created per
                         call when omitted
            templates: Text template renderer

        Returns:
            Complete DocumentTree

        Raises:
            MissingQuotationError: If quotation is None
        """
        config = config or EngineConfig()
        style = get_style(self.template_type, config.style_overrides)
        ctx = BuildContext(
            style=style,
            locale=config.locale,
            seal_loader=seal_loader,
            seal_size=config.seal_size,
            templates=templates or get_text_templates(),
        )
        builders = self.builders
        company = quotation.company if quotation is not None else None

        logger.debug(f"Assembling {self.template_type} document")

        header = build_section("header", builders.header, company, ctx)
        title = build_section("title", builders.title, quotation, ctx)
        client = build_section("client", builders.client, quotation, ctx)
        items = build_section("items", builders.items, quotation, ctx)
        terms = build_section("terms", builders.terms, quotation, ctx)
        bank = build_section("bank", builders.bank, quotation, ctx)
        signature = await build_section_async("signature", builders.signature, company, ctx)

        gap = style.spacing
        children: List[Block] = []
        children.extend(self._nodes(header, style))
        children.extend(self._nodes(title, style))
        for result in (client, items, terms, bank, signature):
            children.append(spacer(gap.section_before, gap.section_after))
            children.extend(self._nodes(result, style))

        failed = [r.section for r in (header, title, client, items, terms, bank, signature) if not r.ok]
        if failed:
            logger.warning(f"{self.template_type} document assembled with unavailable sections: {failed}")

        body_font = style.typography.body
        return DocumentTree(
            styles=DocumentStyles(font=body_font.family, size=body_font.size),
            section=Section(page=PageGeometry(), footer=page_footer(style), children=children),
            template_type=self.template_type,
        )


ASSEMBLERS: Dict[str, DocumentAssembler] = {
    template_type: DocumentAssembler(builders) for template_type, builders in SECTION_BUILDERS.items()
}


def get_assembler(template_type: str) -> DocumentAssembler:
    """
    Look up the assembler for a template type.

    Raises:
        KeyError: If no assembler is registered for template_type
    """
    return ASSEMBLERS[template_type]
