"""
Template selection: the engine's entry point.

Resolves which brand assembler renders a quotation through a chain of
tiers (configured template type, company-name heuristics, company-id
lookup, default template) and always returns a document tree. Every step is
logged and recorded in the tree's decision trace.
"""

import asyncio
import copy
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..config import EngineConfig
from ..exceptions import QuotationCoreError
from ..logging import timed_operation
from .assembler import ASSEMBLERS, page_footer
from .content_types import BillTo, Company, QuotationData, TemplateConfig
from .defaults import default_template_config_for_company, ensure_template_config
from .document_tree import (
    DocumentStyles, DocumentTree, PageGeometry, Paragraph, Section, Spacing, TextRun, TraceEntry,
)
from .seal_loader import SealLoader
from .style_registry import DEFAULT, DEFAULT_STYLE, FORMAL, MODERN, TECHNICAL, is_known_template_type
from .text_templates import TextTemplates

logger = logging.getLogger(__name__)


# Trace tiers
TIER_INPUT = "input"
TIER_TEMPLATE_CONFIG = "template_config"
TIER_CONFIG_TYPE = "config_type"
TIER_NAME = "name_heuristic"
TIER_ID = "id_lookup"
TIER_DEFAULT = "default"
TIER_LAST_RESORT = "last_resort"

# Trace outcomes
SELECTED = "selected"
SKIPPED = "skipped"
NO_MATCH = "no_match"
FAILED = "failed"
WARNING = "warning"

ERROR_TEMPLATE_TYPE = "error"

QuotationInput = Union[QuotationData, Mapping[str, Any], None]


class TemplateResolutionError(QuotationCoreError):
    """Raised when a resolved template fails to assemble."""

    def __init__(self, template_type: str, tier: str, cause: Exception):
        self.template_type = template_type
        self.tier = tier
        self.cause = cause
        super().__init__(f"{template_type} template failed during {tier}: {type(cause).__name__}: {cause}")


class UnknownTemplateTypeError(QuotationCoreError):
    """Raised when a company's configured template type is not a known one."""

    def __init__(self, template_type: Any):
        self.template_type = template_type
        super().__init__(f"Unknown template type: {template_type!r}")


NAME_RULES: Tuple[Tuple[str, Callable[[str, str], bool], str], ...] = (
    (MODERN,
     lambda name, combined: 'chembio' in name and 'lifesciences' in name and 'pvt' not in combined,
     'company name contains "chembio lifesciences" without "pvt"'),
    (FORMAL,
     lambda name, combined: 'chembio' in combined and 'lifesciences' in combined and 'pvt' in combined,
     'company name contains "chembio lifesciences" with "pvt"'),
    (TECHNICAL,
     lambda name, combined: 'chemlab' in name or 'synthesis' in name,
     'company name contains "chemlab" or "synthesis"'),
    (MODERN,
     lambda name, combined: 'lifesciences' in combined and 'pvt' not in combined,
     'company name contains "lifesciences" without "pvt"'),
    (FORMAL,
     lambda name, combined: 'lifesciences' in combined and 'pvt' in combined,
     'company name contains "lifesciences" with "pvt"'),
)

COMPANY_ID_TEMPLATES: Dict[str, str] = {
    'chembio-lifesciences': MODERN,
    'chembio-pvt-ltd': FORMAL,
    'chemlab-synthesis': TECHNICAL,
}


@dataclass
class _Decision:
    outcome: str
    template_type: Optional[str] = None
    reason: str = ""


def match_company_name(name: Optional[str], legal_name: Optional[str] = None) -> Optional[Tuple[str, str]]:
    """
    Apply the company-name rules; first match wins.

    Returns:
        (template_type, reason) or None when no rule matches
    """
    normalized = (name or '').lower().strip()
    combined = f"{normalized} {(legal_name or '').lower().strip()}"
    for template_type, predicate, reason in NAME_RULES:
        if predicate(normalized, combined):
            return template_type, reason
    return None


def placeholder_quotation() -> QuotationData:
    """Stand-in quotation used by the default template when none is supplied."""
    return QuotationData(
        bill_to=BillTo(name='N/A', company='N/A', address='N/A', phone='N/A', email='N/A'),
        items=[],
        quotation_ref='N/A',
        quotation_date='N/A',
        company=Company(id='', name='Default Company', legal_name='Default Company'),
    )


def last_resort_tree(company_name: Optional[str], error: BaseException) -> DocumentTree:
    """Static diagnostic document returned when even the default template fails."""
    children = [
        Paragraph(runs=[TextRun("Template Generation Error", bold=True, color="#FF0000", size=28)],
                  spacing=Spacing(after=200)),
        Paragraph(runs=[TextRun(f"Company: {company_name or 'Unknown'}", color="#333333", size=20)],
                  spacing=Spacing(after=100)),
        Paragraph(runs=[TextRun(f"Error: {error or 'Unknown error occurred'}", color="#666666", size=18)],
                  spacing=Spacing(after=100)),
        Paragraph(runs=[TextRun("Please contact technical support for assistance.", color="#333333", size=18)]),
    ]
    return DocumentTree(
        styles=DocumentStyles(font="Calibri", size=22),
        section=Section(page=PageGeometry(), footer=page_footer(DEFAULT_STYLE), children=children),
        template_type=ERROR_TEMPLATE_TYPE,
    )


class TemplateSelector:
    """
    Entry point of the quotation engine.

    Features:
    - Tiered template resolution with per-tier failure isolation
    - Local default template config for companies without one
    - Decision trace attached to every returned tree
    - Never raises: a diagnostic tree is the last resort
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        seal_loader: Optional[SealLoader] = None,
        assemblers: Optional[Mapping[str, Any]] = None,
        config_provider: Callable[[str], TemplateConfig] = default_template_config_for_company,
        templates: Optional[TextTemplates] = None,
    ):
        """
        Initialize the selector.

        Args:
            config: Engine configuration
            seal_loader: Shared seal loader; one is created per generation
                         (and closed afterwards) when omitted
            assemblers: Assemblers keyed by template type (defaults to the
                        built-in modern, formal, technical and default ones)
            config_provider: Returns a default TemplateConfig for a company name
            templates: Text template renderer passed to the builders
        """
        self.config = config or EngineConfig()
        self.seal_loader = seal_loader
        self.assemblers = dict(assemblers or ASSEMBLERS)
        self.config_provider = config_provider
        self.templates = templates

    @asynccontextmanager
    async def _seal_loader_scope(self):
        if self.seal_loader is not None:
            yield self.seal_loader
            return
        async with SealLoader.from_config(self.config) as loader:
            yield loader

    @timed_operation("quotation_core.generate")
    async def generate(self, quotation: QuotationInput) -> DocumentTree:
        """
        Produce the document tree for a quotation.

        Args:
            quotation: QuotationData (or a mapping in document-database form)
                       carrying the issuing company

        Returns:
            DocumentTree; never raises
        """
        trace: List[TraceEntry] = []
        data: Optional[QuotationData] = None
        try:
            data = self._prepare(quotation, trace)
            async with self._seal_loader_scope() as loader:
                tree = await self._resolve(data, trace, loader)
        except Exception as e:
            company_name = data.company.name if data is not None and data.company is not None else None
            logger.error(f"Default template failed, returning error document: {type(e).__name__}: {e}")
            trace.append(TraceEntry(TIER_DEFAULT, FAILED, f"{type(e).__name__}: {e}"))
            trace.append(TraceEntry(TIER_LAST_RESORT, SELECTED, "static error document"))
            tree = last_resort_tree(company_name, e)

        tree.trace = trace
        return tree

    def generate_sync(self, quotation: QuotationInput) -> DocumentTree:
        """Blocking wrapper around ``generate`` for callers without an event loop."""
        return asyncio.run(self.generate(quotation))

    def _prepare(self, quotation: QuotationInput, trace: List[TraceEntry]) -> Optional[QuotationData]:
        """Private deep copy of the input, converted from a mapping if needed."""
        if quotation is None:
            return None
        if isinstance(quotation, QuotationData):
            return copy.deepcopy(quotation)
        if isinstance(quotation, Mapping):
            try:
                return QuotationData.from_dict(copy.deepcopy(dict(quotation)))
            except Exception as e:
                logger.error(f"Could not read quotation data: {type(e).__name__}: {e}")
                trace.append(TraceEntry(TIER_INPUT, FAILED, f"unreadable quotation data: {e}"))
                return None
        logger.error(f"Unsupported quotation input type: {type(quotation).__name__}")
        trace.append(TraceEntry(TIER_INPUT, FAILED, f"unsupported input type {type(quotation).__name__}"))
        return None

    async def _resolve(self, data: Optional[QuotationData], trace: List[TraceEntry], loader: SealLoader) -> DocumentTree:
        if data is None or data.company is None:
            reason = "no quotation data provided" if data is None else "no company data provided"
            logger.error(f"{reason.capitalize()}, using default template")
            if not trace:
                trace.append(TraceEntry(TIER_INPUT, FAILED, reason))
            return await self._default(data, trace, loader)

        self._apply_default_config(data.company, trace)

        tiers = (
            (TIER_CONFIG_TYPE, self._config_type),
            (TIER_NAME, self._name_heuristic),
            (TIER_ID, self._id_lookup),
        )
        for tier, resolver in tiers:
            try:
                decision = resolver(data.company)
            except UnknownTemplateTypeError as e:
                logger.warning(f"{e}; falling back to next tier")
                trace.append(TraceEntry(tier, WARNING, str(e)))
                continue
            except Exception as e:
                logger.error(f"Error in {tier} template selection: {type(e).__name__}: {e}")
                trace.append(TraceEntry(tier, FAILED, f"{type(e).__name__}: {e}"))
                continue

            if decision.template_type is None:
                logger.debug(f"{tier}: {decision.reason}")
                trace.append(TraceEntry(tier, decision.outcome, decision.reason))
                continue

            tree = await self._try_assemble(decision.template_type, tier, data, trace, loader)
            if tree is not None:
                logger.info(f"Selected {decision.template_type} template ({tier}: {decision.reason})")
                trace.append(TraceEntry(tier, SELECTED, f"{decision.template_type}: {decision.reason}"))
                return tree

        return await self._default(data, trace, loader)

    def _apply_default_config(self, company: Company, trace: List[TraceEntry]) -> None:
        if company.template_config is not None:
            return
        if not company.name:
            trace.append(TraceEntry(TIER_TEMPLATE_CONFIG, SKIPPED, "company has no template config and no name"))
            return
        try:
            ensure_template_config(company, self.config_provider)
        except Exception as e:
            logger.error(f"Default template config provider failed: {type(e).__name__}: {e}")
            trace.append(TraceEntry(TIER_TEMPLATE_CONFIG, FAILED, f"{type(e).__name__}: {e}"))
            return
        applied = company.template_config.template_type if company.template_config else None
        logger.warning(f"Company {company.name!r} missing template config, applied default '{applied}'")
        trace.append(TraceEntry(TIER_TEMPLATE_CONFIG, WARNING, f"missing template config, applied default '{applied}'"))

    def _config_type(self, company: Company) -> _Decision:
        template_config = company.template_config
        if template_config is None or not template_config.template_type:
            return _Decision(SKIPPED, reason="no template type configured")
        if not is_known_template_type(template_config.template_type):
            raise UnknownTemplateTypeError(template_config.template_type)
        return _Decision(SELECTED, template_config.template_type, "configured template type")

    def _name_heuristic(self, company: Company) -> _Decision:
        if not company.name:
            return _Decision(SKIPPED, reason="company has no name")
        match = match_company_name(company.name, company.legal_name)
        if match is None:
            return _Decision(NO_MATCH, reason=f"no name rule matched {company.name!r}")
        template_type, reason = match
        return _Decision(SELECTED, template_type, reason)

    def _id_lookup(self, company: Company) -> _Decision:
        if not company.id:
            return _Decision(SKIPPED, reason="company has no id")
        template_type = COMPANY_ID_TEMPLATES.get(company.id)
        if template_type is None:
            return _Decision(NO_MATCH, reason=f"no template mapped to company id {company.id!r}")
        return _Decision(SELECTED, template_type, f"company id {company.id!r}")

    async def _try_assemble(self, template_type: str, tier: str, data: QuotationData,
                            trace: List[TraceEntry], loader: SealLoader) -> Optional[DocumentTree]:
        assembler = self.assemblers.get(template_type)
        try:
            if assembler is None:
                raise KeyError(f"no assembler registered for {template_type!r}")
            return await assembler.assemble(data, config=self.config, seal_loader=loader, templates=self.templates)
        except Exception as e:
            error = TemplateResolutionError(template_type, tier, e)
            logger.error(str(error))
            trace.append(TraceEntry(tier, FAILED, str(error)))
            return None

    async def _default(self, data: Optional[QuotationData], trace: List[TraceEntry], loader: SealLoader) -> DocumentTree:
        """Default template; its failures propagate to the last-resort handler."""
        if data is None:
            logger.warning("No quotation data provided, creating minimal template")
            data = placeholder_quotation()
        tree = await self.assemblers[DEFAULT].assemble(data, config=self.config, seal_loader=loader,
                                                        templates=self.templates)
        logger.info("Selected default template")
        trace.append(TraceEntry(TIER_DEFAULT, SELECTED, "default template"))
        return tree


async def generate_document(quotation: QuotationInput, config: Optional[EngineConfig] = None,
                            seal_loader: Optional[SealLoader] = None) -> DocumentTree:
    """Generate a document with a one-off TemplateSelector."""
    return await TemplateSelector(config=config, seal_loader=seal_loader).generate(quotation)


def generate_document_sync(quotation: QuotationInput, config: Optional[EngineConfig] = None) -> DocumentTree:
    """Blocking variant of ``generate_document``."""
    return TemplateSelector(config=config).generate_sync(quotation)
