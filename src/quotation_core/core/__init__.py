"""
Core quotation composition modules.

Contains the main business logic for:
- Template selection and fallback
- Document assembly and per-brand section builders
- Brand styles, formatting and seal loading
"""

from .assembler import ASSEMBLERS, DocumentAssembler, get_assembler
from .content_types import (
    Address, BankDetails, BillTo, Branding, Company, ContactInfo, Employee, LineItem,
    QuotationData, TaxInfo, TemplateConfig,
)
from .defaults import create_default_template_config, default_template_config_for_company, ensure_template_config
from .document_tree import DocumentTree, TraceEntry
from .formatters import format_currency, format_date
from .seal_loader import SealImage, SealLoader, SealLoadError
from .sections import MissingQuotationError, SectionResult
from .style_registry import BrandStyle, alternate_row_shading, get_style
from .template_selector import (
    TemplateResolutionError, TemplateSelector, UnknownTemplateTypeError,
    generate_document, generate_document_sync,
)
from .text_templates import TextTemplates

__all__ = [
    "ASSEMBLERS",
    "DocumentAssembler",
    "get_assembler",
    "Address",
    "BankDetails",
    "BillTo",
    "Branding",
    "Company",
    "ContactInfo",
    "Employee",
    "LineItem",
    "QuotationData",
    "TaxInfo",
    "TemplateConfig",
    "create_default_template_config",
    "default_template_config_for_company",
    "ensure_template_config",
    "DocumentTree",
    "TraceEntry",
    "format_currency",
    "format_date",
    "SealImage",
    "SealLoader",
    "SealLoadError",
    "MissingQuotationError",
    "SectionResult",
    "BrandStyle",
    "alternate_row_shading",
    "get_style",
    "TemplateResolutionError",
    "TemplateSelector",
    "UnknownTemplateTypeError",
    "generate_document",
    "generate_document_sync",
    "TextTemplates",
]
