"""
Quotation Core Library

Composes branded quotation documents as in-memory document trees.

Main exports:
- TemplateSelector: Resolves the brand template and generates the document
- QuotationData / Company: Input records
- DocumentTree: Generated document, ready for an external packer
- EngineConfig: Locale, seal loading and style override settings
"""

import os

from .config import ConfigurationError, EngineConfig
from .core import (
    Company, DocumentTree, LineItem, MissingQuotationError, QuotationData, SealLoadError,
    TemplateResolutionError, TemplateSelector, UnknownTemplateTypeError, generate_document,
    generate_document_sync,
)
from .exceptions import QuotationCoreError
from .logging import configure_logging_from_env, setup_logging

__version__ = "1.0.0"

# Library logging stays unconfigured unless explicitly requested
if os.getenv('QUOTATION_CORE_LOG_LEVEL'):
    configure_logging_from_env()

__all__ = [
    "TemplateSelector",
    "generate_document",
    "generate_document_sync",
    "Company",
    "QuotationData",
    "LineItem",
    "DocumentTree",
    "EngineConfig",
    "ConfigurationError",
    "QuotationCoreError",
    "MissingQuotationError",
    "SealLoadError",
    "TemplateResolutionError",
    "UnknownTemplateTypeError",
    "setup_logging",
]
