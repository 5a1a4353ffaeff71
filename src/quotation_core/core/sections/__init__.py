"""
Per-brand section builders.
"""

from typing import Dict

from . import default, formal, modern, technical
from .common import (
    BuildContext,
    MissingQuotationError,
    SectionBuilders,
    SectionResult,
    build_section,
    build_section_async,
    placeholder,
)

SECTION_BUILDERS: Dict[str, SectionBuilders] = {
    builders.template_type: builders
    for builders in (modern.BUILDERS, formal.BUILDERS, technical.BUILDERS, default.BUILDERS)
}

__all__ = [
    "BuildContext",
    "MissingQuotationError",
    "SectionBuilders",
    "SectionResult",
    "SECTION_BUILDERS",
    "build_section",
    "build_section_async",
    "placeholder",
]
