"""
Default template configurations for companies that do not carry one.
"""

import copy
import logging
from typing import Any, Dict, List

from .content_types import Company, TemplateConfig
from .style_registry import FORMAL, MODERN, TECHNICAL

logger = logging.getLogger(__name__)


DEFAULT_COLOR_SCHEMES: Dict[str, Dict[str, str]] = {
    MODERN: {
        'primary': '#0066CC',
        'secondary': '#F8F9FA',
        'accent': '#E3F2FD',
        'background': '#FFFFFF',
        'text': '#333333',
        'border': '#E3F2FD',
    },
    FORMAL: {
        'primary': '#001F3F',
        'secondary': '#D4AF37',
        'accent': '#F5F5DC',
        'background': '#FFFFFF',
        'text': '#000000',
        'border': '#001F3F',
    },
    TECHNICAL: {
        'primary': '#2E7D32',
        'secondary': '#E8F5E8',
        'accent': '#C8E6C9',
        'background': '#FFFFFF',
        'text': '#1B5E20',
        'border': '#4CAF50',
    },
}

DEFAULT_TYPOGRAPHY: Dict[str, Dict[str, Dict[str, Any]]] = {
    MODERN: {
        'headerFont': {'family': 'Calibri', 'size': 24, 'weight': 'bold'},
        'bodyFont': {'family': 'Calibri', 'size': 18},
        'tableFont': {'family': 'Calibri', 'size': 16},
        'accentFont': {'family': 'Calibri', 'size': 20, 'weight': 'bold'},
    },
    FORMAL: {
        'headerFont': {'family': 'Times New Roman', 'size': 26, 'weight': 'bold'},
        'bodyFont': {'family': 'Times New Roman', 'size': 18},
        'tableFont': {'family': 'Times New Roman', 'size': 16},
        'accentFont': {'family': 'Times New Roman', 'size': 22, 'weight': 'bold'},
    },
    TECHNICAL: {
        'headerFont': {'family': 'Arial', 'size': 22, 'weight': 'bold'},
        'bodyFont': {'family': 'Arial', 'size': 16},
        'tableFont': {'family': 'Consolas', 'size': 14},
        'accentFont': {'family': 'Arial', 'size': 18, 'weight': 'bold'},
    },
}

DEFAULT_SPACING: Dict[str, Dict[str, int]] = {
    MODERN: {'headerPadding': 200, 'sectionMargin': 200, 'tableCellPadding': 80, 'lineHeight': 240},
    FORMAL: {'headerPadding': 150, 'sectionMargin': 180, 'tableCellPadding': 100, 'lineHeight': 220},
    TECHNICAL: {'headerPadding': 120, 'sectionMargin': 160, 'tableCellPadding': 60, 'lineHeight': 200},
}

SECTION_ORDER: List[str] = ['header', 'title', 'client', 'items', 'terms', 'signature', 'bank']

_HEADER_STYLES = {MODERN: 'centered', FORMAL: 'split', TECHNICAL: 'left-aligned'}
_TABLE_STYLES = {MODERN: 'modern-grid', FORMAL: 'formal-lines', TECHNICAL: 'technical-data'}
_EMPHASIZED_FIELDS = {
    MODERN: ['leadTime', 'specifications'],
    FORMAL: ['compliance', 'terms'],
    TECHNICAL: ['casNumber', 'specifications', 'research'],
}


def create_default_template_config(template_type: str) -> TemplateConfig:
    """
    Build a fresh default TemplateConfig for a template type.

    Args:
        template_type: modern, formal or technical

    Returns:
        New TemplateConfig; callers may mutate it freely

    Raises:
        ValueError: If template_type is not one of the known types
    """
    if template_type not in DEFAULT_COLOR_SCHEMES:
        raise ValueError(f"No default template config for template type: {template_type}")

    return TemplateConfig(
        template_type=template_type,
        layout=template_type,
        header_style=_HEADER_STYLES[template_type],
        table_style=_TABLE_STYLES[template_type],
        color_scheme=dict(DEFAULT_COLOR_SCHEMES[template_type]),
        typography=copy.deepcopy(DEFAULT_TYPOGRAPHY[template_type]),
        spacing=dict(DEFAULT_SPACING[template_type]),
        section_order=list(SECTION_ORDER),
        customizations={
            'showLogo': True,
            'emphasizeFields': list(_EMPHASIZED_FIELDS[template_type]),
            'sectionOrder': list(SECTION_ORDER),
        },
    )


def default_template_config_for_company(company_name: str) -> TemplateConfig:
    """Pick a default template config from the company name; modern when nothing matches."""
    name = (company_name or '').lower()

    if 'lifesciences' in name and 'pvt' not in name:
        return create_default_template_config(MODERN)
    if 'lifesciences' in name and 'pvt' in name:
        return create_default_template_config(FORMAL)
    if 'chemlab' in name or 'synthesis' in name:
        return create_default_template_config(TECHNICAL)
    return create_default_template_config(MODERN)


def ensure_template_config(company: Company, provider=default_template_config_for_company) -> Company:
    """
    Fill in a missing template config on ``company`` in place.

    Companies without a name are left untouched. Callers pass a copy; the
    stored company record is never modified.
    """
    if company.template_config is None and company.name:
        company.template_config = provider(company.name)
        logger.debug(f"Applied default template config '{company.template_config.template_type}' to {company.name}")
    return company
