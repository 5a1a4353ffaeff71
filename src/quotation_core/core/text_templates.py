"""
Boilerplate text for quotation sections.

Terms, bank details, the reference line and the "created by" block are
plain-text Jinja2 templates. Builders render them to lines and style the
lines themselves.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import DictLoader, Environment, TemplateNotFound, Undefined

from .formatters import format_date

logger = logging.getLogger(__name__)


BUILTIN_TEMPLATES: Dict[str, str] = {
    "reference.txt": (
        "Ref No: {{ quotation_ref | default('N/A') }}\n"
        "\tDate: {{ quotation_date | format_date | default('N/A') }}\n"
    ),
    "modern_terms.txt": (
        "• Payment Terms: {{ payment_terms | default('100% advance payment required') }}\n"
        "• Delivery: {{ delivery_terms | default('Ex-works, subject to availability') }}\n"
        "• Validity: {{ validity_period | default('30 days from quotation date') }}\n"
        "• Lead Time: As mentioned against each item, subject to confirmation\n"
        "• Quality: All products are guaranteed for quality and specifications\n"
    ),
    "numbered_terms.txt": (
        "1) Payment Terms: {{ payment_terms | default('100% advance payment') }}\n"
        "{% for line in note_lines %}\n"
        "{{ loop.index + 1 }}) {{ line }}\n"
        "{% endfor %}\n"
    ),
    "technical_terms.txt": (
        "1. Validity: {{ validity_period | default('30 Days') }}\n"
        "2. Lead Time: Please check individual items for their lead time\n"
        "3. Order once placed will not be cancelled\n"
        "{% set first_note = 5 if payment_terms else 4 %}\n"
        "{% if payment_terms %}\n"
        "4. Payment Terms: {{ payment_terms }}\n"
        "{% endif %}\n"
        "{% for line in note_lines %}\n"
        "{{ first_note + loop.index0 }}. {{ line }}\n"
        "{% endfor %}\n"
    ),
    "bank_details.txt": (
        "Bank Name: {{ bank.bank_name }}\n"
        "Account No: {{ bank.account_no }}\n"
        "NEFT/RTGS IFSC: {{ bank.ifsc_code }}\n"
        "Branch Code: {{ bank.branch_code }} | Micro Code: {{ bank.micro_code }}\n"
        "Account Type: {{ bank.account_type }}\n"
    ),
    "created_by.txt": (
        "{{ employee.name }}\n"
        "Mobile: {{ employee.phone }}\n"
        "Email: {{ employee.email }}\n"
    ),
}

_LEADING_NUMBER = re.compile(r"^\d+\.\s*")


class TextTemplates:
    """
    Jinja2 renderer for section boilerplate.

    Features:
    - Built-in templates for every brand, overridable per name
    - ``default`` filter that treats None and empty strings as missing
    - ``format_date`` filter rendering dd/mm/yyyy
    """

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        """
        Initialize the renderer.

        Args:
            templates: Optional mapping of template name to source that
                       replaces built-in templates of the same name
        """
        sources = dict(BUILTIN_TEMPLATES)
        if templates:
            sources.update(templates)

        self.jinja_env = Environment(
            loader=DictLoader(sources),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.jinja_env.filters['default'] = self._default_filter
        self.jinja_env.filters['format_date'] = format_date

    def _default_filter(self, value, default_value=""):
        """Custom default filter that handles None, undefined and empty strings."""
        if value is None or isinstance(value, Undefined) or value == "":
            return default_value
        return value

    def render(self, name: str, **context: Any) -> str:
        """
        Render one template to text.

        Raises:
            TemplateNotFound: If no template with that name exists
        """
        try:
            template = self.jinja_env.get_template(name)
        except TemplateNotFound:
            logger.error(f"Text template not found: {name}")
            raise
        return template.render(**context)

    def render_lines(self, name: str, **context: Any) -> List[str]:
        """Render a template and return its non-blank lines."""
        return [line for line in self.render(name, **context).splitlines() if line.strip()]


_text_templates: Optional[TextTemplates] = None


def get_text_templates() -> TextTemplates:
    """Shared renderer with the built-in templates."""
    global _text_templates
    if _text_templates is None:
        _text_templates = TextTemplates()
    return _text_templates


def split_note_lines(notes: Optional[str]) -> List[str]:
    """
    Turn free-form quotation notes into term lines.

    Drops blank lines and a "Terms & Conditions:" heading, strips any
    leading "N. " numbering, and skips a first line about payment terms
    (payment terms are always printed as term 1).
    """
    if not notes:
        return []

    lines = []
    first = True
    for raw in notes.split("\n"):
        stripped = raw.strip()
        if not stripped or stripped == "Terms & Conditions:":
            continue
        cleaned = _LEADING_NUMBER.sub("", stripped)
        if first:
            first = False
            if "payment terms" in cleaned.lower():
                continue
        lines.append(cleaned)
    return lines


def split_label(line: str) -> Tuple[str, str]:
    """Split 'Label: value' at the first colon; lines without one return ('', line)."""
    label, sep, value = line.partition(": ")
    if not sep:
        return "", line
    return label + ": ", value
