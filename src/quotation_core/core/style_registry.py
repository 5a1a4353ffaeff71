"""
Style registry for quotation templates.

Static palettes, typography and spacing tokens for the three brand styles
(modern, formal, technical) plus the neutral default, and small helpers to
derive colors and apply configuration overrides.
"""

import logging
from dataclasses import dataclass, field, replace, fields
from typing import Any, Dict, Mapping, Optional

from .document_tree import Margins

logger = logging.getLogger(__name__)


MODERN = "modern"
FORMAL = "formal"
TECHNICAL = "technical"
DEFAULT = "default"

KNOWN_TEMPLATE_TYPES = (MODERN, FORMAL, TECHNICAL)


@dataclass(frozen=True)
class FontSpec:
    family: str
    size: int  # half-points
    bold: bool = False


@dataclass(frozen=True)
class Palette:
    primary: str
    secondary: str
    accent: str
    border: str
    background: str
    text: str
    header_text: str = "#FFFFFF"
    alternate_row: str = "#F8F9FA"


@dataclass(frozen=True)
class Typography:
    header: FontSpec
    title: FontSpec
    body: FontSpec
    table: FontSpec
    label: FontSpec
    small: FontSpec
    mono: FontSpec


@dataclass(frozen=True)
class SpacingTokens:
    section_before: int
    section_after: int
    cell_margins: Margins = field(default_factory=lambda: Margins(60, 60, 120, 120))
    banner_margins: Margins = field(default_factory=lambda: Margins(100, 100, 150, 150))


@dataclass(frozen=True)
class CompanyFallbacks:
    """Literal text used by the header and signature when company fields are missing."""

    name: str
    address_line1: str
    address_line2: str
    email: str
    phone: str
    pan: str
    gst: str


@dataclass(frozen=True)
class BrandStyle:
    """All visual tokens for one template type."""

    template_type: str
    label: str
    colors: Palette
    typography: Typography
    spacing: SpacingTokens
    fallbacks: CompanyFallbacks

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "BrandStyle":
        """
        Return a copy with palette or typography entries replaced.

        Args:
            overrides: Mapping with optional ``colors`` (name -> hex) and
                       ``typography`` (role -> {family, size, bold}) sections

        Returns:
            New BrandStyle; unknown keys are logged and ignored
        """
        if not overrides:
            return self

        colors = self.colors
        color_overrides = dict(overrides.get("colors", {}) or {})
        if color_overrides:
            known = {f.name for f in fields(Palette)}
            for key in set(color_overrides) - known:
                logger.warning(f"Ignoring unknown color override '{key}' for {self.template_type}")
            colors = replace(colors, **{k: v for k, v in color_overrides.items() if k in known})

        typography = self.typography
        font_overrides = dict(overrides.get("typography", {}) or {})
        if font_overrides:
            updated = {}
            for role, spec in font_overrides.items():
                current = getattr(typography, role, None)
                if current is None or not isinstance(spec, Mapping):
                    logger.warning(f"Ignoring unknown typography override '{role}' for {self.template_type}")
                    continue
                updated[role] = replace(current, **{k: v for k, v in spec.items() if k in ("family", "size", "bold")})
            typography = replace(typography, **updated)

        return replace(self, colors=colors, typography=typography)


def alternate_row_shading(base_color: str, factor: float = 0.92) -> str:
    """
    Derive a light row-shading color by mixing ``base_color`` toward white.

    Args:
        base_color: Hex color, with or without leading '#'
        factor: 0.0 keeps the base color, 1.0 gives white

    Returns:
        '#RRGGBB' string; unparseable input yields the neutral '#F2F2F2'
    """
    value = (base_color or "").lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    try:
        red, green, blue = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return "#F2F2F2"
    if len(value) != 6:
        return "#F2F2F2"

    factor = min(max(factor, 0.0), 1.0)
    mixed = (round(channel + (255 - channel) * factor) for channel in (red, green, blue))
    return "#" + "".join(f"{channel:02X}" for channel in mixed)


_CHEMBIO_FALLBACKS = dict(
    address_line1="L-10, Himalaya Legend, Nyay Khand-1, Indirapuram",
    address_line2="Ghaziabad - 201014",
    email="chembio.sales@gmail.com",
    phone="0120-4909400",
    pan="AALFC0922C",
    gst="09AALFC0922C1ZU",
)


BRAND_STYLES: Dict[str, BrandStyle] = {
    MODERN: BrandStyle(
        template_type=MODERN,
        label="Chembio Lifesciences - Modern Template",
        colors=Palette(
            primary="#0066CC",
            secondary="#F8F9FA",
            accent="#E3F2FD",
            border="#E3F2FD",
            background="#FFFFFF",
            text="#333333",
            alternate_row="#F8F9FA",
        ),
        typography=Typography(
            header=FontSpec("Calibri", 24),
            title=FontSpec("Calibri", 36, bold=True),
            body=FontSpec("Calibri", 18),
            table=FontSpec("Calibri", 16),
            label=FontSpec("Calibri", 18, bold=True),
            small=FontSpec("Calibri", 14),
            mono=FontSpec("Calibri", 16),
        ),
        spacing=SpacingTokens(section_before=400, section_after=200),
        fallbacks=CompanyFallbacks(name="CHEMBIO LIFESCIENCES", **_CHEMBIO_FALLBACKS),
    ),
    FORMAL: BrandStyle(
        template_type=FORMAL,
        label="Chembio Lifesciences Pvt. Ltd. - Formal Template",
        colors=Palette(
            primary="#001F3F",
            secondary="#D4AF37",
            accent="#F5F5DC",
            border="#001F3F",
            background="#FFFFFF",
            text="#333333",
            alternate_row="#F8F9FA",
        ),
        typography=Typography(
            header=FontSpec("Times New Roman", 22),
            title=FontSpec("Times New Roman", 32, bold=True),
            body=FontSpec("Times New Roman", 18),
            table=FontSpec("Times New Roman", 16),
            label=FontSpec("Times New Roman", 18, bold=True),
            small=FontSpec("Times New Roman", 14),
            mono=FontSpec("Times New Roman", 16),
        ),
        spacing=SpacingTokens(
            section_before=200,
            section_after=200,
            cell_margins=Margins(80, 80, 150, 150),
            banner_margins=Margins(150, 150, 200, 200),
        ),
        fallbacks=CompanyFallbacks(name="CHEMBIO LIFESCIENCES PVT. LTD.", **_CHEMBIO_FALLBACKS),
    ),
    TECHNICAL: BrandStyle(
        template_type=TECHNICAL,
        label="Chemlab Synthesis - Technical Template",
        colors=Palette(
            primary="#2E7D32",
            secondary="#E8F5E8",
            accent="#C8E6C9",
            border="#A5D6A7",
            background="#F1F8E9",
            text="#1B5E20",
            alternate_row="#FAFAFA",
        ),
        typography=Typography(
            header=FontSpec("Arial", 20),
            title=FontSpec("Arial", 28, bold=True),
            body=FontSpec("Arial", 16),
            table=FontSpec("Arial", 14),
            label=FontSpec("Arial", 16, bold=True),
            small=FontSpec("Arial", 14),
            mono=FontSpec("Consolas", 14),
        ),
        spacing=SpacingTokens(
            section_before=150,
            section_after=150,
            cell_margins=Margins(40, 40, 80, 80),
            banner_margins=Margins(80, 80, 100, 100),
        ),
        fallbacks=CompanyFallbacks(
            name="CHEMLAB SYNTHESIS",
            address_line1="GROUND FLOOR, AQ 2-10, BTTP PARK, SECTOR-81, GR. FARIDABAD-121001, FARIDABAD",
            address_line2="HARYANA - 121001",
            email="chemlab.sales@gmail.com",
            phone="+91-9911998473",
            pan="AANFC1381M",
            gst="06AANFC1381M1Z6",
        ),
    ),
}


DEFAULT_STYLE = BrandStyle(
    template_type=DEFAULT,
    label="Default Template",
    colors=Palette(
        primary="#1F497D",
        secondary="#4B5563",
        accent="#0066CC",
        border="#E5E7EB",
        background="#FFFFFF",
        text="#000000",
        alternate_row="#F2F2F2",
    ),
    typography=Typography(
        header=FontSpec("Calibri", 24, bold=True),
        title=FontSpec("Calibri", 32, bold=True),
        body=FontSpec("Calibri", 22),
        table=FontSpec("Calibri", 16),
        label=FontSpec("Calibri", 16, bold=True),
        small=FontSpec("Calibri", 20),
        mono=FontSpec("Calibri", 16),
    ),
    spacing=SpacingTokens(
        section_before=200,
        section_after=200,
        cell_margins=Margins(72, 72, 144, 144),
        banner_margins=Margins(60, 60, 100, 100),
    ),
    fallbacks=CompanyFallbacks(
        name="CHEMBIO LIFESCIENCES",
        address_line1="L-10, Himalaya Legend, Nyay Khand-1",
        address_line2="Indirapuram, Ghaziabad - 201014",
        email="chembio.sales@gmail.com",
        phone="0120-4909400",
        pan="AALFC0922C",
        gst="09AALFC0922C1ZU",
    ),
)


def get_style(template_type: Optional[str], overrides: Optional[Mapping[str, Mapping[str, Any]]] = None) -> BrandStyle:
    """
    Look up the style for a template type.

    Args:
        template_type: modern, formal, technical or default; anything else
                       resolves to the default style
        overrides: Optional per-template overrides (see BrandStyle.with_overrides)

    Returns:
        BrandStyle for the template type
    """
    style = BRAND_STYLES.get(template_type or "", DEFAULT_STYLE)
    if overrides and style.template_type in overrides:
        style = style.with_overrides(overrides[style.template_type])
    return style


def is_known_template_type(template_type: Optional[str]) -> bool:
    return template_type in KNOWN_TEMPLATE_TYPES
