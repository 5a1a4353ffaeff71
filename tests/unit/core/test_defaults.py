"""
Tests for default template configurations.
"""

import pytest

from quotation_core.core.content_types import Company, TemplateConfig
from quotation_core.core.defaults import (
    SECTION_ORDER, create_default_template_config, default_template_config_for_company,
    ensure_template_config,
)


class TestCreateDefaultTemplateConfig:
    """Test create_default_template_config."""

    @pytest.mark.parametrize("template_type,primary", [
        ("modern", "#0066CC"),
        ("formal", "#001F3F"),
        ("technical", "#2E7D32"),
    ])
    def test_known_types(self, template_type, primary):
        """Test each known type gets its palette and the shared section order."""
        config = create_default_template_config(template_type)
        assert config.template_type == template_type
        assert config.color_scheme["primary"] == primary
        assert config.section_order == SECTION_ORDER
        assert config.customizations["showLogo"] is True

    def test_returns_fresh_copies(self):
        """Test mutating one config does not leak into the next."""
        first = create_default_template_config("modern")
        first.color_scheme["primary"] = "#000000"
        first.typography["bodyFont"]["size"] = 99

        second = create_default_template_config("modern")
        assert second.color_scheme["primary"] == "#0066CC"
        assert second.typography["bodyFont"]["size"] == 18

    def test_unknown_type(self):
        """Test unknown types are rejected."""
        with pytest.raises(ValueError, match="retro"):
            create_default_template_config("retro")


class TestDefaultForCompany:
    """Test the company-name based default."""

    @pytest.mark.parametrize("name,expected", [
        ("Chembio Lifesciences", "modern"),
        ("Chembio Lifesciences Pvt. Ltd.", "formal"),
        ("Chemlab Synthesis", "technical"),
        ("Acme Synthesis Works", "technical"),
        ("Acme Trading Co", "modern"),
        ("", "modern"),
    ])
    def test_name_rules(self, name, expected):
        """Test name matching picks the expected template type."""
        assert default_template_config_for_company(name).template_type == expected


class TestEnsureTemplateConfig:
    """Test ensure_template_config."""

    def test_applies_when_missing(self):
        """Test a nameful company without config gets one."""
        company = Company(name="Chemlab Synthesis")
        ensure_template_config(company)
        assert company.template_config.template_type == "technical"

    def test_keeps_existing(self):
        """Test an existing config is left alone."""
        existing = TemplateConfig(template_type="formal")
        company = Company(name="Chemlab Synthesis", template_config=existing)
        ensure_template_config(company)
        assert company.template_config is existing

    def test_nameless_company_untouched(self):
        """Test companies without a name are not defaulted."""
        company = Company(id="x")
        ensure_template_config(company)
        assert company.template_config is None

    def test_custom_provider(self):
        """Test an injected provider is used."""
        calls = []

        def provider(name):
            calls.append(name)
            return TemplateConfig(template_type="formal")

        company = Company(name="Acme")
        ensure_template_config(company, provider)
        assert calls == ["Acme"]
        assert company.template_config.template_type == "formal"
