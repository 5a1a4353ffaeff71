"""
Tests for TemplateSelector.
"""

import asyncio
import logging

import pytest

from quotation_core import TemplateSelector, generate_document
from quotation_core.core.assembler import ASSEMBLERS
from quotation_core.core.content_types import Company, QuotationData, TemplateConfig
from quotation_core.core.formatters import format_currency
from quotation_core.core.sections.common import DOCUMENT_TITLE, SEAL_FAILED_COLOR
from quotation_core.core.template_selector import (
    ERROR_TEMPLATE_TYPE, last_resort_tree, match_company_name, placeholder_quotation,
)
from tests.utils.helpers import (
    SEAL_URL, UNREACHABLE_SEAL_URL, all_text, banner_fill, find_images, find_runs, items_table,
)


class BrokenAssembler:
    """Assembler stand-in that always fails."""

    def __init__(self, template_type="broken"):
        self.template_type = template_type
        self.calls = 0

    async def assemble(self, quotation, config=None, seal_loader=None, templates=None):
        self.calls += 1
        raise RuntimeError("boom")


def outcomes(tree):
    return [(entry.tier, entry.outcome) for entry in tree.trace]


class TestScenarios:
    """End-to-end generation scenarios."""

    @pytest.mark.asyncio
    async def test_modern_company(self, selector, quotation):
        """Test a configured modern company renders the modern brand."""
        tree = await selector.generate(quotation)

        assert tree.template_type == "modern"
        assert banner_fill(tree) == "#0066CC"
        table = items_table(tree)
        assert len(table.rows) == 1 + 1 + 4
        assert table.rows[0].is_header
        assert outcomes(tree) == [("config_type", "selected")]

    @pytest.mark.asyncio
    async def test_formal_company_without_items(self, selector, quotation_data, formal_company_data):
        """Test an empty items list still yields header and summary rows."""
        data = dict(quotation_data, company=formal_company_data, items=[],
                    subTotal=0, tax=0, roundOff=0, grandTotal=0)
        tree = await selector.generate(data)

        assert tree.template_type == "formal"
        table = items_table(tree)
        assert len(table.rows) == 5
        assert [row.cells[1].text for row in table.rows[1:]] == [format_currency(0)] * 4

    @pytest.mark.asyncio
    async def test_company_none_equals_default(self, selector, quotation_data):
        """Test a missing company produces the default template output."""
        data = dict(quotation_data, company=None)
        tree = await selector.generate(data)
        expected = await ASSEMBLERS["default"].assemble(QuotationData.from_dict(data))

        assert tree == expected
        assert tree.template_type == "default"
        assert outcomes(tree) == [("input", "failed"), ("default", "selected")]

    @pytest.mark.asyncio
    async def test_unreachable_seal(self, selector, quotation_data, modern_company_data):
        """Test an unreachable seal degrades to the red placeholder."""
        company = dict(modern_company_data, branding={"primaryColor": "#0066CC", "sealImageUrl": UNREACHABLE_SEAL_URL})
        tree = await selector.generate(dict(quotation_data, company=company))

        runs = find_runs(tree.children, "[Company Seal - Image Load Failed]")
        assert len(runs) == 1
        assert runs[0].color == SEAL_FAILED_COLOR
        assert not find_images(tree.children)
        assert tree.template_type == "modern"

    @pytest.mark.asyncio
    async def test_seal_embedded(self, selector, quotation_data, modern_company_data):
        """Test a reachable seal is embedded."""
        company = dict(modern_company_data, branding={"sealImageUrl": SEAL_URL})
        tree = await selector.generate(dict(quotation_data, company=company))
        assert len(find_images(tree.children)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fixture_name", ["modern_company_data", "formal_company_data", "technical_company_data"])
    async def test_empty_bill_to(self, selector, quotation_data, request, fixture_name):
        """Test empty bill-to fields render '-' across the three brands."""
        company = request.getfixturevalue(fixture_name)
        bill_to = {"name": "", "company": "", "address": "", "phone": "", "email": ""}
        tree = await selector.generate(dict(quotation_data, company=company, billTo=bill_to))

        text = all_text(tree)
        assert "Acme Research Labs" not in text
        assert "-" in text.split("\n")


class TestTiers:
    """Test tier resolution and the decision trace."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fixture_name,template_type,primary", [
        ("modern_company_data", "modern", "#0066CC"),
        ("formal_company_data", "formal", "#001F3F"),
        ("technical_company_data", "technical", "#2E7D32"),
    ])
    async def test_known_types_use_registry_primary(self, selector, quotation_data, request,
                                                    fixture_name, template_type, primary):
        """Test configured types color the header and record no fallback tiers."""
        company = request.getfixturevalue(fixture_name)
        tree = await selector.generate(dict(quotation_data, company=company))

        assert tree.template_type == template_type
        assert banner_fill(tree) == primary
        assert outcomes(tree) == [("config_type", "selected")]

    @pytest.mark.asyncio
    async def test_unknown_type_falls_back_with_warning(self, selector, quotation_data, caplog):
        """Test an unknown type yields the default output and a warning."""
        company = {"id": "acme", "name": "Acme Trading", "templateConfig": {"templateType": "retro"}}
        data = dict(quotation_data, company=company)

        with caplog.at_level(logging.WARNING):
            tree = await selector.generate(data)

        expected = await ASSEMBLERS["default"].assemble(QuotationData.from_dict(data))
        assert tree == expected
        assert outcomes(tree) == [
            ("config_type", "warning"),
            ("name_heuristic", "no_match"),
            ("id_lookup", "no_match"),
            ("default", "selected"),
        ]
        assert any("retro" in record.getMessage() and record.levelno == logging.WARNING
                   for record in caplog.records)

    @pytest.mark.asyncio
    async def test_missing_template_config_defaulted(self, selector, quotation):
        """Test a company without template config still gets a full document."""
        quotation.company = Company(name="Chemlab Synthesis")
        tree = await selector.generate(quotation)

        assert tree.children
        assert DOCUMENT_TITLE in all_text(tree)
        assert tree.template_type == "technical"
        assert outcomes(tree) == [("template_config", "warning"), ("config_type", "selected")]

    @pytest.mark.asyncio
    async def test_input_not_mutated(self, selector, quotation):
        """Test defaulting is applied to a private copy."""
        quotation.company = Company(name="Chemlab Synthesis")
        await selector.generate(quotation)
        assert quotation.company.template_config is None

    @pytest.mark.asyncio
    async def test_name_heuristic(self, selector, quotation):
        """Test the company name picks the template when no type is configured."""
        quotation.company = Company(name="Chembio Lifesciences", template_config=TemplateConfig())
        tree = await selector.generate(quotation)

        assert tree.template_type == "modern"
        assert outcomes(tree) == [("config_type", "skipped"), ("name_heuristic", "selected")]

    @pytest.mark.asyncio
    async def test_id_lookup(self, selector, quotation):
        """Test the company id is the last tier before the default."""
        quotation.company = Company(id="chembio-pvt-ltd", name="Acme", template_config=TemplateConfig())
        tree = await selector.generate(quotation)

        assert tree.template_type == "formal"
        assert outcomes(tree) == [
            ("config_type", "skipped"), ("name_heuristic", "no_match"), ("id_lookup", "selected"),
        ]

    @pytest.mark.asyncio
    async def test_assembler_failure_falls_through(self, quotation):
        """Test a failing brand assembler moves on to the next tier."""
        broken = BrokenAssembler("modern")
        selector = TemplateSelector(assemblers=dict(ASSEMBLERS, modern=broken))
        tree = await selector.generate(quotation)

        assert tree.template_type == "default"
        assert broken.calls == 3
        assert outcomes(tree) == [
            ("config_type", "failed"),
            ("name_heuristic", "failed"),
            ("id_lookup", "failed"),
            ("default", "selected"),
        ]
        assert "boom" in tree.trace[0].reason
        assert "boom" not in all_text(tree)

    @pytest.mark.asyncio
    async def test_default_failure_returns_error_tree(self, quotation):
        """Test the last-resort document when the default template fails."""
        quotation.company = Company(name="Acme Trading", template_config=TemplateConfig(template_type="retro"))
        selector = TemplateSelector(assemblers=dict(ASSEMBLERS, default=BrokenAssembler("default")))
        tree = await selector.generate(quotation)

        text = all_text(tree)
        assert tree.template_type == ERROR_TEMPLATE_TYPE
        assert "Template Generation Error" in text
        assert "Company: Acme Trading" in text
        assert "Error: boom" in text
        assert outcomes(tree)[-2:] == [("default", "failed"), ("last_resort", "selected")]

    @pytest.mark.asyncio
    async def test_custom_config_provider(self, selector, quotation):
        """Test the default-config provider is injectable."""
        selector.config_provider = lambda name: TemplateConfig(template_type="formal")
        quotation.company = Company(name="Acme Trading")
        tree = await selector.generate(quotation)
        assert tree.template_type == "formal"


class TestNeverRaises:
    """Test generate() always returns a tree."""

    @pytest.mark.asyncio
    async def test_none_input(self, selector):
        """Test None renders the default template with placeholders."""
        tree = await selector.generate(None)
        assert tree.template_type == "default"
        assert "N/A" in all_text(tree).split("\n")
        assert outcomes(tree) == [("input", "failed"), ("default", "selected")]

    @pytest.mark.asyncio
    async def test_unsupported_input(self, selector):
        """Test arbitrary objects are treated as missing input."""
        tree = await selector.generate(42)
        assert tree.template_type == "default"
        assert "int" in tree.trace[0].reason

    @pytest.mark.asyncio
    async def test_malformed_item_fails_only_items(self, selector, quotation_data):
        """Test a bad line item keeps the brand and the rest of the document."""
        tree = await selector.generate(dict(quotation_data, items=[None]))

        assert tree.template_type == "modern"
        assert outcomes(tree) == [("config_type", "selected")]
        assert find_runs(tree.children, "Items table unavailable")
        text = all_text(tree)
        assert "Acme Research Labs" in text
        assert "Chembio Lifesciences" in text
        assert "CBL/2024/001" in text


class TestDeterminism:
    """Test repeated and concurrent generations agree."""

    @pytest.mark.asyncio
    async def test_repeatable(self, selector, quotation):
        """Test identical inputs give identical trees."""
        first = await selector.generate(quotation)
        second = await selector.generate(quotation)
        assert first == second
        assert first.to_dict() == second.to_dict()

    @pytest.mark.asyncio
    async def test_mapping_matches_record(self, selector, quotation_data):
        """Test mapping input is equivalent to QuotationData input."""
        from_mapping = await selector.generate(quotation_data)
        from_record = await selector.generate(QuotationData.from_dict(quotation_data))
        assert from_mapping == from_record

    @pytest.mark.asyncio
    async def test_concurrent_generations(self, selector, quotation, quotation_data, formal_company_data):
        """Test concurrent calls do not interfere."""
        formal = dict(quotation_data, company=formal_company_data)
        modern_tree, formal_tree = await asyncio.gather(selector.generate(quotation), selector.generate(formal))

        assert modern_tree == await selector.generate(quotation)
        assert formal_tree == await selector.generate(formal)
        assert modern_tree.template_type == "modern"
        assert formal_tree.template_type == "formal"

    def test_generate_sync(self, selector, quotation):
        """Test the blocking wrapper."""
        tree = selector.generate_sync(quotation)
        assert tree.template_type == "modern"

    @pytest.mark.asyncio
    async def test_generate_document(self, quotation):
        """Test the module-level convenience function."""
        tree = await generate_document(quotation)
        assert tree.template_type == "modern"


class TestHelpers:
    """Test module-level helpers."""

    @pytest.mark.parametrize("name,legal_name,expected", [
        ("Chembio Lifesciences", None, "modern"),
        ("Chembio Lifesciences", "Chembio Lifesciences Pvt Ltd", "formal"),
        ("Chemlab Synthesis", None, "technical"),
        ("Nova Lifesciences", None, "modern"),
        ("Nova", "Nova Lifesciences Pvt Ltd", "formal"),
        ("Acme Trading", None, None),
    ])
    def test_match_company_name(self, name, legal_name, expected):
        """Test the ordered name rules."""
        match = match_company_name(name, legal_name)
        assert (match[0] if match else None) == expected

    def test_placeholder_quotation(self):
        """Test the stand-in quotation."""
        quotation = placeholder_quotation()
        assert quotation.items == []
        assert quotation.bill_to.company == "N/A"
        assert quotation.company.name == "Default Company"

    def test_last_resort_tree(self):
        """Test the diagnostic tree content."""
        tree = last_resort_tree(None, RuntimeError("kaput"))
        text = all_text(tree)
        assert "Company: Unknown" in text
        assert "Error: kaput" in text
        assert tree.section.footer.children
