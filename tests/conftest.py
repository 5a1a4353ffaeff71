"""
Shared test configuration and fixtures for quotation-core library.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Any

import httpx

from quotation_core import EngineConfig, QuotationData, TemplateSelector
from tests.utils.helpers import BROKEN_SEAL_URL, SEAL_URL, make_png


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def seal_png() -> bytes:
    """A small PNG seal image generated with Pillow."""
    return make_png(size=(64, 64), color=(204, 0, 0))


@pytest.fixture
def seal_transport(seal_png):
    """httpx transport serving the seal image, a 404, garbage bytes and a dead host."""
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == SEAL_URL:
            return httpx.Response(200, content=seal_png, headers={"Content-Type": "image/png"})
        if url == BROKEN_SEAL_URL:
            return httpx.Response(200, content=b"<html>not an image</html>")
        if request.url.host == "unreachable.example.invalid":
            raise httpx.ConnectError("Name or service not known", request=request)
        return httpx.Response(404, content=b"not found")

    return httpx.MockTransport(handler)


@pytest.fixture
def selector(seal_transport):
    """TemplateSelector whose seal fetches go through the mock transport."""
    from quotation_core.core.seal_loader import SealLoader

    class _Selector(TemplateSelector):
        def _seal_loader_scope(self):
            return SealLoader.from_config(self.config, transport=seal_transport)

    return _Selector(config=EngineConfig())


@pytest.fixture
def modern_company_data() -> Dict[str, Any]:
    """Company record as stored in the document database (camelCase)."""
    return {
        "id": "chembio-lifesciences",
        "name": "Chembio Lifesciences",
        "shortCode": "CBL",
        "address": {
            "street": "L-10, Himalaya Legend",
            "city": "Indirapuram",
            "state": "Uttar Pradesh",
            "postalCode": "201014",
            "country": "India",
        },
        "contactInfo": {"phone": "0120-4909400", "email": "chembio.sales@gmail.com"},
        "taxInfo": {"gst": "09AALFC0922C1ZU", "pan": "AALFC0922C"},
        "branding": {"primaryColor": "#0066CC"},
        "templateConfig": {
            "templateType": "modern",
            "colorScheme": {"primary": "#0066CC"},
        },
    }


@pytest.fixture
def formal_company_data() -> Dict[str, Any]:
    return {
        "id": "chembio-pvt-ltd",
        "name": "Chembio Lifesciences Pvt. Ltd.",
        "legalName": "CHEMBIO LIFESCIENCES PVT. LTD.",
        "templateConfig": {"templateType": "formal"},
    }


@pytest.fixture
def technical_company_data() -> Dict[str, Any]:
    return {
        "id": "chemlab-synthesis",
        "name": "Chemlab Synthesis",
        "templateConfig": {"templateType": "technical"},
    }


@pytest.fixture
def sample_item() -> Dict[str, Any]:
    return {
        "sno": 1,
        "cat_no": "CB-1001",
        "pack_size": "500 g",
        "product_description": "Sodium Chloride AR",
        "qty": 2,
        "unit_rate": 1234.5,
        "gst_percent": 18,
        "total_price": 2469.0,
        "discount_percent": 5,
        "make": "Merck",
        "lead_time": "1 week",
    }


@pytest.fixture
def quotation_data(modern_company_data, sample_item) -> Dict[str, Any]:
    """Quotation record with one item, issued by the modern company."""
    return {
        "billTo": {
            "name": "Dr. Rao",
            "company": "Acme Research Labs",
            "address": "12 Science Park, Pune",
            "phone": "9876543210",
            "email": "rao@acme.example.com",
        },
        "items": [sample_item],
        "subTotal": 2469.0,
        "tax": 444.42,
        "roundOff": 0.58,
        "grandTotal": 2914.0,
        "notes": "Terms & Conditions:\n1. Payment terms: 100% advance\n2. Prices are ex-works\n3. Freight extra",
        "paymentTerms": "100% advance",
        "quotationRef": "CBL/2024/001",
        "quotationDate": "15/03/2024",
        "company": modern_company_data,
    }


@pytest.fixture
def quotation(quotation_data) -> QuotationData:
    return QuotationData.from_dict(quotation_data)
