"""
Content type definitions for the quotation engine.

Input records consumed by the engine. They are plain dataclasses; the
``from_dict`` loaders accept document-database payloads in either camelCase
(``legalName``, ``billTo``) or snake_case form and ignore unknown keys.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key from ``data``."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _nested(data: Mapping[str, Any], record_type, *keys: str):
    value = _pick(data, *keys)
    if value is None:
        return None
    if isinstance(value, record_type):
        return value
    if isinstance(value, Mapping):
        return record_type.from_dict(value)
    return None


@dataclass
class Address:
    """Postal address of a company."""

    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Address":
        return cls(
            street=_pick(data, "street", default=""),
            city=_pick(data, "city", default=""),
            state=_pick(data, "state", default=""),
            postal_code=_pick(data, "postalCode", "postal_code", default=""),
            country=_pick(data, "country", default=""),
        )


@dataclass
class ContactInfo:
    phone: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContactInfo":
        return cls(phone=_pick(data, "phone", default=""), email=_pick(data, "email", default=""))


@dataclass
class TaxInfo:
    gst: str = ""
    pan: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaxInfo":
        return cls(gst=_pick(data, "gst", default=""), pan=_pick(data, "pan", default=""))


@dataclass
class BankDetails:
    """Bank account printed on the quotation."""

    bank_name: str = ""
    account_no: str = ""
    ifsc_code: str = ""
    branch_code: str = ""
    micro_code: str = ""
    account_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BankDetails":
        return cls(
            bank_name=_pick(data, "bankName", "bank_name", default=""),
            account_no=_pick(data, "accountNo", "account_no", default=""),
            ifsc_code=_pick(data, "ifscCode", "ifsc_code", default=""),
            branch_code=_pick(data, "branchCode", "branch_code", default=""),
            micro_code=_pick(data, "microCode", "micro_code", default=""),
            account_type=_pick(data, "accountType", "account_type", default=""),
        )


@dataclass
class Branding:
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    logo_url: Optional[str] = None
    seal_image_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Branding":
        return cls(
            primary_color=_pick(data, "primaryColor", "primary_color"),
            secondary_color=_pick(data, "secondaryColor", "secondary_color"),
            logo_url=_pick(data, "logoUrl", "logo_url"),
            seal_image_url=_pick(data, "sealImageUrl", "seal_image_url"),
        )


@dataclass
class TemplateConfig:
    """Visual template configuration stored on a company record."""

    template_type: Optional[str] = None
    layout: Optional[str] = None
    header_style: Optional[str] = None
    table_style: Optional[str] = None
    color_scheme: Dict[str, str] = field(default_factory=dict)
    typography: Dict[str, Any] = field(default_factory=dict)
    spacing: Dict[str, Any] = field(default_factory=dict)
    section_order: List[str] = field(default_factory=list)
    customizations: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateConfig":
        customizations = dict(_pick(data, "customizations", default={}) or {})
        section_order = _pick(data, "sectionOrder", "section_order")
        if section_order is None:
            section_order = customizations.get("sectionOrder", [])
        return cls(
            template_type=_pick(data, "templateType", "template_type"),
            layout=_pick(data, "layout"),
            header_style=_pick(data, "headerStyle", "header_style"),
            table_style=_pick(data, "tableStyle", "table_style"),
            color_scheme=dict(_pick(data, "colorScheme", "color_scheme", default={}) or {}),
            typography=dict(_pick(data, "typography", default={}) or {}),
            spacing=dict(_pick(data, "spacing", default={}) or {}),
            section_order=list(section_order or []),
            customizations=customizations,
        )


@dataclass
class Company:
    """A brand/customer entity issuing quotations."""

    id: str = ""
    name: str = ""
    legal_name: Optional[str] = None
    short_code: Optional[str] = None
    address: Optional[Address] = None
    contact_info: Optional[ContactInfo] = None
    tax_info: Optional[TaxInfo] = None
    bank_details: Optional[BankDetails] = None
    branding: Branding = field(default_factory=Branding)
    template_config: Optional[TemplateConfig] = None
    default_terms: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Legal name when present, otherwise the display name."""
        return self.legal_name or self.name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Company":
        return cls(
            id=_pick(data, "id", default=""),
            name=_pick(data, "name", default=""),
            legal_name=_pick(data, "legalName", "legal_name"),
            short_code=_pick(data, "shortCode", "short_code"),
            address=_nested(data, Address, "address"),
            contact_info=_nested(data, ContactInfo, "contactInfo", "contact_info"),
            tax_info=_nested(data, TaxInfo, "taxInfo", "tax_info"),
            bank_details=_nested(data, BankDetails, "bankDetails", "bank_details"),
            branding=_nested(data, Branding, "branding") or Branding(),
            template_config=_nested(data, TemplateConfig, "templateConfig", "template_config"),
            default_terms=_pick(data, "defaultTerms", "default_terms"),
        )


@dataclass
class BillTo:
    """Client the quotation is addressed to."""

    name: str = ""
    company: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    contact_person: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BillTo":
        return cls(
            name=_pick(data, "name", default=""),
            company=_pick(data, "company", default=""),
            address=_pick(data, "address", default=""),
            phone=_pick(data, "phone", default=""),
            email=_pick(data, "email", default=""),
            contact_person=_pick(data, "contactPerson", "contact_person"),
        )


@dataclass
class Employee:
    """Employee who prepared the quotation."""

    id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    designation: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Employee":
        return cls(
            id=_pick(data, "id", default=""),
            name=_pick(data, "name", default=""),
            email=_pick(data, "email", default=""),
            phone=_pick(data, "phone", default=""),
            designation=_pick(data, "designation", default=""),
        )


@dataclass
class LineItem:
    """
    One quoted product.

    Values are kept exactly as supplied; the engine renders them without
    coercion, so malformed values surface when the items table is built.
    """

    sno: Any = None
    cat_no: Any = None
    pack_size: Any = None
    product_description: Any = None
    qty: Any = None
    unit_rate: Any = None
    gst_percent: Any = None
    total_price: Any = None
    discount_percent: Any = None
    make: Any = None
    lead_time: Any = None
    hsn_code: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LineItem":
        return cls(
            sno=data.get("sno"),
            cat_no=data.get("cat_no"),
            pack_size=data.get("pack_size"),
            product_description=data.get("product_description"),
            qty=data.get("qty"),
            unit_rate=data.get("unit_rate"),
            gst_percent=data.get("gst_percent"),
            total_price=data.get("total_price"),
            discount_percent=data.get("discount_percent"),
            make=data.get("make"),
            lead_time=data.get("lead_time"),
            hsn_code=data.get("hsn_code"),
        )


@dataclass
class QuotationData:
    """One quotation's business content plus the issuing company."""

    bill_to: BillTo = field(default_factory=BillTo)
    items: List[LineItem] = field(default_factory=list)
    sub_total: Any = 0
    tax: Any = 0
    round_off: Any = 0
    grand_total: Any = 0
    notes: str = ""
    payment_terms: str = ""
    quotation_ref: str = ""
    quotation_date: str = ""
    valid_till: str = ""
    delivery_terms: Optional[str] = None
    validity_period: Optional[str] = None
    bank_details: Optional[BankDetails] = None
    company: Optional[Company] = None
    employee: Optional[Employee] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuotationData":
        # Malformed entries are kept as-is so only the items section fails
        items = _pick(data, "items", default=[]) or []
        if isinstance(items, (list, tuple)):
            items = [LineItem.from_dict(item) if isinstance(item, Mapping) else item for item in items]

        return cls(
            bill_to=_nested(data, BillTo, "billTo", "bill_to") or BillTo(),
            items=items,
            sub_total=_pick(data, "subTotal", "sub_total", default=0),
            tax=_pick(data, "tax", default=0),
            round_off=_pick(data, "roundOff", "round_off", default=0),
            grand_total=_pick(data, "grandTotal", "grand_total", default=0),
            notes=_pick(data, "notes", default="") or "",
            payment_terms=_pick(data, "paymentTerms", "payment_terms", default="") or "",
            quotation_ref=_pick(data, "quotationRef", "quotation_ref", default=""),
            quotation_date=_pick(data, "quotationDate", "quotation_date", default=""),
            valid_till=_pick(data, "validTill", "valid_till", default=""),
            delivery_terms=_pick(data, "deliveryTerms", "delivery_terms"),
            validity_period=_pick(data, "validityPeriod", "validity_period"),
            bank_details=_nested(data, BankDetails, "bankDetails", "bank_details"),
            company=_nested(data, Company, "company"),
            employee=_nested(data, Employee, "employee"),
        )
