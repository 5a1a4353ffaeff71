"""
Base exception for the quotation engine.

Concrete errors live next to the code that raises them and derive from
``QuotationCoreError``.
"""


class QuotationCoreError(Exception):
    """Base class for quotation engine errors."""
    pass
