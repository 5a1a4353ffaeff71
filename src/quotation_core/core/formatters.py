"""
Currency and date formatting for quotation documents.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any

from babel.numbers import format_currency as babel_format_currency

logger = logging.getLogger(__name__)


DEFAULT_LOCALE = "en_IN"

_CURRENCY_SYMBOLS = re.compile(r"[₹$€£¥]")

_DATE_LAYOUTS = (
    "%d/%m/%Y",
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def format_currency(value: Any, locale: str = DEFAULT_LOCALE, no_symbol: bool = False) -> str:
    """
    Format a money amount with locale grouping and two decimals.

    Args:
        value: Number (or numeric string) to format. NaN renders as zero.
        locale: Babel locale identifier; en_IN formats INR, anything else USD
        no_symbol: Strip the currency symbol from the result

    Returns:
        Formatted amount, e.g. '₹1,234.50' or '1,234.50'

    Raises:
        TypeError: If value is None or not a number
        ValueError: If value is a string that does not parse as a number
    """
    amount = float(value)
    if math.isnan(amount):
        amount = 0.0

    currency = "INR" if locale == DEFAULT_LOCALE else "USD"
    formatted = babel_format_currency(amount, currency, locale=locale)

    if no_symbol:
        formatted = _CURRENCY_SYMBOLS.sub("", formatted).strip()
    return formatted


def format_date(raw: Any) -> str:
    """
    Render a date as dd/mm/yyyy.

    Accepts dd/mm/yyyy, ISO-8601 and a few common layouts. Anything that
    does not parse is returned unchanged.
    """
    if raw is None:
        return ""
    if isinstance(raw, datetime):
        return raw.strftime("%d/%m/%Y")

    text = str(raw).strip()
    if not text:
        return text

    for layout in _DATE_LAYOUTS:
        try:
            return datetime.strptime(text, layout).strftime("%d/%m/%Y")
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        logger.debug(f"Unparseable date left as-is: {text!r}")
        return str(raw)
