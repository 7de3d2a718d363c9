"""
Display formatting for amounts, dates and categories.

Kept beside the queries so every consumer renders values the same way.
"""

from collections.abc import Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ledger.models.records import Category


DEFAULT_CATEGORY_COLOR = "#6b7280"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}

# Settings date_format value -> strftime pattern
DATE_FORMATS = {
    "MM/dd/yyyy": "%m/%d/%Y",
    "dd/MM/yyyy": "%d/%m/%Y",
    "yyyy-MM-dd": "%Y-%m-%d",
}


def format_currency(amount: Union[Decimal, int, float], currency: str = "USD") -> str:
    """
    Format an amount like "$1,234.50" or "-€12.00".

    Unknown currency codes are used as a prefix: "CHF 10.00".
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_date(value: Union[date, datetime, str], date_format: str = "MM/dd/yyyy") -> str:
    """Render a day using one of the settings date formats (ISO otherwise)."""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    elif isinstance(value, datetime):
        value = value.date()
    pattern = DATE_FORMATS.get(date_format, "%Y-%m-%d")
    return value.strftime(pattern)


def category_color(category_name: str, categories: Sequence[Category]) -> str:
    """Color of the first category with this name, or a neutral gray."""
    for category in categories:
        if category.name == category_name:
            return category.color
    return DEFAULT_CATEGORY_COLOR
