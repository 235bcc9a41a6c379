"""
Heuristic Extractor

Pure functions that pull one value out of a free-text message.
No I/O, no state. Every extractor is total: it returns None when the
value is absent and never raises, leaving defaults to the caller.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional


AMOUNT_PATTERN = re.compile(r"\$?(\d+(?:\.\d{2})?)")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# Closed vocabulary, checked in this order
CATEGORY_VOCABULARY = (
    "food",
    "groceries",
    "transport",
    "entertainment",
    "utilities",
    "rent",
    "insurance",
    "healthcare",
)

DESCRIPTION_MARKERS = ("$", "spent", "bought")
DESCRIPTION_MAX_WORDS = 4

BILL_NAMES = (
    ("rent", "Rent"),
    ("electricity", "Electricity"),
    ("water", "Water"),
    ("internet", "Internet"),
)
DEFAULT_BILL_NAME = "Bill"

GOAL_NAMES = (
    ("vacation", "Vacation Fund"),
    ("emergency", "Emergency Fund"),
    ("car", "Car Fund"),
    ("house", "House Fund"),
)
DEFAULT_GOAL_NAME = "Savings Goal"


def validate_amount(amount: object) -> bool:
    """True for a finite number greater than zero (bools are not amounts)."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        return False
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return False
    return value.is_finite() and value > 0


def validate_date(value: str) -> bool:
    """True if value is a real YYYY-MM-DD calendar date."""
    try:
        date.fromisoformat(value)
    except (TypeError, ValueError):
        return False
    return True


def extract_amount(text: str) -> Optional[Decimal]:
    """First currency-like number in text, e.g. "$50" or "12.99"."""
    match = AMOUNT_PATTERN.search(text)
    if not match:
        return None
    return Decimal(match.group(1))


def extract_category(text: str) -> Optional[str]:
    """First vocabulary category appearing anywhere in text."""
    lowered = text.lower()
    for category in CATEGORY_VOCABULARY:
        if category in lowered:
            return category
    return None


def extract_description(text: str) -> Optional[str]:
    """
    Up to four words following the first "$", "spent" or "bought" token.

    "I spent $50 on groceries" -> "$50 on groceries"
    """
    words = text.split(" ")
    for index, word in enumerate(words):
        lowered = word.lower()
        if any(marker in lowered for marker in DESCRIPTION_MARKERS):
            following = words[index + 1:index + 1 + DESCRIPTION_MAX_WORDS]
            if not following:
                return None
            return " ".join(following)
    return None


def _lookup_name(text: str, table: tuple, default: str) -> str:
    lowered = text.lower()
    for keyword, name in table:
        if keyword in lowered:
            return name
    return default


def extract_bill_name(text: str) -> str:
    return _lookup_name(text, BILL_NAMES, DEFAULT_BILL_NAME)


def extract_goal_name(text: str) -> str:
    return _lookup_name(text, GOAL_NAMES, DEFAULT_GOAL_NAME)


def extract_date(text: str) -> Optional[date]:
    """First YYYY-MM-DD substring that is a real calendar date."""
    for match in DATE_PATTERN.finditer(text):
        if validate_date(match.group(0)):
            return date.fromisoformat(match.group(0))
    return None
