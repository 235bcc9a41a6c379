"""Formatting helpers for the dashboard payload and frontend."""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Union

from finagent.models.ledger import Bill


def format_currency(amount: Union[Decimal, int, float, str]) -> str:
    """US dollar display form: 1200 -> "$1,200.00", -5 -> "-$5.00"."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def days_until_due(due_date: date, now: datetime) -> int:
    """
    Whole days from now until the start of due_date, rounded up.

    Zero when the bill is due later today, negative once it is overdue.
    """
    due_start = datetime.combine(due_date, datetime.min.time(), tzinfo=now.tzinfo)
    return math.ceil((due_start - now).total_seconds() / 86400)


def bill_to_dict(bill: Bill, now: datetime) -> dict:
    """Serialized bill with its days_until_due annotation."""
    data = bill.model_dump(mode="json")
    data["days_until_due"] = days_until_due(bill.due_date, now)
    return data
