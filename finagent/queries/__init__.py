"""Ledger read-side package."""

from finagent.queries.aggregation import AggregationEngine, summarize
from finagent.queries.presentation import bill_to_dict, days_until_due, format_currency

__all__ = [
    "AggregationEngine",
    "bill_to_dict",
    "days_until_due",
    "format_currency",
    "summarize",
]
