"""Heuristic extraction package."""

from finagent.extraction.heuristics import (
    CATEGORY_VOCABULARY,
    extract_amount,
    extract_bill_name,
    extract_category,
    extract_date,
    extract_description,
    extract_goal_name,
    validate_amount,
    validate_date,
)

__all__ = [
    "CATEGORY_VOCABULARY",
    "extract_amount",
    "extract_bill_name",
    "extract_category",
    "extract_date",
    "extract_description",
    "extract_goal_name",
    "validate_amount",
    "validate_date",
]
