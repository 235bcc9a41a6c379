"""
Financial Agent - Source Package

Turns free-text financial statements into ledger mutations
(expenses, bills, savings goals) or a summary snapshot.

DESIGN PRINCIPLES:
1. The model classifies, code executes
2. The keyword fallback must always work on its own
3. Every failure ends in a well-formed response
4. Storage is an explicit, swappable dependency
5. One ledger, one actor, one request at a time
"""

__version__ = "1.0.0"
__author__ = "Financial Agent Team"
