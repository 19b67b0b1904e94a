"""
Expense Tracker - Source Package

A personal expense tracker with monthly budgets and reports,
using Indian currency conventions throughout.

DESIGN PRINCIPLES:
1. Validate at the boundary, trust the data model inside
2. Never lose the user's session to a storage failure
3. Every mutation is auditable
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
