"""
Daily Ledger - Source Package

A local, single-user ledger of personal financial records
(transactions, categories, shops, savings goals, budgets,
grocery lists, loans) with derived analytics on top.

DESIGN PRINCIPLES:
1. The store is the only thing that touches the persistence medium
2. Storage failures degrade, they never crash the caller
3. Analytics are pure functions over already-loaded records
4. Every store mutation is auditable
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Daily Ledger Team"
