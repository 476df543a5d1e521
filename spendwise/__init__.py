"""
SpendWise Ledger - Source Package

The storage and balance/debt-settlement core of a personal finance
ledger: credits, debits and debts per user, persisted as one JSON file.

DESIGN PRINCIPLES:
1. The ledger file is the single source of truth, reloaded per call
2. Load-mutate-save cycles are serialized by the storage lock
3. Policy violations are outcomes, not exceptions
4. Failures degrade to an empty or unchanged ledger, and are logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SpendWise Team"
