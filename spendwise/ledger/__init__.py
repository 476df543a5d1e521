"""Ledger engine package."""

from spendwise.ledger.engine import LedgerEngine

__all__ = ["LedgerEngine"]
