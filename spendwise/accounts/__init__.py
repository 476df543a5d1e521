"""Account registry package."""

from spendwise.accounts.registry import AccountRegistry

__all__ = ["AccountRegistry"]
