"""Audit logging package."""

from spendwise.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
