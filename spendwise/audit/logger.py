"""
Audit Logger

DESIGN DECISION: Every ledger mutation and every refused operation is
logged. This provides:
1. Traceability of how a balance came to be
2. Debugging capability when the ledger file misbehaves
3. Visibility of failures the caller only sees as an outcome value

The audit logger:
- Is async so it can sit inside the engine's coroutines
- Never raises (logging must not break a ledger operation)
- Writes structured JSON through structlog
"""

from typing import Optional

import structlog

from spendwise.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Keeps the last events in memory (bounded) so callers and tests can
    inspect what happened without parsing log output.
    """

    def __init__(self, history_size: int = 200, logger_name: Optional[str] = None):
        self._logger = structlog.get_logger(logger_name or "spendwise.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event at its severity.

        Returns False if the log call itself failed.
        """
        self._remember(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Logging must never break a ledger operation
            return False

        return True

    def _remember(self, event: AuditEvent) -> None:
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[: len(self._history) - self._history_size]

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Recent events, oldest first."""
        return list(self._history)
