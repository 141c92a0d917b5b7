"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability of who recorded what
2. Visibility into rejected bridge imports
3. A trail when an external collaborator (Gemini) is down
"""

import structlog

from design_ledger.models.audit import (
    AuditSeverity,
    LedgerEvent,
    LedgerEventBuilder,
)


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


class LedgerEventLogger:
    """
    Central audit logging service.

    Events are written to the structured local log. A list of recently
    logged events is kept in memory so callers (and tests) can inspect
    what happened without parsing log output.
    """

    def __init__(self, keep_last: int = 100):
        self._logger = structlog.get_logger("design_ledger.audit")
        self._keep_last = keep_last
        self._recent: list[LedgerEvent] = []

    @property
    def recent_events(self) -> list[LedgerEvent]:
        """Most recently logged events, oldest first."""
        return list(self._recent)

    def log(self, event: LedgerEvent) -> None:
        """Log an audit event."""
        self._recent.append(event)
        if len(self._recent) > self._keep_last:
            del self._recent[0]

        log_dict = event.to_log_dict()
        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_charge_added(self, charge_id: str, charge_type: str, amount: str, added_by: str) -> None:
        self.log(LedgerEventBuilder.charge_added(charge_id, charge_type, amount, added_by))

    def log_payment_added(self, payment_id: str, method: str, amount: str, added_by: str) -> None:
        self.log(LedgerEventBuilder.payment_added(payment_id, method, amount, added_by))

    def log_templates_saved(self, count: int) -> None:
        self.log(LedgerEventBuilder.templates_saved(count))

    def log_security_log_added(
        self,
        log_id: str,
        attempted_email: str,
        status: str,
        evicted: int,
    ) -> None:
        self.log(
            LedgerEventBuilder.security_log_added(log_id, attempted_email, status, evicted)
        )

    def log_security_logs_cleared(self, cleared: int) -> None:
        self.log(LedgerEventBuilder.security_logs_cleared(cleared))

    def log_exported(self, charges: int, payments: int, length: int) -> None:
        self.log(LedgerEventBuilder.ledger_exported(charges, payments, length))

    def log_imported(self, charges: int, payments: int, templates: int) -> None:
        self.log(LedgerEventBuilder.ledger_imported(charges, payments, templates))

    def log_import_rejected(self, reason: str) -> None:
        self.log(LedgerEventBuilder.import_rejected(reason))

    def log_subscriber_failed(self, error_message: str) -> None:
        self.log(LedgerEventBuilder.subscriber_failed(error_message))

    def log_summary_unavailable(self, service: str, error_message: str) -> None:
        self.log(LedgerEventBuilder.summary_unavailable(service, error_message))
