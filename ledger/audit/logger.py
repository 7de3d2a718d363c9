"""
Audit Logger

DESIGN DECISION: Every store mutation and every recovered storage
failure is logged. This provides:
1. Traceability of changes to the ledger
2. Debugging capability when a write was dropped
3. A single place where swallowed errors surface

The audit logger:
- Is synchronous, like the rest of the store
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging
import sys
from typing import Optional

import structlog

from ledger.config import LoggingSettings
from ledger.models.audit import AuditEvent, AuditSeverity


def _shared_processors() -> list:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


# Configure structlog for local logging
structlog.configure(
    processors=_shared_processors() + [structlog.processors.JSONRenderer()],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Apply level and renderer from settings.

    Call once at startup, before the first log line is written.
    """
    settings = settings or LoggingSettings()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.level),
    )
    logging.getLogger("ledger").setLevel(getattr(logging, settings.level))

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=_shared_processors() + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log at the
    level matching its severity.
    """

    _LEVELS = {
        AuditSeverity.DEBUG: "debug",
        AuditSeverity.INFO: "info",
        AuditSeverity.WARNING: "warning",
        AuditSeverity.ERROR: "error",
        AuditSeverity.CRITICAL: "critical",
    }

    def __init__(self, logger_name: str = "ledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log call itself failed. Never raises.
        """
        method = getattr(self._logger, self._LEVELS[event.severity])
        try:
            method("audit_event", **event.to_log_dict())
        except Exception:  # logging never raises into the store
            return False
        return True
