# Error accumulator shared between the traversal driver and its visitor.

from __future__ import annotations

import logging
from typing import List, Optional

from archwalk.errors.models import ErrorRecord, Severity

logger = logging.getLogger(__name__)


class ErrorAccumulator:
    """
    Records errors raised while building an archive and decides fatality.

    The most recent record is the current error; is_fatal() answers for it.
    This is how a visitor that returns a negative value tells the driver
    whether to skip the entry (WARN) or abort the walk (FATAL). Every record
    is also kept in `records` for reporting.
    """

    def __init__(self) -> None:
        self.records: List[ErrorRecord] = []
        self.current: Optional[ErrorRecord] = None

    def set(self, severity: Severity, errno: int, message: str, path: str) -> ErrorRecord:
        record = ErrorRecord(severity=severity, errno=errno, message=message, path=str(path))
        self.records.append(record)
        self.current = record

        if record.severity is Severity.FATAL:
            logger.error("%s", record)
        elif record.severity is Severity.WARN:
            logger.warning("%s", record)
        return record

    def is_fatal(self) -> bool:
        return self.current is not None and self.current.severity is Severity.FATAL

    def clear(self) -> None:
        """Forget the current error. History in `records` is kept."""
        self.current = None

    @property
    def warnings(self) -> List[ErrorRecord]:
        return [r for r in self.records if r.severity is Severity.WARN]

    def __len__(self) -> int:
        return len(self.records)
