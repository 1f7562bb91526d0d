# Pydantic data models for recorded errors: Severity, ErrorRecord.

import os
from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """How bad a recorded error is. Only FATAL stops a walk."""

    OK = "ok"
    WARN = "warn"
    FATAL = "fatal"


class ErrorRecord(BaseModel):
    """A single error recorded during a walk (e.g. unreadable directory)."""

    severity: Severity
    errno: int = Field(0, ge=0, description="OS error number, 0 when not an OS error")
    message: str
    path: str

    @property
    def strerror(self) -> str:
        if not self.errno:
            return ""
        return os.strerror(self.errno)

    def __str__(self) -> str:
        detail = f": {self.strerror}" if self.errno else ""
        return f"{self.path}: {self.message}{detail}"
