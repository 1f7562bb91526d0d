"""Tests for the error accumulator and ErrorRecord."""

import errno
import logging

import pytest
from pydantic import ValidationError

from archwalk.errors.accumulator import ErrorAccumulator
from archwalk.errors.models import ErrorRecord, Severity


class TestErrorRecord:
    """Test the ErrorRecord model."""

    def test_strerror_from_errno(self):
        """strerror is derived from errno and shown in str()."""
        record = ErrorRecord(severity=Severity.WARN, errno=errno.EACCES, message="m", path="/p")
        assert record.strerror
        assert str(record) == f"/p: m: {record.strerror}"

    def test_no_errno_means_no_strerror(self):
        """A record without errno has an empty strerror."""
        record = ErrorRecord(severity=Severity.WARN, message="m", path="/p")
        assert record.errno == 0
        assert record.strerror == ""
        assert str(record) == "/p: m"

    def test_negative_errno_rejected(self):
        """A negative errno fails validation."""
        with pytest.raises(ValidationError):
            ErrorRecord(severity=Severity.WARN, errno=-1, message="m", path="/p")

    def test_severity_accepts_value_strings(self):
        """Severity can be given by its string value."""
        record = ErrorRecord(severity="fatal", message="m", path="/p")
        assert record.severity is Severity.FATAL


class TestErrorAccumulator:
    """Test recording errors and answering fatality."""

    def test_empty_accumulator_is_not_fatal(self):
        """A fresh accumulator has no current error and is not fatal."""
        acc = ErrorAccumulator()
        assert not acc.is_fatal()
        assert acc.current is None
        assert len(acc) == 0

    def test_warn_is_not_fatal(self):
        """A WARN record does not make the accumulator fatal."""
        acc = ErrorAccumulator()
        acc.set(Severity.WARN, errno.EACCES, "Unable to open directory", "/p")
        assert not acc.is_fatal()
        assert acc.current.errno == errno.EACCES

    def test_fatal_is_fatal(self):
        """A FATAL record makes the accumulator fatal."""
        acc = ErrorAccumulator()
        acc.set(Severity.FATAL, 0, "stop", "/p")
        assert acc.is_fatal()

    def test_latest_record_decides(self):
        """Only the most recent record decides fatality."""
        acc = ErrorAccumulator()
        acc.set(Severity.FATAL, 0, "stop", "/p")
        acc.set(Severity.WARN, 0, "skip", "/q")
        assert not acc.is_fatal()
        assert len(acc.records) == 2

    def test_clear_keeps_history(self):
        """clear() drops the current error but keeps the records."""
        acc = ErrorAccumulator()
        acc.set(Severity.FATAL, 0, "stop", "/p")
        acc.clear()
        assert not acc.is_fatal()
        assert acc.current is None
        assert len(acc) == 1

    def test_warnings_filters_by_severity(self):
        """warnings lists only WARN records."""
        acc = ErrorAccumulator()
        acc.set(Severity.WARN, 0, "a", "/a")
        acc.set(Severity.FATAL, 0, "b", "/b")
        assert [r.path for r in acc.warnings] == ["/a"]

    def test_set_logs_by_severity(self, caplog):
        """WARN is logged as a warning and FATAL as an error."""
        acc = ErrorAccumulator()
        with caplog.at_level(logging.WARNING, logger="archwalk.errors.accumulator"):
            acc.set(Severity.WARN, 0, "careful", "/a")
            acc.set(Severity.FATAL, 0, "broken", "/b")

        levels = {r.getMessage(): r.levelno for r in caplog.records}
        assert levels["/a: careful"] == logging.WARNING
        assert levels["/b: broken"] == logging.ERROR
