"""Tests for the diagnostics log."""

import pytest
from pydantic import ValidationError

from entrylint.diagnostics import DiagnosticCode
from entrylint.diagnostics import DiagnosticLog
from entrylint.diagnostics import Severity
from entrylint.diagnostics import scoped_code


def _sample_log() -> DiagnosticLog:
    log = DiagnosticLog()
    log.add(DiagnosticCode.USE_TYPE, Severity.SUGGESTION, ["name"])
    log.add(DiagnosticCode.FILE_INVALID_FORMAT, Severity.WARNING, ["main"], actual_format="CJS")
    log.add(DiagnosticCode.FILE_DOES_NOT_EXIST, Severity.ERROR, ["exports", "."])
    return log


class TestDiagnosticLog:
    """Test DiagnosticLog add, escalation and filtering."""

    def test_add_records_diagnostic(self):
        log = DiagnosticLog()
        diagnostic = log.add(DiagnosticCode.IMPORTS_KEY_INVALID, Severity.ERROR, ["imports", "foo"], suggest_key="#foo")

        assert len(log) == 1
        assert diagnostic.path == ("imports", "foo")
        assert diagnostic.args == {"suggest_key": "#foo"}

    def test_diagnostics_are_immutable(self):
        diagnostic = DiagnosticLog().add(DiagnosticCode.USE_TYPE, Severity.SUGGESTION, ["name"])
        with pytest.raises(ValidationError):
            diagnostic.severity = Severity.ERROR

    def test_escalate_warnings(self):
        log = _sample_log()
        log.escalate_warnings()

        severities = {d.code: d.severity for d in log}
        assert severities[DiagnosticCode.FILE_INVALID_FORMAT] == Severity.ERROR
        assert severities[DiagnosticCode.USE_TYPE] == Severity.SUGGESTION

    def test_escalation_applies_once(self):
        """Warnings added after escalation are left alone."""
        log = DiagnosticLog()
        log.escalate_warnings()
        log.add(DiagnosticCode.FILE_INVALID_FORMAT, Severity.WARNING, ["main"])
        log.escalate_warnings()

        assert [d.severity for d in log] == [Severity.WARNING]

    def test_filter_level_warning_drops_suggestions(self):
        codes = [d.code for d in _sample_log().filter_level(Severity.WARNING)]
        assert codes == [DiagnosticCode.FILE_INVALID_FORMAT, DiagnosticCode.FILE_DOES_NOT_EXIST]

    def test_filter_level_error(self):
        codes = [d.code for d in _sample_log().filter_level(Severity.ERROR)]
        assert codes == [DiagnosticCode.FILE_DOES_NOT_EXIST]

    def test_filter_level_suggestion_keeps_all(self):
        assert len(_sample_log().filter_level(Severity.SUGGESTION)) == 3

    def test_sorted_is_independent_of_emission_order(self):
        forward = _sample_log()
        backward = DiagnosticLog()
        for d in reversed(list(forward)):
            backward.add(d.code, d.severity, d.path, **d.args)

        assert forward.sorted() == backward.sorted()


class TestScopedCode:
    """Test scoped_code() prefix selection."""

    def test_exports(self):
        assert scoped_code("VALUE_INVALID", False) == DiagnosticCode.EXPORTS_VALUE_INVALID

    def test_imports(self):
        assert scoped_code("VALUE_INVALID", True) == DiagnosticCode.IMPORTS_VALUE_INVALID
