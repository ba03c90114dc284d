"""Unit tests for the CSV-style matrix formatter."""

import io
from datetime import date

import pytest

from rollover.adapters.formatter import (
    format_header,
    format_matrix,
    format_month,
    format_row,
    format_step_diagnostics,
    write_matrix,
)
from rollover.sim import AmortizationSimulator, LoanRecord
from rollover.sim.result_matrix import ResultMatrix, StepRecord


@pytest.fixture
def zero_rate_matrix() -> ResultMatrix:
    loans = [LoanRecord("A", date(2024, 1, 1), 1000.0, 0.0, 10, 100.0)]
    return AmortizationSimulator().run(loans)


class TestPieces:

    def test_month_not_zero_padded(self):
        assert format_month(date(2006, 1, 2)) == "1/2/2006"
        assert format_month(date(2024, 12, 31)) == "12/31/2024"

    def test_header(self):
        assert format_header(["Car", "Student"]) == "date, Car, Student"

    def test_row_renders_plain_decimals(self):
        assert format_row(date(2024, 3, 1), (850.0, 0.125)) == "3/1/2024, 850.000000, 0.125000"


class TestMatrix:

    def test_line_count(self, zero_rate_matrix):
        lines = format_matrix(zero_rate_matrix).splitlines()
        assert len(lines) == 11
        assert lines[0] == "date, A"
        assert lines[1] == "1/1/2024, 900.000000"
        assert lines[-1] == "10/1/2024, 0.000000"

    def test_custom_names(self, zero_rate_matrix):
        lines = format_matrix(zero_rate_matrix, ["Auto"]).splitlines()
        assert lines[0] == "date, Auto"

    def test_write_to_stream(self, zero_rate_matrix):
        buf = io.StringIO()
        write_matrix(zero_rate_matrix, buf)
        assert buf.getvalue() == format_matrix(zero_rate_matrix)
        assert buf.getvalue().endswith("\n")


class TestDiagnostics:

    def test_overflow_and_redirect(self):
        step = StepRecord(
            month=date(2024, 1, 1),
            payments=[100.0, 150.0],
            overflows=[70.0, 0.0],
            redirect_target=1,
            redirect_amount=170.0,
        )
        lines = format_step_diagnostics(step, ["A", "B"])
        assert lines == [
            "1/1/2024: 70.000000 leftover after paying A",
            "1/1/2024: 170.000000 redirected to B",
        ]

    def test_quiet_month(self):
        step = StepRecord(month=date(2024, 1, 1), payments=[100.0], overflows=[0.0])
        assert format_step_diagnostics(step, ["A"]) == []

    def test_carried_remainder(self):
        step = StepRecord(
            month=date(2024, 2, 1), payments=[0.0], overflows=[0.0], carried_remainder=5.0
        )
        assert format_step_diagnostics(step, ["A"]) == ["2/1/2024: 5.000000 carried into next month"]
