"""Unit tests for the loan model functions.

Tests verify interest accrual, payment application and month arithmetic
against hand-calculated expected values.
"""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from rollover.sim.loan_model import (
    LoanRecord,
    add_months,
    apply_payment,
    compute_interest,
    earliest_start,
    has_started,
    is_active,
)


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def sample_loan() -> LoanRecord:
    """Standard test loan: $5000 at 12%, $150 + $25 a month."""
    return LoanRecord(
        name="Test Loan",
        start_date=date(2024, 3, 1),
        principal=5000.0,
        annual_rate=0.12,
        term_months=36,
        scheduled_payment=150.0,
        additional_payment=25.0,
    )


# ── Descriptor ────────────────────────────────────────────────────────────

class TestLoanRecord:

    def test_monthly_rate(self, sample_loan):
        assert sample_loan.monthly_rate == pytest.approx(0.01)

    def test_monthly_payment_includes_additional(self, sample_loan):
        assert sample_loan.monthly_payment == pytest.approx(175.0)

    def test_additional_defaults_to_zero(self):
        loan = LoanRecord("X", date(2024, 1, 1), 100.0, 0.05, 12, 10.0)
        assert loan.additional_payment == 0.0
        assert loan.monthly_payment == 10.0

    def test_descriptor_is_immutable(self, sample_loan):
        with pytest.raises(FrozenInstanceError):
            sample_loan.principal = 0.0


# ── Interest Accrual ──────────────────────────────────────────────────────

class TestInterest:

    def test_monthly_interest(self, sample_loan):
        """Interest = balance × (rate / 12)."""
        assert compute_interest(sample_loan, 5000.0) == pytest.approx(50.0)

    def test_interest_on_running_balance(self, sample_loan):
        """Interest uses the balance passed in, not the original principal."""
        assert compute_interest(sample_loan, 1000.0) == pytest.approx(10.0)

    def test_zero_balance_accrues_nothing(self, sample_loan):
        assert compute_interest(sample_loan, 0.0) == 0.0

    def test_zero_rate_accrues_nothing(self):
        loan = LoanRecord("Free", date(2024, 1, 1), 1000.0, 0.0, 10, 100.0)
        assert compute_interest(loan, 1000.0) == 0.0


# ── Payment Application ───────────────────────────────────────────────────

class TestApplyPayment:

    def test_partial_payment(self):
        assert apply_payment(1000.0, 175.0) == (825.0, 0.0, False)

    def test_overpayment_returns_overflow(self):
        balance, overflow, retired = apply_payment(30.0, 100.0)
        assert balance == 0.0
        assert overflow == pytest.approx(70.0)
        assert retired is True

    def test_exact_payment_retires(self):
        assert apply_payment(100.0, 100.0) == (0.0, 0.0, True)

    def test_dust_residue_retires(self):
        """A leftover below one cent is written off, not carried."""
        balance, overflow, retired = apply_payment(100.004, 100.0)
        assert balance == 0.0
        assert overflow == 0.0
        assert retired is True

    def test_custom_dust_floor(self):
        balance, _, retired = apply_payment(100.5, 100.0, dust_floor=1.0)
        assert balance == 0.0
        assert retired is True


# ── Lifecycle ─────────────────────────────────────────────────────────────

class TestLifecycle:

    def test_pending_before_start(self, sample_loan):
        assert not has_started(sample_loan, date(2024, 2, 1))
        assert not is_active(sample_loan, 5000.0, date(2024, 2, 1))

    def test_active_on_start(self, sample_loan):
        assert has_started(sample_loan, date(2024, 3, 1))
        assert is_active(sample_loan, 5000.0, date(2024, 3, 1))

    def test_retired_below_floor(self, sample_loan):
        assert not is_active(sample_loan, 0.009, date(2024, 6, 1))

    def test_mid_month_start_waits_for_next_month(self, sample_loan):
        loan = LoanRecord("Mid", date(2024, 4, 15), 100.0, 0.1, 12, 10.0)
        assert not has_started(loan, date(2024, 4, 1))
        assert has_started(loan, date(2024, 5, 1))

    def test_earliest_start(self, sample_loan):
        other = LoanRecord("Early", date(2023, 11, 20), 100.0, 0.1, 12, 10.0)
        assert earliest_start([sample_loan, other]) == date(2023, 11, 20)


# ── Month Arithmetic ──────────────────────────────────────────────────────

class TestAddMonths:

    def test_simple(self):
        assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)

    def test_year_rollover(self):
        assert add_months(date(2024, 11, 1), 3) == date(2025, 2, 1)

    def test_clamps_to_month_end(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_anchor_day_restored(self):
        """Offsets from the anchor keep the original day where it exists."""
        assert add_months(date(2024, 1, 31), 2) == date(2024, 3, 31)

    def test_zero_offset(self):
        assert add_months(date(2024, 5, 5), 0) == date(2024, 5, 5)
