"""Loan model for the amortization simulator.

Implements the per-loan financial math:
- Annual rate → monthly periodic rate conversion
- Interest accrual on running balances
- Scheduled payment application with overflow
- Calendar month arithmetic for the month axis
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd

DUST_FLOOR = 0.01  # Balances below this are treated as retired


@dataclass(frozen=True)
class LoanRecord:
    """Immutable descriptor for a single loan in the portfolio.

    The running balance is not stored here; the simulator keeps it in a
    balance vector indexed by the loan's position in the portfolio.
    """

    name: str
    start_date: date
    principal: float            # Original amount owed
    annual_rate: float          # Decimal fraction (e.g., 0.05 for 5%)
    term_months: int            # Informational only
    scheduled_payment: float    # Contractual monthly payment
    additional_payment: float = 0.0

    @property
    def monthly_rate(self) -> float:
        """Annual rate ÷ 12."""
        return self.annual_rate / 12.0

    @property
    def monthly_payment(self) -> float:
        """Scheduled plus additional payment made every active month."""
        return self.scheduled_payment + self.additional_payment


def add_months(d: date, n: int) -> date:
    """Shift a date by ``n`` calendar months, clamping to the month's last day."""
    return (pd.Timestamp(d) + pd.DateOffset(months=n)).date()


def has_started(loan: LoanRecord, month: date) -> bool:
    """True once the month axis has reached the loan's start date."""
    return loan.start_date <= month


def is_active(loan: LoanRecord, balance: float, month: date,
              dust_floor: float = DUST_FLOOR) -> bool:
    """Active = started and still carrying a balance above the dust floor."""
    return has_started(loan, month) and balance >= dust_floor


def compute_interest(loan: LoanRecord, balance: float) -> float:
    """Compute one month of interest on the running balance.

    Formula: I_t = B_t × (rate / 12)

    Returns:
        Interest amount (≥ 0). Zero for a zero balance.
    """
    if balance <= 0:
        return 0.0
    return balance * loan.monthly_rate


def apply_payment(balance: float, payment: float,
                  dust_floor: float = DUST_FLOOR) -> tuple[float, float, bool]:
    """Subtract a payment from a balance without going below zero.

    A payment that leaves less than the dust floor retires the balance; any
    excess over the balance is returned as overflow.

    Args:
        balance: Outstanding balance before the payment.
        payment: Amount offered against the balance.
        dust_floor: Residue treated as zero.

    Returns:
        (new_balance, overflow, retired) tuple.
    """
    remaining = balance - payment
    if remaining < dust_floor:
        return 0.0, max(0.0, -remaining), True
    return remaining, 0.0, False


def earliest_start(loans: list[LoanRecord]) -> date:
    """First month of the month axis."""
    return min(loan.start_date for loan in loans)
