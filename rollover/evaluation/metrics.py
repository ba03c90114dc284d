"""Payoff metrics for a simulated portfolio.

Summarizes a ResultMatrix into the numbers a borrower cares about: when each
loan is gone, when the whole portfolio is debt-free, and what it cost.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from rollover.sim.loan_model import DUST_FLOOR, LoanRecord
from rollover.sim.result_matrix import ResultMatrix


def compute_payoff_dates(
    matrix: ResultMatrix,
    loans: list[LoanRecord],
    dust_floor: float = DUST_FLOOR,
) -> dict[str, date | None]:
    """First month, on or after each loan's start, whose snapshot is below the floor.

    Returns:
        Mapping loan name → payoff month, or None if never paid off.
    """
    payoff: dict[str, date | None] = {loan.name: None for loan in loans}
    for month, balances in matrix:
        for loan, balance in zip(loans, balances):
            if payoff[loan.name] is None and loan.start_date <= month and balance < dust_floor:
                payoff[loan.name] = month
    return payoff


def compute_payoff_summary(
    matrix: ResultMatrix,
    loans: list[LoanRecord],
    dust_floor: float = DUST_FLOOR,
) -> dict[str, Any]:
    """Aggregate payoff metrics for one simulation run.

    Args:
        matrix: Result of AmortizationSimulator.run.
        loans: The portfolio that produced it, in the same order.
        dust_floor: Balance treated as paid off.

    Returns:
        Dict with months, debt_free_date, payoff_dates, total_interest,
        total_paid, total_principal, final_debt and unapplied_remainder.
    """
    payoff_dates = compute_payoff_dates(matrix, loans, dust_floor)
    paid = all(d is not None for d in payoff_dates.values())
    months = matrix.months

    total_principal = sum(loan.principal for loan in loans)
    total_interest = sum(step.total_interest for step in matrix.steps)
    final_debt = sum(matrix.last_row())
    # Whatever left the balances was paid; overflow that found no loan was not
    total_paid = total_principal + total_interest - final_debt

    return {
        "months": len(matrix),
        "debt_free_date": months[-1] if paid and months else None,
        "payoff_dates": payoff_dates,
        "total_interest": total_interest,
        "total_paid": total_paid,
        "total_principal": total_principal,
        "final_debt": final_debt,
        "unapplied_remainder": matrix.unapplied_remainder,
    }
