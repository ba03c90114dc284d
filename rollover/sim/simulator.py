"""AmortizationSimulator — month-by-month debt avalanche with rollover.

Every active loan pays its scheduled (plus additional) payment each month.
Payments that overshoot a balance spill into a remainder pool, and the full
monthly payment of every retired loan joins a rollover pool. Both pools are
redirected each month to the active loan with the highest interest rate.

Monthly pipeline:
    A. Scheduled payments, in portfolio order
    B. Avalanche redirect of remainder + rollover
    C. Snapshot balances into the ResultMatrix
    D. Termination check
    E. Interest accrual, then advance one calendar month
"""

from __future__ import annotations

import math
from datetime import date

import numpy as np

from rollover.sim.avalanche import select_avalanche_target
from rollover.sim.errors import NonTerminatingSchedule, PreconditionError
from rollover.sim.loan_model import (
    LoanRecord,
    add_months,
    apply_payment,
    compute_interest,
    earliest_start,
    has_started,
    is_active,
)
from rollover.sim.result_matrix import ResultMatrix, StepRecord
from rollover.utils.config import SimConfig


def validate_portfolio(loans: list[LoanRecord]) -> None:
    """Check input invariants before anything is simulated.

    Raises:
        PreconditionError: On the first violated invariant.
    """
    if not loans:
        raise PreconditionError("Loan portfolio is empty")

    seen: set[str] = set()
    for loan in loans:
        label = loan.name or "<unnamed>"
        if not loan.name or not loan.name.strip():
            raise PreconditionError("Loan name must be non-empty")
        if loan.name in seen:
            raise PreconditionError(f"Duplicate loan name {loan.name!r}")
        seen.add(loan.name)

        amounts = {
            "principal": loan.principal,
            "annual rate": loan.annual_rate,
            "scheduled payment": loan.scheduled_payment,
            "additional payment": loan.additional_payment,
        }
        for field, value in amounts.items():
            if not math.isfinite(value):
                raise PreconditionError(f"{label}: {field} must be finite, got {value}")

        if loan.principal < 0:
            raise PreconditionError(f"{label}: negative principal {loan.principal}")
        if loan.annual_rate < 0:
            raise PreconditionError(f"{label}: negative annual rate {loan.annual_rate}")
        if loan.scheduled_payment < 0 or loan.additional_payment < 0:
            raise PreconditionError(f"{label}: payments must be non-negative")
        if loan.term_months < 1:
            raise PreconditionError(f"{label}: term must be at least one month")
        if loan.scheduled_payment <= 0 and loan.annual_rate > 0 and loan.principal > 0:
            raise PreconditionError(
                f"{label}: no scheduled payment on an interest-bearing balance"
            )


class AmortizationSimulator:
    """Projects loan balances until every loan in the portfolio is retired.

    The simulator is pure: input LoanRecords are never modified, and the
    running balances live in a float64 vector created per run.
    """

    def __init__(self, config: SimConfig | None = None):
        self.config = config or SimConfig()

    def run(self, loans: list[LoanRecord]) -> ResultMatrix:
        """Simulate the portfolio to payoff.

        Args:
            loans: Ordered portfolio. Order fixes the output columns and the
                tie-break of the avalanche target.

        Returns:
            ResultMatrix with one row per month, first row at the earliest
            start date.

        Raises:
            PreconditionError: If the portfolio is malformed.
            NonTerminatingSchedule: If ``config.max_months`` rows are recorded
                without every loan being retired.
        """
        loans = list(loans)
        validate_portfolio(loans)

        floor = self.config.dust_floor
        balances = np.array([loan.principal for loan in loans], dtype=np.float64)
        matrix = ResultMatrix([loan.name for loan in loans])
        start = earliest_start(loans)

        remainder = 0.0
        rollover = 0.0

        for offset in range(self.config.max_months):
            month = add_months(start, offset)

            # ── A. Scheduled payments ─────────────────────────────────────
            step, remainder, rollover = self._pay_scheduled(
                loans, balances, month, remainder, rollover
            )
            any_positive = any(
                has_started(loan, month) and balances[i] >= floor
                for i, loan in enumerate(loans)
            )
            any_pending = any(not has_started(loan, month) for loan in loans)

            # ── B. Avalanche redirect ─────────────────────────────────────
            remainder, rollover, new_remainder = self._redirect(
                loans, balances, month, remainder, rollover, step
            )
            step.carried_remainder = remainder

            # ── C. Snapshot ───────────────────────────────────────────────
            matrix.append(month, balances)
            matrix.steps.append(step)

            # ── D. Termination ────────────────────────────────────────────
            if not (any_positive or any_pending or new_remainder):
                matrix.unapplied_remainder = remainder
                return matrix

            # ── E. Accrual ────────────────────────────────────────────────
            step.interests = self._accrue(loans, balances, month)

        raise NonTerminatingSchedule(matrix, self.config.max_months)

    # ──────────────────────────────────────────────────────────────────────
    # Monthly phases
    # ──────────────────────────────────────────────────────────────────────

    def _pay_scheduled(
        self,
        loans: list[LoanRecord],
        balances: np.ndarray,
        month: date,
        remainder: float,
        rollover: float,
    ) -> tuple[StepRecord, float, float]:
        """Apply every active loan's own monthly payment.

        A loan retired here releases its whole monthly payment into the
        rollover pool; the part it could not absorb goes to the remainder.
        """
        n = len(loans)
        step = StepRecord(month=month, payments=[0.0] * n, overflows=[0.0] * n)

        for i, loan in enumerate(loans):
            if not is_active(loan, balances[i], month, self.config.dust_floor):
                continue

            payment = loan.monthly_payment
            new_balance, overflow, retired = apply_payment(
                balances[i], payment, self.config.dust_floor
            )
            balances[i] = new_balance
            step.payments[i] = payment
            if retired:
                remainder += overflow
                rollover += payment
                step.overflows[i] = overflow
                step.remainder_created += overflow

        step.rollover = rollover
        return step, remainder, rollover

    def _redirect(
        self,
        loans: list[LoanRecord],
        balances: np.ndarray,
        month: date,
        remainder: float,
        rollover: float,
        step: StepRecord,
    ) -> tuple[float, float, bool]:
        """Send remainder + rollover to the highest-rate active loan.

        Returns:
            (remainder, rollover, created) where ``created`` is True when the
            redirect itself overshot the target and left a new remainder.
        """
        if remainder <= 0 and rollover <= 0:
            return remainder, rollover, False

        target = select_avalanche_target(
            loans, balances, month, self.config.dust_floor
        )
        if target is None:
            # Nothing to attack this month; the remainder waits
            return remainder, rollover, False

        amount = remainder + rollover
        new_balance, overflow, retired = apply_payment(
            balances[target], amount, self.config.dust_floor
        )
        balances[target] = new_balance
        step.payments[target] += amount
        step.redirect_target = target
        step.redirect_amount = amount

        if retired and self.config.rollover_on_redirect_payoff:
            rollover += loans[target].monthly_payment

        return overflow, rollover, overflow > 0

    def _accrue(
        self,
        loans: list[LoanRecord],
        balances: np.ndarray,
        month: date,
    ) -> list[float]:
        """Add one month of interest to every started loan's balance.

        Loans that have not started keep their original principal.
        """
        interests = []
        for i, loan in enumerate(loans):
            if not has_started(loan, month):
                interests.append(0.0)
                continue
            interest = compute_interest(loan, balances[i])
            balances[i] += interest
            interests.append(interest)
        return interests
