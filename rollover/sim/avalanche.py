"""Avalanche targeting — freed money goes to the highest-rate loan first."""

from __future__ import annotations

from datetime import date

import numpy as np

from rollover.sim.loan_model import DUST_FLOOR, LoanRecord, is_active


def select_avalanche_target(
    loans: list[LoanRecord],
    balances: np.ndarray,
    month: date,
    dust_floor: float = DUST_FLOOR,
) -> int | None:
    """Pick the active loan with the strictly greatest positive annual rate.

    Ties go to the loan that comes first in portfolio order. Zero-rate loans
    are never targeted.

    Returns:
        Index of the target loan, or None if no active loan carries interest.
    """
    target_idx = None
    highest = 0.0
    for i, loan in enumerate(loans):
        if not is_active(loan, balances[i], month, dust_floor):
            continue
        # Strict comparison keeps the earliest loan on ties
        if loan.annual_rate > highest:
            highest = loan.annual_rate
            target_idx = i
    return target_idx
