"""Exceptions raised by the amortization simulator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rollover.sim.result_matrix import ResultMatrix


class SimulationError(Exception):
    """Base class for simulator failures."""


class PreconditionError(SimulationError, ValueError):
    """The loan portfolio violates an input invariant; nothing was simulated."""


class NonTerminatingSchedule(SimulationError, RuntimeError):
    """The month cap was reached before every loan was retired.

    Attributes:
        matrix: The partial ResultMatrix recorded up to the cap.
        max_months: The cap that was hit.
    """

    def __init__(self, matrix: ResultMatrix, max_months: int):
        self.matrix = matrix
        self.max_months = max_months
        outstanding = [
            name for name, bal in zip(matrix.loan_names, matrix.last_row())
            if bal > 0
        ]
        super().__init__(
            f"Schedule did not terminate within {max_months} months; "
            f"still outstanding: {', '.join(outstanding) or 'none'}"
        )
