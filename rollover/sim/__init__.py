"""Amortization simulator for a debt-avalanche-with-rollover portfolio."""

from rollover.sim.errors import NonTerminatingSchedule, PreconditionError, SimulationError
from rollover.sim.loan_model import DUST_FLOOR, LoanRecord
from rollover.sim.result_matrix import ResultMatrix, StepRecord
from rollover.sim.simulator import AmortizationSimulator, validate_portfolio

__all__ = [
    "AmortizationSimulator",
    "LoanRecord",
    "ResultMatrix",
    "StepRecord",
    "SimulationError",
    "PreconditionError",
    "NonTerminatingSchedule",
    "DUST_FLOOR",
    "validate_portfolio",
]
