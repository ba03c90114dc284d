"""Text rendering of a ResultMatrix.

Output layout::

    date, Car, Student, Mortgage
    1/15/2024, 14500.000000, 23250.000000, 198400.000000
    ...
"""

from __future__ import annotations

from datetime import date
from typing import TextIO

from rollover.sim.result_matrix import ResultMatrix, StepRecord

SEPARATOR = ", "


def format_month(d: date) -> str:
    """month/day/year without zero padding, e.g. 1/2/2006."""
    return f"{d.month}/{d.day}/{d.year}"


def format_header(loan_names: list[str]) -> str:
    return SEPARATOR.join(["date", *loan_names])


def format_row(month: date, balances: tuple[float, ...] | list[float]) -> str:
    return SEPARATOR.join([format_month(month), *(f"{b:f}" for b in balances)])


def format_matrix(matrix: ResultMatrix, loan_names: list[str] | None = None) -> str:
    """Render the whole matrix as header + one line per month."""
    names = loan_names if loan_names is not None else matrix.loan_names
    lines = [format_header(names)]
    lines.extend(format_row(month, balances) for month, balances in matrix)
    return "\n".join(lines) + "\n"


def write_matrix(matrix: ResultMatrix, stream: TextIO,
                 loan_names: list[str] | None = None) -> None:
    stream.write(format_matrix(matrix, loan_names))


def format_step_diagnostics(step: StepRecord, loan_names: list[str]) -> list[str]:
    """Human-readable notes about one month's overflow and redirect."""
    lines = []
    for name, overflow in zip(loan_names, step.overflows):
        if overflow > 0:
            lines.append(f"{overflow:f} leftover after paying {name}")
    if step.redirect_target is not None:
        lines.append(
            f"{step.redirect_amount:f} redirected to "
            f"{loan_names[step.redirect_target]}"
        )
    if step.carried_remainder > 0:
        lines.append(f"{step.carried_remainder:f} carried into next month")
    return [f"{format_month(step.month)}: {line}" for line in lines]
