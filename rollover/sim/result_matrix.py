"""ResultMatrix — append-only month → balance snapshot table."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator

import numpy as np
import pandas as pd


@dataclass
class StepRecord:
    """What happened to the portfolio during one simulated month."""

    month: date
    payments: list[float]                # Amount offered to each loan (phases A + B)
    overflows: list[float] = field(default_factory=list)  # Phase A overflow per loan
    remainder_created: float = 0.0       # Phase A overflow, all loans
    rollover: float = 0.0                # Rollover pool after phase A
    redirect_target: int | None = None   # Index of the phase B target, if any
    redirect_amount: float = 0.0         # remainder + rollover applied in phase B
    carried_remainder: float = 0.0       # Remainder left over after phase B
    interests: list[float] = field(default_factory=list)  # Accrued after the snapshot

    @property
    def total_paid(self) -> float:
        return float(sum(self.payments))

    @property
    def total_interest(self) -> float:
        return float(sum(self.interests))


class ResultMatrix:
    """Ordered sequence of (month, balances) rows with a fixed column order.

    Rows can only be appended, and each appended month must be exactly one
    calendar month after the previous one.
    """

    def __init__(self, loan_names: list[str]):
        self.loan_names = list(loan_names)
        self._months: list[date] = []
        self._rows: list[np.ndarray] = []
        self.steps: list[StepRecord] = []
        self.unapplied_remainder: float = 0.0

    # ──────────────────────────────────────────────────────────────────────
    # Mutation
    # ──────────────────────────────────────────────────────────────────────

    def append(self, month: date, balances: np.ndarray | list[float]) -> None:
        row = np.array(balances, dtype=np.float64)
        if row.shape != (len(self.loan_names),):
            raise ValueError(
                f"Expected {len(self.loan_names)} balances, got shape {row.shape}"
            )
        if self._months:
            prev = self._months[-1]
            gap = (month.year - prev.year) * 12 + (month.month - prev.month)
            if gap != 1:
                raise ValueError(
                    f"Month {month.isoformat()} does not follow {prev.isoformat()}"
                )
        self._months.append(month)
        self._rows.append(row)

    # ──────────────────────────────────────────────────────────────────────
    # Read access
    # ──────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[tuple[date, tuple[float, ...]]]:
        for month, row in zip(self._months, self._rows):
            yield month, tuple(float(b) for b in row)

    @property
    def months(self) -> list[date]:
        return list(self._months)

    def last_row(self) -> tuple[float, ...]:
        """Balances of the final recorded month (empty tuple if no rows)."""
        if not self._rows:
            return ()
        return tuple(float(b) for b in self._rows[-1])

    def column(self, name: str) -> list[float]:
        """Balance history of a single loan, first month to last."""
        if name not in self.loan_names:
            raise KeyError(f"Unknown loan {name!r}")
        idx = self.loan_names.index(name)
        return [float(row[idx]) for row in self._rows]

    def to_array(self) -> np.ndarray:
        """Balances as a (months × loans) float64 array."""
        if not self._rows:
            return np.zeros((0, len(self.loan_names)), dtype=np.float64)
        return np.vstack(self._rows)

    def to_dataframe(self) -> pd.DataFrame:
        """Balances as a DataFrame indexed by month, one column per loan."""
        df = pd.DataFrame(
            self.to_array(),
            index=pd.Index(self._months, name="date"),
            columns=self.loan_names,
        )
        return df
