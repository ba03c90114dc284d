"""Input adapter — turns loan-schedule spreadsheet rows into LoanRecords.

Expected column layout (spreadsheet columns A–G, header row excluded):

    name | start date | amount | interest rate | term | payment | additional

Cells arrive as display strings, e.g. ``"1/15/2024"``, ``"$12,500.00"``,
``"6.8%"``, ``"120"``, ``"$143.86"`` and a possibly blank additional payment.
Rows are read until the first row with a blank name.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd
import yaml

from rollover.sim.loan_model import LoanRecord

COLUMNS = [
    "name",
    "start_date",
    "principal",
    "annual_rate",
    "term_months",
    "scheduled_payment",
    "additional_payment",
]


class LoanParseError(ValueError):
    """A spreadsheet cell could not be interpreted."""

    def __init__(self, loan: str, field: str, value: Any, reason: str = ""):
        self.loan = loan
        self.field = field
        self.value = value
        msg = f"error while parsing {field} for {loan!r}: {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ── Cell parsers ──────────────────────────────────────────────────────────

def parse_currency(text: str | float) -> float:
    """``"$1,234.50"`` → 1234.5."""
    if isinstance(text, (int, float)):
        return float(text)
    cleaned = str(text).strip().replace("$", "").replace(",", "")
    return float(cleaned)


def parse_percent(text: str | float) -> float:
    """``"6.8%"`` → 0.068. Values are percent points, with or without the sign."""
    if isinstance(text, (int, float)):
        return float(text) / 100.0
    cleaned = str(text).strip().rstrip("%").strip()
    return float(cleaned) / 100.0


def parse_date(text: str | date) -> date:
    """``"1/2/2006"`` (month/day/year) → date(2006, 1, 2)."""
    if isinstance(text, datetime):
        return text.date()
    if isinstance(text, date):
        return text
    return datetime.strptime(str(text).strip(), "%m/%d/%Y").date()


def parse_term(text: str | float) -> int:
    """Loan term in months; tolerates a stray currency sign and ``120.0``."""
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        value = float(str(text).strip().lstrip("$"))
    if not value.is_integer():
        raise ValueError(f"term must be a whole number of months, got {text!r}")
    return int(value)


_PARSERS = {
    "start_date": parse_date,
    "principal": parse_currency,
    "annual_rate": parse_percent,
    "term_months": parse_term,
    "scheduled_payment": parse_currency,
    "additional_payment": parse_currency,
}


# ── Row conversion ────────────────────────────────────────────────────────

def parse_loan_row(row: Sequence[Any]) -> LoanRecord:
    """Convert one spreadsheet row into a LoanRecord.

    Raises:
        LoanParseError: If the row is short or a cell is malformed.
    """
    name = str(row[0]).strip() if row else ""
    if len(row) < len(COLUMNS) - 1:
        raise LoanParseError(name, "row", list(row), f"expected {len(COLUMNS)} columns")

    cells = list(row) + [""] * (len(COLUMNS) - len(row))
    values: dict[str, Any] = {"name": name}
    for field, cell in zip(COLUMNS[1:], cells[1:]):
        if field == "additional_payment" and not str(cell).strip():
            values[field] = 0.0
            continue
        try:
            values[field] = _PARSERS[field](cell)
        except (TypeError, ValueError) as exc:
            raise LoanParseError(name, field, cell, str(exc)) from exc

    return LoanRecord(**values)


def rows_to_loans(rows: Iterable[Sequence[Any]]) -> list[LoanRecord]:
    """Parse rows until the first one with a blank name."""
    loans = []
    for row in rows:
        if not row or not str(row[0]).strip():
            break
        loans.append(parse_loan_row(row))
    return loans


# ── File readers ──────────────────────────────────────────────────────────

def load_loans_csv(path: str | Path) -> list[LoanRecord]:
    """Read a CSV export of the loan sheet (first row is the header)."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    return rows_to_loans(df.itertuples(index=False, name=None))


def load_portfolio_yaml(path: str | Path) -> list[LoanRecord]:
    """Read a YAML portfolio: a top-level ``loans:`` list of mappings.

    Each mapping uses the LoanRecord field names. Values may be typed
    (numbers, dates) or the same display strings the spreadsheet uses;
    ``annual_rate`` is in percent points either way (``6.8`` or ``"6.8%"``).
    """
    with open(path, "r") as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping with a 'loans' list at the top level")
    entries = raw.get("loans") or []
    if not isinstance(entries, list):
        raise ValueError(f"{path}: 'loans' must be a list of mappings")

    rows = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise LoanParseError(f"loans[{i}]", "entry", entry, "expected a mapping")
        rows.append([
            "" if entry.get(col) is None else entry.get(col)
            for col in COLUMNS
        ])
    return rows_to_loans(rows)


def load_loans(path: str | Path) -> list[LoanRecord]:
    """Dispatch on file suffix: ``.csv`` or ``.yaml`` / ``.yml``."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return load_loans_csv(path)
    if suffix in (".yaml", ".yml"):
        return load_portfolio_yaml(path)
    raise ValueError(f"Unsupported loan file type {suffix!r} (use .csv or .yaml)")
