"""YAML configuration loader and dataclass for simulator setup."""

from __future__ import annotations

import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def find_project_root() -> Path | None:
    """Nearest ancestor of this package that holds ``pyproject.toml``."""
    return next(
        (d for d in Path(__file__).resolve().parents if (d / "pyproject.toml").exists()),
        None,
    )


def resolve_project_path(path: str | Path) -> Path:
    """Locate a config or loan file given relative to the working directory
    or, failing that, to the project root.

    Paths that exist as given (including absolute ones) are used unchanged.
    A missing relative path is still anchored at the root so that opening it
    reports the location that was actually tried.
    """
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p
    root = find_project_root()
    return root / p if root is not None else p


@dataclass
class SimConfig:
    """Simulator configuration."""

    max_months: int = 1200                      # Cap before NonTerminatingSchedule
    dust_floor: float = 0.01                    # Balances below this count as paid
    rollover_on_redirect_payoff: bool = False   # Free a loan's payment when a redirect retires it


def load_sim_config(path: str | Path) -> SimConfig:
    """Load a SimConfig from a YAML file.

    Args:
        path: Path to a YAML config file (e.g., configs/sim/default.yaml).

    Returns:
        Populated SimConfig instance. Missing keys keep their defaults.
    """
    path = resolve_project_path(path)
    with open(path, "r") as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    unknown = set(raw) - {"max_months", "dust_floor", "rollover_on_redirect_payoff"}
    if unknown:
        raise ValueError(f"Unknown sim config keys: {', '.join(sorted(unknown))}")

    cfg = SimConfig(
        max_months=int(raw.get("max_months", 1200)),
        dust_floor=float(raw.get("dust_floor", 0.01)),
        rollover_on_redirect_payoff=bool(raw.get("rollover_on_redirect_payoff", False)),
    )
    if cfg.max_months < 1:
        raise ValueError(f"max_months must be positive, got {cfg.max_months}")
    if cfg.dust_floor <= 0:
        raise ValueError(f"dust_floor must be positive, got {cfg.dust_floor}")
    return cfg
