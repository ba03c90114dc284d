"""Generate a stacked area chart of projected loan balances.

Usage:
    python scripts/plot_balances.py
    python scripts/plot_balances.py --input loans.csv --output results/balances.png
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt

from rollover.adapters.sheet_parser import load_loans
from rollover.sim import AmortizationSimulator, ResultMatrix
from rollover.utils.config import resolve_project_path, load_sim_config


def make_stacked_plot(matrix: ResultMatrix, output_path: str = "results/balances.png") -> None:
    """Stack every loan's balance over the month axis."""
    df = matrix.to_dataframe()

    fig, ax = plt.subplots(figsize=(14, 7))
    ax.stackplot(
        df.index,
        [df[name].values for name in df.columns],
        labels=list(df.columns),
        alpha=0.8,
    )
    ax.set_title("Projected Loan Balances", fontsize=16, fontweight="bold")
    ax.set_xlabel("Month")
    ax.set_ylabel("Balance ($)")
    ax.legend(loc="upper right")
    ax.grid(axis="y", alpha=0.3)

    plt.tight_layout()

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(out), dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Balance chart saved to {out}")


def main():
    parser = argparse.ArgumentParser(description="Plot projected loan balances")
    parser.add_argument(
        "--input",
        type=str,
        default="configs/portfolios/example.yaml",
        help="Loan schedule (.csv or .yaml)",
    )
    parser.add_argument("--config", type=str, default="configs/sim/default.yaml")
    parser.add_argument(
        "--output",
        type=str,
        default="results/balances.png",
        help="Path to save the chart image",
    )
    args = parser.parse_args()

    loan_path = resolve_project_path(args.input)
    if not loan_path.exists():
        print(f"Error: {loan_path} not found.")
        sys.exit(1)

    loans = load_loans(loan_path)
    matrix = AmortizationSimulator(load_sim_config(args.config)).run(loans)
    print(f"Simulated {len(matrix)} months for {len(loans)} loans")

    make_stacked_plot(matrix, args.output)


if __name__ == "__main__":
    main()
