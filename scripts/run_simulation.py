"""Project loan balances month by month under avalanche-with-rollover.

Usage:
    python scripts/run_simulation.py                                   # Example portfolio → stdout
    python scripts/run_simulation.py --input loans.csv --output balances.csv
    python scripts/run_simulation.py --input configs/portfolios/example.yaml --summary --verbose

Exit codes:
    0  success
    1  loan file missing or unreadable
    2  portfolio violates an input precondition
    3  schedule did not terminate within max_months
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rollover.adapters.formatter import format_step_diagnostics, write_matrix
from rollover.adapters.sheet_parser import LoanParseError, load_loans
from rollover.evaluation.metrics import compute_payoff_summary
from rollover.sim import AmortizationSimulator, NonTerminatingSchedule, PreconditionError
from rollover.utils.config import resolve_project_path, load_sim_config

EXIT_INPUT_ERROR = 1
EXIT_PRECONDITION = 2
EXIT_NON_TERMINATING = 3


def print_summary(summary: dict, stream=sys.stderr) -> None:
    """Print payoff dates and totals."""
    print("\n" + "=" * 60, file=stream)
    print("  PAYOFF SUMMARY", file=stream)
    print("=" * 60, file=stream)
    for name, payoff in summary["payoff_dates"].items():
        when = f"{payoff.month}/{payoff.year}" if payoff else "never"
        print(f"  {name:.<35s} {when:>10s}", file=stream)
    print(f"  {'─'*56}", file=stream)
    print(f"  Months simulated:    {summary['months']}", file=stream)
    print(f"  Total principal:     ${summary['total_principal']:>12,.2f}", file=stream)
    print(f"  Total interest:      ${summary['total_interest']:>12,.2f}", file=stream)
    print(f"  Total paid:          ${summary['total_paid']:>12,.2f}", file=stream)
    if summary["unapplied_remainder"] > 0:
        print(
            f"  Unapplied remainder: ${summary['unapplied_remainder']:>12,.2f}",
            file=stream,
        )
    print(file=stream)


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate debt avalanche with rollover")
    parser.add_argument(
        "--input",
        type=str,
        default="configs/portfolios/example.yaml",
        help="Loan schedule (.csv export of the loan sheet, or .yaml portfolio)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/sim/default.yaml",
        help="Path to simulator config YAML",
    )
    parser.add_argument("--output", type=str, default="-", help="Output CSV path ('-' for stdout)")
    parser.add_argument("--summary", action="store_true", help="Print payoff summary to stderr")
    parser.add_argument("--verbose", action="store_true", help="Print monthly overflow notes to stderr")
    args = parser.parse_args()

    try:
        sim_config = load_sim_config(args.config)
        loans = load_loans(resolve_project_path(args.input))
    except (OSError, LoanParseError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if not loans:
        print("No data found.", file=sys.stderr)
        return EXIT_PRECONDITION

    simulator = AmortizationSimulator(sim_config)
    try:
        matrix = simulator.run(loans)
    except PreconditionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_PRECONDITION
    except NonTerminatingSchedule as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_NON_TERMINATING

    if args.verbose:
        for step in matrix.steps:
            for line in format_step_diagnostics(step, matrix.loan_names):
                print(line, file=sys.stderr)

    if args.output == "-":
        write_matrix(matrix, sys.stdout)
    else:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w") as f:
            write_matrix(matrix, f)
        print(f"Balances saved to {out}", file=sys.stderr)

    if args.summary:
        print_summary(compute_payoff_summary(matrix, loans, sim_config.dust_floor), sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
