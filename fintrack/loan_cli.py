"""CLI for the loan calculators.

Usage:
    python -m fintrack.loan_cli quote --balance 500000 --rate-pct 3.5 --tenor 25 --unit years
    python -m fintrack.loan_cli quote --balance 500000 --rate-pct 3.5 --tenor 300 --start 2024-01-15
    python -m fintrack.loan_cli stages
    python -m fintrack.loan_cli evaluate property.json --as-of 2025-06-30
"""

import argparse
import json
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pydantic import ValidationError

from fintrack.engine.evaluation import evaluate_property
from fintrack.engine.realestate import default_progressive_stages
from fintrack.engine.repricing import (
    months_between,
    remaining_as_of,
    repricing_quote,
    tenor_to_months,
)
from fintrack.models.loan import LoanEvaluation, RepricingQuote
from fintrack.models.property import RealEstateProperty

logger = logging.getLogger(__name__)

EXIT_INVALID = 2


def _header(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def print_quote(q: RepricingQuote, months_paid: int, remaining: Decimal) -> None:
    _header("Repricing Quote")
    print(f"  Balance:          ${q.balance:,.2f}")
    print(f"  Tenor:            {q.months} months")
    print(f"  Monthly Payment:  ${q.payment:,.2f}")
    print(f"  Total Interest:   ${q.total_interest:,.2f}")
    print(f"  Total Paid:       ${q.total_paid:,.2f}")
    if months_paid > 0:
        print(f"  Instalments Paid: {months_paid}")
    else:
        print("  Instalments Paid: none yet")
    print(f"  Remaining:        ${remaining:,.2f}")
    print()


def print_stages() -> None:
    _header("Default Progressive Payment Plan")
    for stage in default_progressive_stages():
        print(f"  {stage.percent * 100:>5.1f}%  {stage.name}")
    print()


def print_evaluation(prop: RealEstateProperty, ev: LoanEvaluation) -> None:
    _header(f"Loan Evaluation: {prop.name} (as of {ev.as_of.isoformat()})")
    print(f"  Current Rate:        {ev.current_rate * 100:.3f}%")
    print(f"  Equity Paid:         ${ev.equity_paid:,.2f}")
    print(f"  Loan Disbursed:      ${ev.loan_disbursed:,.2f}")
    for d in ev.loan_disbursements:
        print(f"    {d.drawn_on.isoformat()}  ${d.amount:,.2f}")
    print(f"  Pre-start Interest:  ${ev.pre_start_interest:,.2f}")
    print(f"  Instalments Paid:    {ev.amortization.months_paid} of {ev.term_months}")
    print(f"  Interest Paid:       ${ev.amortization.interest:,.2f}")
    print(f"  Principal Paid:      ${ev.amortization.principal:,.2f}")
    print(f"  Outstanding Balance: ${ev.outstanding_balance:,.2f}")
    print(f"  Monthly Payment:     ${ev.monthly_payment:,.2f}")
    print(f"  Equity (market):     ${ev.equity:,.2f}")
    print()


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def _decimal(value: str) -> Decimal:
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid number {value!r}")
    if not number.is_finite():
        raise argparse.ArgumentTypeError(f"invalid number {value!r}, must be finite")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Real-estate loan calculators")
    sub = parser.add_subparsers(dest="command", required=True)

    q = sub.add_parser("quote", help="Payment on a repriced balance")
    q.add_argument("--balance", type=_decimal, required=True, help="Remaining principal")
    q.add_argument("--rate-pct", type=_decimal, required=True, help="Annual rate in percent, e.g. 3.5")
    q.add_argument("--tenor", type=int, required=True, help="Remaining tenor")
    q.add_argument("--unit", choices=["months", "years"], default="months", help="Tenor unit (default: months)")
    q.add_argument("--start", type=_iso_date, help="Date payments started (YYYY-MM-DD)")
    q.add_argument("--as-of", type=_iso_date, help="Evaluation date (default: today)")

    sub.add_parser("stages", help="Show the default progressive payment plan")

    e = sub.add_parser("evaluate", help="Evaluate a property stored as JSON")
    e.add_argument("file", type=Path, help="Property JSON file")
    e.add_argument("--as-of", type=_iso_date, help="Evaluation date (default: today)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    as_of = getattr(args, "as_of", None) or date.today()

    if args.command == "stages":
        print_stages()
        return 0

    if args.command == "quote":
        q = repricing_quote(args.balance, args.rate_pct, tenor_to_months(args.tenor, args.unit))
        if q is None:
            print("Invalid setup: balance and tenor must be positive, rate non-negative", file=sys.stderr)
            return EXIT_INVALID
        months_paid = min(q.months, months_between(args.start, as_of)) if args.start else 0
        print_quote(q, months_paid, remaining_as_of(q, args.start, as_of))
        return 0

    try:
        prop = RealEstateProperty.model_validate(json.loads(args.file.read_text(encoding="utf-8")))
    except (OSError, ValueError, ValidationError) as exc:
        logger.debug("Failed to load %s", args.file, exc_info=True)
        print(f"Cannot read property from {args.file}: {exc}", file=sys.stderr)
        return EXIT_INVALID
    print_evaluation(prop, evaluate_property(prop, as_of))
    return 0


if __name__ == "__main__":
    sys.exit(main())
