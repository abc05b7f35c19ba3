"""
Command-line interface for the Landlord Compliance Engine.

Provides subcommands for MTD classification, late penalties, EPC upgrade
planning, deadline timelines, readiness scoring and rent increases.
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from compliance_engine.deadlines import DeadlineEngine, get_certificate_status
from compliance_engine.epc import EpcEstimator
from compliance_engine.models import (
    Certificate,
    ChecklistItem,
    OwnershipType,
    Priority,
    Property,
    Regime,
)
from compliance_engine.mtd import MtdCalculator, MtdCalculatorInput
from compliance_engine.renters_rights import RentIncreaseCalculator
from compliance_engine.report_generator import ReportGenerator
from compliance_engine.regulations import (
    EPC_BANDS_BY_RATING,
    MTD_FINAL_DECLARATION_DEADLINE,
    get_exemption,
)
from compliance_engine.scoring import (
    ComplianceStatus,
    ScoreCalculator,
    default_checklist,
)

console = Console()

_STATUS_COLOURS = {
    ComplianceStatus.READY: "green",
    ComplianceStatus.PARTIAL: "yellow",
    ComplianceStatus.NOT_READY: "red",
}


def _now(args: argparse.Namespace) -> datetime:
    """The single "now" used for the whole invocation."""
    as_of = _date_arg(args.as_of, "--as-of date")
    if as_of:
        return datetime.combine(as_of, datetime.min.time())
    return datetime.now()


def _optional_date(value: Optional[str]) -> Optional[date]:
    value = (value or "").strip()
    return date.fromisoformat(value) if value else None


def _date_arg(value: Optional[str], name: str) -> Optional[date]:
    try:
        return _optional_date(value)
    except ValueError:
        console.print(f"[red]Invalid {name}: {value}[/red]")
        sys.exit(1)


def _read_rows(path: str) -> list[dict[str, str]]:
    csv_path = Path(path)
    if not csv_path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        sys.exit(1)
    with open(csv_path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def _load_properties_csv(path: str) -> list[Property]:
    """
    Load properties from a CSV file.

    Expected columns: property_id, address_line1, city, postcode,
                      ownership_type (sole, joint or limited_company)
    """
    properties: list[Property] = []
    for i, row in enumerate(_read_rows(path)):
        try:
            properties.append(
                Property(
                    property_id=row["property_id"].strip(),
                    address_line1=row["address_line1"].strip(),
                    city=row.get("city", "").strip(),
                    postcode=row.get("postcode", "").strip(),
                    ownership_type=OwnershipType(
                        (row.get("ownership_type") or "sole").strip().lower()
                    ),
                )
            )
        except (KeyError, ValueError) as e:
            console.print(f"[yellow]Skipping property row {i + 1}: {e}[/yellow]")
    return properties


def _load_certificates_csv(path: str) -> list[Certificate]:
    """
    Load certificates from a CSV file.

    Expected columns: certificate_id, property_id, category,
                      issue_date, expiry_date
    """
    certificates: list[Certificate] = []
    for i, row in enumerate(_read_rows(path)):
        try:
            certificates.append(
                Certificate(
                    certificate_id=row.get("certificate_id", str(i + 1)),
                    property_id=row["property_id"].strip(),
                    category=row["category"].strip(),
                    issue_date=_optional_date(row.get("issue_date")),
                    expiry_date=_optional_date(row.get("expiry_date")),
                )
            )
        except (KeyError, ValueError) as e:
            console.print(
                f"[yellow]Skipping certificate row {i + 1}: {e}[/yellow]"
            )
    return certificates


def _load_checklist_csv(path: str) -> list[ChecklistItem]:
    """
    Load checklist items from a CSV file.

    Expected columns: item_id, pillar, is_completed, priority, title
    """
    items: list[ChecklistItem] = []
    for i, row in enumerate(_read_rows(path)):
        try:
            items.append(
                ChecklistItem(
                    item_id=row.get("item_id", str(i + 1)),
                    regime=Regime(row["pillar"].strip()),
                    is_completed=row.get("is_completed", "").strip().lower()
                    in ("1", "true", "yes", "y"),
                    priority=Priority(
                        (row.get("priority") or "medium").strip().lower()
                    ),
                    property_id=(row.get("property_id") or "").strip() or None,
                    title=row.get("title", ""),
                )
            )
        except (KeyError, ValueError) as e:
            console.print(f"[yellow]Skipping checklist row {i + 1}: {e}[/yellow]")
    return items


def _split_keys(value: Optional[str]) -> list[str]:
    return [k.strip() for k in (value or "").split(",") if k.strip()]


def _decimal_arg(value: Optional[str], name: str) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite():
        console.print(f"[red]Invalid {name}: {value}[/red]")
        sys.exit(1)
    return amount


def _export(rg: ReportGenerator, report: dict, filename: Optional[str]) -> None:
    if filename:
        rg.to_json(report, filename)
        console.print(f"[green]Report exported to {rg.output_dir / filename}[/green]")


# -----------------------------------------------------------------------
# Subcommand: mtd
# -----------------------------------------------------------------------


def cmd_mtd(args: argparse.Namespace) -> None:
    """Check whether MTD for Income Tax applies and from when."""
    calc = MtdCalculator()
    result = calc.calculate_mtd_status(
        MtdCalculatorInput(
            gross_rental_income=_decimal_arg(args.rental_income, "rental income"),
            self_employment_income=(
                _decimal_arg(args.self_employment, "self-employment income")
                or Decimal("0")
            ),
            is_joint_ownership=args.joint,
            has_limited_company_properties=args.limited_company,
        )
    )

    colour = "red" if result.is_affected else "green"
    lines = [
        f"[bold]Qualifying Income:[/bold] £{result.qualifying_income:,.2f}",
        f"[bold]Phase:[/bold] {result.phase.value}",
        f"[bold]Deadline:[/bold] {result.deadline or 'N/A'}",
        f"[bold]Affected:[/bold] {'Yes' if result.is_affected else 'No'}",
    ]
    if result.is_affected:
        lines.append(
            "[bold]Final Declaration:[/bold] "
            f"{MTD_FINAL_DECLARATION_DEADLINE:%d %B %Y}"
        )
    lines += ["", result.message]
    console.print(
        Panel(
            "\n".join(lines),
            title="MTD for Income Tax",
            border_style=colour,
        )
    )

    rg = ReportGenerator(args.output_dir, generated_on=_now(args).date())
    _export(rg, rg.mtd_report(result), args.export_json)


# -----------------------------------------------------------------------
# Subcommand: penalty
# -----------------------------------------------------------------------


def cmd_penalty(args: argparse.Namespace) -> None:
    """Calculate a late payment penalty and penalty point status."""
    calc = MtdCalculator()
    amount = _decimal_arg(args.amount, "amount")
    penalty = calc.calculate_late_penalty(amount, args.days_late)

    body = "\n".join(f"  {line}" for line in penalty.breakdown) or "  No penalty yet"
    console.print(
        Panel(
            f"[bold]Amount Owed:[/bold] £{amount:,.2f}\n"
            f"[bold]Days Late:[/bold] {args.days_late}\n"
            f"[bold]Penalty:[/bold] £{penalty.penalty:,.2f}\n\n{body}",
            title="Late Payment Penalty",
            border_style="red" if penalty.penalty > 0 else "green",
        )
    )

    if args.points is not None:
        status = calc.penalty_points_status(args.points)
        colour = "red" if status.is_at_max else (
            "yellow" if status.is_warning else "blue"
        )
        console.print(
            f"[{colour}]Penalty points: {status.points}/{status.max_points}"
            + (f" - £{status.fine:,.0f} fine due" if status.is_at_max else "")
            + f"[/{colour}]"
        )


# -----------------------------------------------------------------------
# Subcommand: epc
# -----------------------------------------------------------------------


def cmd_epc(args: argparse.Namespace) -> None:
    """Rate a SAP score and plan upgrades to band C."""
    estimator = EpcEstimator()
    budget = _decimal_arg(args.budget, "budget")
    rating = estimator.get_rating_for_score(args.score)
    band = EPC_BANDS_BY_RATING[rating]
    recommendations = estimator.get_recommended_improvements(args.score, budget)
    estimate = estimator.estimate_total_upgrade_cost(args.score)

    compliant = estimator.is_compliant(rating)
    console.print(
        Panel(
            f"[bold]Score:[/bold] {args.score}\n"
            f"[bold]Rating:[/bold] [{band.colour}]{band.label}[/]\n"
            f"[bold]Gap to C:[/bold] {estimator.get_gap_to_c(args.score)} points\n"
            f"[bold]Estimated Cost:[/bold] £{estimate.minimum:,.0f} - "
            f"£{estimate.maximum:,.0f} (mid £{estimate.midpoint:,.0f})",
            title="EPC Compliant" if compliant else "EPC Below Band C",
            border_style="green" if compliant else "red",
        )
    )

    if recommendations:
        table = Table(
            title="Recommended Improvements (cheapest per point first)",
            box=box.ROUNDED,
        )
        table.add_column("Improvement", style="bold")
        table.add_column("Cost", justify="right")
        table.add_column("Points", justify="right")
        table.add_column("£/Point", justify="right")
        table.add_column("Effectiveness")
        table.add_column("Timeline")
        for r in recommendations:
            table.add_row(
                r.label,
                f"£{r.estimated_cost_mid:,.2f}",
                f"{r.estimated_points_mid:g}",
                f"£{r.cost_per_point:,.2f}",
                r.cost_effectiveness,
                r.typical_timeline,
            )
        console.print(table)

    if args.spent is not None:
        usage = estimator.cost_cap_usage(_decimal_arg(args.spent, "spent"))
        console.print(
            f"Cost cap: £{usage.spent:,.2f} of £{usage.cap:,.0f} "
            f"({usage.percentage_used}% used, £{usage.remaining:,.2f} remaining, "
            f"applies from {usage.applies_from})"
        )
        if usage.is_cap_reached:
            exemption = get_exemption("cost_cap")
            console.print(
                f"[yellow]{exemption.label} available for "
                f"{exemption.duration}: {exemption.description}[/yellow]"
            )

    rg = ReportGenerator(args.output_dir, generated_on=_now(args).date())
    report = rg.upgrade_plan_report(
        args.score, rating, recommendations, estimate, budget
    )
    _export(rg, report, args.export_json)


# -----------------------------------------------------------------------
# Subcommand: deadlines
# -----------------------------------------------------------------------


def cmd_deadlines(args: argparse.Namespace) -> None:
    """Show the compliance timeline."""
    now = _now(args)
    properties = _load_properties_csv(args.properties) if args.properties else []
    certificates = (
        _load_certificates_csv(args.certificates) if args.certificates else []
    )

    engine = DeadlineEngine()
    if args.upcoming:
        deadlines = engine.get_upcoming_deadlines(
            properties, certificates, now, limit=args.limit
        )
    else:
        deadlines = engine.get_all_deadlines(properties, certificates, now)

    table = Table(title=f"Compliance Deadlines as of {now.date()}", box=box.ROUNDED)
    table.add_column("Date")
    table.add_column("Pillar")
    table.add_column("Deadline", style="bold")
    table.add_column("Status")
    for d in deadlines:
        if d.is_overdue:
            status = "[red]Overdue[/red]"
        elif d.is_critical:
            status = "[yellow]Critical[/yellow]"
        else:
            status = ""
        table.add_row(d.due_date.isoformat(), d.regime.value, d.title, status)
    console.print(table)

    if certificates:
        cert_table = Table(title="Certificate Status", box=box.SIMPLE)
        cert_table.add_column("Certificate")
        cert_table.add_column("Property")
        cert_table.add_column("Expiry")
        cert_table.add_column("Status")
        for cert in certificates:
            cert_table.add_row(
                cert.category,
                cert.property_id,
                cert.expiry_date.isoformat() if cert.expiry_date else "-",
                get_certificate_status(cert, now).value,
            )
        console.print(cert_table)

    rg = ReportGenerator(args.output_dir, generated_on=now.date())
    _export(rg, rg.deadline_report(deadlines), args.export_json)


# -----------------------------------------------------------------------
# Subcommand: score
# -----------------------------------------------------------------------


def cmd_score(args: argparse.Namespace) -> None:
    """Score readiness across MTD, Renters' Rights and EPC."""
    now = _now(args)
    if args.file:
        items = _load_checklist_csv(args.file)
    else:
        items = default_checklist(_split_keys(args.completed))
    overview = ScoreCalculator().calculate_overall_compliance(items, now)

    table = Table(title="Compliance Readiness", box=box.ROUNDED)
    table.add_column("Pillar", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    table.add_column("Done", justify="right")
    table.add_column("Next Deadline")
    table.add_column("Days", justify="right")
    for p in overview.pillars:
        colour = _STATUS_COLOURS[p.status]
        table.add_row(
            p.regime.value,
            f"{p.score}%",
            f"[{colour}]{p.status.value}[/{colour}]",
            f"{p.completed_items}/{p.total_items}",
            p.next_deadline.isoformat() if p.next_deadline else "-",
            str(p.days_until_deadline) if p.days_until_deadline is not None else "-",
        )
    console.print(table)
    console.print(f"\n[bold]Overall score: {overview.overall_score}%[/bold]")

    rg = ReportGenerator(args.output_dir, generated_on=now.date())
    _export(rg, rg.compliance_overview_report(overview), args.export_json)


# -----------------------------------------------------------------------
# Subcommand: rent-increase
# -----------------------------------------------------------------------


def cmd_rent_increase(args: argparse.Namespace) -> None:
    """Check a proposed Section 13 rent increase."""
    result = RentIncreaseCalculator().calculate(
        _decimal_arg(args.current, "current rent"),
        _decimal_arg(args.proposed, "proposed rent"),
        market_rent=_decimal_arg(args.market, "market rent"),
        effective_date=_date_arg(args.effective_date, "effective date"),
    )
    if result is None:
        console.print("[red]Both rents must be greater than zero[/red]")
        sys.exit(1)

    lines = [
        f"[bold]Monthly Increase:[/bold] £{result.increase_amount:,.2f} "
        f"({result.percentage_increase}%)",
        f"[bold]Annual Increase:[/bold] £{result.annual_increase:,.2f}",
    ]
    if result.notice_serve_date:
        lines.append(
            f"[bold]Serve Section 13 notice by:[/bold] {result.notice_serve_date}"
        )
    if result.above_market_rate:
        lines.append("[yellow]Proposed rent is above market rate and may be "
                     "challenged at the First-tier Tribunal.[/yellow]")
    console.print(Panel("\n".join(lines), title="Rent Increase", border_style="cyan"))


# -----------------------------------------------------------------------
# Argument parser
# -----------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compliance-engine",
        description="Landlord Compliance Engine - MTD, Renters' Rights and EPC deadlines, scores and upgrade plans",
    )
    parser.add_argument("--as-of", help="Treat this ISO date as today")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # mtd
    mtd_p = subparsers.add_parser("mtd", help="Check MTD for Income Tax status")
    mtd_p.add_argument("--rental-income", required=True, help="Gross rental income")
    mtd_p.add_argument("--self-employment", help="Self-employment income")
    mtd_p.add_argument("--joint", action="store_true", help="Jointly owned")
    mtd_p.add_argument(
        "--limited-company",
        action="store_true",
        help="Properties held through a limited company",
    )
    mtd_p.add_argument("--export-json", help="Export report to JSON")
    mtd_p.add_argument("--output-dir", help="Output directory")
    mtd_p.set_defaults(func=cmd_mtd)

    # penalty
    pen_p = subparsers.add_parser("penalty", help="Calculate late payment penalty")
    pen_p.add_argument("--amount", required=True, help="Tax owed")
    pen_p.add_argument("--days-late", type=int, required=True, help="Days overdue")
    pen_p.add_argument("--points", type=int, help="Current penalty points")
    pen_p.set_defaults(func=cmd_penalty)

    # epc
    epc_p = subparsers.add_parser("epc", help="Plan EPC upgrades")
    epc_p.add_argument("--score", type=int, required=True, help="Current SAP score")
    epc_p.add_argument("--budget", help="Budget for improvements")
    epc_p.add_argument("--spent", help="Amount already spent toward the cost cap")
    epc_p.add_argument("--export-json", help="Export report to JSON")
    epc_p.add_argument("--output-dir", help="Output directory")
    epc_p.set_defaults(func=cmd_epc)

    # deadlines
    dl_p = subparsers.add_parser("deadlines", help="Show compliance deadlines")
    dl_p.add_argument("--properties", help="CSV file with properties")
    dl_p.add_argument("--certificates", help="CSV file with certificates")
    dl_p.add_argument(
        "--upcoming", "-u", action="store_true", help="Only future deadlines"
    )
    dl_p.add_argument("--limit", type=int, default=10, help="Upcoming limit")
    dl_p.add_argument("--export-json", help="Export report to JSON")
    dl_p.add_argument("--output-dir", help="Output directory")
    dl_p.set_defaults(func=cmd_deadlines)

    # score
    score_p = subparsers.add_parser("score", help="Score compliance readiness")
    score_p.add_argument(
        "--file", "-f", help="CSV file with checklist items (default: standard checklists)"
    )
    score_p.add_argument(
        "--completed",
        help="Comma-separated standard checklist keys already done",
    )
    score_p.add_argument("--export-json", help="Export report to JSON")
    score_p.add_argument("--output-dir", help="Output directory")
    score_p.set_defaults(func=cmd_score)

    # rent-increase
    rent_p = subparsers.add_parser(
        "rent-increase", help="Check a Section 13 rent increase"
    )
    rent_p.add_argument("--current", required=True, help="Current monthly rent")
    rent_p.add_argument("--proposed", required=True, help="Proposed monthly rent")
    rent_p.add_argument("--market", help="Market rent for comparison")
    rent_p.add_argument("--effective-date", help="ISO date the increase starts")
    rent_p.set_defaults(func=cmd_rent_increase)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    args.func(args)
