"""
Compliance report generator.

Produces:
- MTD status summaries with optional penalty breakdown
- EPC upgrade plans
- Deadline timelines
- Readiness overviews across all three pillars
- CSV and JSON export
"""

from __future__ import annotations

import csv
import io
import json
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from compliance_engine.epc import ImprovementRecommendation, UpgradeCostEstimate
from compliance_engine.models import Deadline
from compliance_engine.mtd import LatePenalty, MtdCalculatorResult
from compliance_engine.regulations import (
    EPC_BANDS_BY_RATING,
    MTD_FINAL_DECLARATION_DEADLINE,
    EpcRating,
)
from compliance_engine.scoring import ComplianceOverview, PillarScore


def _to_plain(obj: Any) -> Any:
    """Recursively convert Decimal, date and Enum values for serialization."""
    if isinstance(obj, dict):
        return {k: _to_plain(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_plain(i) for i in obj]
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    return obj


def _pillar_dict(p: PillarScore) -> dict[str, Any]:
    return {
        "pillar": p.regime.value,
        "score": p.score,
        "status": p.status.value,
        "total_items": p.total_items,
        "completed_items": p.completed_items,
        "outstanding_actions": p.outstanding_actions,
        "next_deadline": p.next_deadline.isoformat() if p.next_deadline else None,
        "days_until_deadline": p.days_until_deadline,
    }


class ReportGenerator:
    """
    Turns calculator results into structured reports.

    All reports are plain dicts that can be rendered to console text or
    exported to CSV/JSON files under ``output_dir``.
    """

    def __init__(
        self,
        output_dir: Optional[str] = None,
        generated_on: Optional[date] = None,
    ) -> None:
        self.output_dir = Path(output_dir) if output_dir else Path("reports")
        self.generated_on = generated_on or date.today()

    def _header(self, report_type: str) -> dict[str, Any]:
        return {
            "report_type": report_type,
            "generated_date": self.generated_on.isoformat(),
        }

    # ------------------------------------------------------------------
    # MTD status
    # ------------------------------------------------------------------

    def mtd_report(
        self,
        result: MtdCalculatorResult,
        penalty: Optional[LatePenalty] = None,
    ) -> dict[str, Any]:
        report = self._header("mtd_status")
        report["summary"] = {
            "qualifying_income": result.qualifying_income,
            "phase": result.phase.value,
            "deadline": result.deadline or "n/a",
            "affected": result.is_affected,
        }
        if result.is_affected:
            report["summary"]["final_declaration"] = MTD_FINAL_DECLARATION_DEADLINE
        report["message"] = result.message
        if penalty is not None:
            report["summary"]["late_penalty"] = penalty.penalty
            report["penalty_breakdown"] = list(penalty.breakdown)
        return report

    # ------------------------------------------------------------------
    # EPC upgrade plan
    # ------------------------------------------------------------------

    def upgrade_plan_report(
        self,
        current_score: float,
        rating: EpcRating,
        recommendations: list[ImprovementRecommendation],
        estimate: UpgradeCostEstimate,
        budget: Optional[Decimal] = None,
    ) -> dict[str, Any]:
        """Summarise the ranked improvements for one property."""
        total_cost = sum(
            (r.estimated_cost_mid for r in recommendations), Decimal("0")
        )
        total_points = sum(
            (r.estimated_points_mid for r in recommendations), Decimal("0")
        )
        report = self._header("epc_upgrade_plan")
        report["summary"] = {
            "current_score": current_score,
            "current_rating": rating.value,
            "current_band": EPC_BANDS_BY_RATING[rating].label,
            "estimated_cost_low": estimate.minimum,
            "estimated_cost_mid": estimate.midpoint,
            "estimated_cost_high": estimate.maximum,
            "selected_cost": total_cost,
            "selected_points": float(total_points),
        }
        if budget is not None:
            report["summary"]["budget"] = budget
        report["improvements"] = [
            {
                "type": r.improvement_type,
                "label": r.label,
                "cost_mid": r.estimated_cost_mid,
                "points_mid": float(r.estimated_points_mid),
                "cost_per_point": r.cost_per_point.quantize(Decimal("0.01")),
                "effectiveness": r.cost_effectiveness,
                "timeline": r.typical_timeline,
            }
            for r in recommendations
        ]
        return report

    # ------------------------------------------------------------------
    # Deadline timeline
    # ------------------------------------------------------------------

    def deadline_report(self, deadlines: list[Deadline]) -> dict[str, Any]:
        overdue = [d for d in deadlines if d.is_overdue]
        critical = [d for d in deadlines if d.is_critical and not d.is_overdue]

        def _deadline_dict(d: Deadline) -> dict[str, Any]:
            return {
                "id": d.deadline_id,
                "title": d.title,
                "due_date": d.due_date.isoformat(),
                "pillar": d.regime.value,
                "critical": d.is_critical,
                "overdue": d.is_overdue,
                "description": d.description,
            }

        report = self._header("deadline_timeline")
        report["summary"] = {
            "total_deadlines": len(deadlines),
            "overdue": len(overdue),
            "critical_upcoming": len(critical),
        }
        report["deadlines"] = [_deadline_dict(d) for d in deadlines]
        return report

    # ------------------------------------------------------------------
    # Readiness overview
    # ------------------------------------------------------------------

    def compliance_overview_report(
        self, overview: ComplianceOverview
    ) -> dict[str, Any]:
        report = self._header("compliance_overview")
        report["summary"] = {
            "overall_score": overview.overall_score,
            "outstanding_actions": sum(
                p.outstanding_actions for p in overview.pillars
            ),
        }
        report["pillars"] = [_pillar_dict(p) for p in overview.pillars]
        return report

    # ------------------------------------------------------------------
    # Export methods
    # ------------------------------------------------------------------

    def to_json(
        self,
        report: dict[str, Any],
        filename: Optional[str] = None,
    ) -> str:
        """Export a report to JSON. Returns the JSON string."""
        json_str = json.dumps(_to_plain(report), indent=2)

        if filename:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path = self.output_dir / filename
            path.write_text(json_str, encoding="utf-8")

        return json_str

    def to_csv(
        self,
        report: dict[str, Any],
        filename: Optional[str] = None,
        section: str = "deadlines",
    ) -> str:
        """
        Export one list section of a report to CSV. Returns the CSV string.
        """
        rows = report.get(section, [])
        if not rows:
            return ""

        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        for row in rows:
            writer.writerow(_to_plain(row))

        csv_str = output.getvalue()

        if filename:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path = self.output_dir / filename
            path.write_text(csv_str, encoding="utf-8")

        return csv_str

    # ------------------------------------------------------------------
    # Console-formatted text output
    # ------------------------------------------------------------------

    def format_text(self, report: dict[str, Any]) -> str:
        """Format a report as human-readable text for console output."""
        lines: list[str] = []
        report_type = report.get("report_type", "report").replace("_", " ").title()
        lines.append(f"{'=' * 60}")
        lines.append(f"  {report_type}")
        lines.append(f"  Generated: {report.get('generated_date', '')}")
        lines.append(f"{'=' * 60}")
        lines.append("")

        summary = report.get("summary", {})
        if summary:
            lines.append("SUMMARY")
            lines.append("-" * 40)
            for key, value in summary.items():
                label = key.replace("_", " ").title()
                if isinstance(value, Decimal):
                    lines.append(f"  {label}: £{value:,.2f}")
                else:
                    lines.append(f"  {label}: {value}")
            lines.append("")

        if report.get("message"):
            lines.append(f"  {report['message']}")
            lines.append("")

        breakdown = report.get("penalty_breakdown", [])
        if breakdown:
            lines.append("PENALTY BREAKDOWN")
            lines.append("-" * 40)
            for part in breakdown:
                lines.append(f"  * {part}")
            lines.append("")

        pillars = report.get("pillars", [])
        if pillars:
            lines.append("PILLARS")
            lines.append("-" * 40)
            for p in pillars:
                lines.append(
                    f"  {p['pillar']}: {p['score']:>3}% ({p['status']}) | "
                    f"{p['completed_items']}/{p['total_items']} done | "
                    f"next: {p['next_deadline'] or '-'}"
                )
            lines.append("")

        improvements = report.get("improvements", [])
        if improvements:
            lines.append("IMPROVEMENTS")
            lines.append("-" * 40)
            for imp in improvements:
                lines.append(
                    f"  {imp['label']}: £{imp['cost_mid']:,.2f} for "
                    f"~{imp['points_mid']:g} pts "
                    f"(£{imp['cost_per_point']:,.2f}/pt)"
                )
            lines.append("")

        deadlines = report.get("deadlines", [])
        if deadlines:
            lines.append("DEADLINES")
            lines.append("-" * 40)
            for d in deadlines:
                flag = "OVERDUE" if d["overdue"] else (
                    "CRITICAL" if d["critical"] else ""
                )
                lines.append(f"  {d['due_date']} {d['title']} {flag}".rstrip())
            lines.append("")

        return "\n".join(lines)
