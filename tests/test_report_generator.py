"""Tests for the ReportGenerator."""

import json
from datetime import date
from decimal import Decimal

import pytest

from compliance_engine.deadlines import DeadlineEngine
from compliance_engine.epc import EpcEstimator
from compliance_engine.models import Certificate, ChecklistItem, Property, Regime
from compliance_engine.mtd import MtdCalculator, MtdCalculatorInput
from compliance_engine.report_generator import ReportGenerator
from compliance_engine.scoring import ScoreCalculator

NOW = date(2026, 6, 1)


@pytest.fixture
def rg(tmp_path) -> ReportGenerator:
    return ReportGenerator(output_dir=str(tmp_path), generated_on=NOW)


@pytest.fixture
def deadline_report(rg: ReportGenerator) -> dict:
    deadlines = DeadlineEngine().get_all_deadlines(
        [Property("p1", "12 Acacia Avenue")],
        [Certificate("c1", "p1", "gas_safety", expiry_date=date(2026, 9, 1))],
        NOW,
    )
    return rg.deadline_report(deadlines)


# ── Report builders ─────────────────────────────────────────────────


def test_deadline_report_summary(deadline_report: dict):
    assert deadline_report["report_type"] == "deadline_timeline"
    assert deadline_report["generated_date"] == "2026-06-01"
    summary = deadline_report["summary"]
    assert summary["total_deadlines"] == 10
    # rra-phase1 and rra-info-sheet are past
    assert summary["overdue"] == 2
    # only epc-final is critical and still ahead
    assert summary["critical_upcoming"] == 1
    assert deadline_report["deadlines"][0]["id"] == "rra-phase1"


def test_mtd_report_with_penalty(rg: ReportGenerator):
    calc = MtdCalculator()
    result = calc.calculate_mtd_status(MtdCalculatorInput(Decimal("60000")))
    penalty = calc.calculate_late_penalty(Decimal("1000"), 30)
    report = rg.mtd_report(result, penalty)
    assert report["summary"]["phase"] == "april_2026"
    assert report["summary"]["late_penalty"] == Decimal("60.00")
    assert report["summary"]["final_declaration"] == date(2028, 1, 31)
    assert len(report["penalty_breakdown"]) == 2


def test_mtd_report_not_required(rg: ReportGenerator):
    result = MtdCalculator().calculate_mtd_status(MtdCalculatorInput(10000))
    report = rg.mtd_report(result)
    assert report["summary"]["deadline"] == "n/a"
    assert not report["summary"]["affected"]
    assert "final_declaration" not in report["summary"]
    assert "penalty_breakdown" not in report


def test_upgrade_plan_report(rg: ReportGenerator):
    estimator = EpcEstimator()
    recs = estimator.get_recommended_improvements(60, budget=600)
    report = rg.upgrade_plan_report(
        60,
        estimator.get_rating_for_score(60),
        recs,
        estimator.estimate_total_upgrade_cost(60),
        Decimal("600"),
    )
    assert report["summary"]["current_rating"] == "D"
    assert report["summary"]["current_band"] == "D (55-68)"
    assert report["summary"]["selected_cost"] == Decimal("585")
    assert report["summary"]["budget"] == Decimal("600")
    assert [i["type"] for i in report["improvements"]] == [
        "hot_water_insulation",
        "cavity_wall",
        "led_lighting",
    ]
    assert report["improvements"][0]["cost_per_point"] == Decimal("23.33")
    assert report["improvements"][0]["timeline"] == "1 hour"


def test_compliance_overview_report(rg: ReportGenerator):
    items = [
        ChecklistItem("1", Regime.MTD, is_completed=True),
        ChecklistItem("2", Regime.MTD),
        ChecklistItem("3", Regime.EPC),
    ]
    overview = ScoreCalculator().calculate_overall_compliance(items, NOW)
    report = rg.compliance_overview_report(overview)
    assert report["summary"]["overall_score"] == overview.overall_score
    assert report["summary"]["outstanding_actions"] == 2
    assert [p["pillar"] for p in report["pillars"]] == [
        "mtd", "renters_rights", "epc",
    ]
    assert report["pillars"][0]["next_deadline"] == "2026-08-07"


# ── Export ──────────────────────────────────────────────────────────


def test_to_json_writes_file(rg: ReportGenerator, deadline_report: dict, tmp_path):
    json_str = rg.to_json(deadline_report, "deadlines.json")
    data = json.loads(json_str)
    assert data["summary"]["total_deadlines"] == 10
    written = json.loads((tmp_path / "deadlines.json").read_text(encoding="utf-8"))
    assert written == data


def test_to_json_converts_decimals(rg: ReportGenerator):
    result = MtdCalculator().calculate_mtd_status(MtdCalculatorInput("60000"))
    data = json.loads(rg.to_json(rg.mtd_report(result)))
    assert data["summary"]["qualifying_income"] == 60000.0
    assert data["summary"]["final_declaration"] == "2028-01-31"


def test_to_csv(rg: ReportGenerator, deadline_report: dict, tmp_path):
    csv_str = rg.to_csv(deadline_report, "deadlines.csv")
    header = csv_str.splitlines()[0]
    assert header.startswith("id,title,due_date")
    assert "cert-c1" in csv_str
    assert (tmp_path / "deadlines.csv").exists()


def test_to_csv_missing_section_is_empty(rg: ReportGenerator, deadline_report: dict):
    assert rg.to_csv(deadline_report, section="improvements") == ""


# ── Text formatting ─────────────────────────────────────────────────


def test_format_text(rg: ReportGenerator, deadline_report: dict):
    text = rg.format_text(deadline_report)
    assert "Deadline Timeline" in text
    assert "DEADLINES" in text
    assert "OVERDUE" in text
    assert "gas safety renewal — 12 Acacia Avenue" in text
