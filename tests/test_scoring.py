"""Tests for the ScoreCalculator."""

from datetime import date, datetime

import pytest

from compliance_engine.models import ChecklistItem, Priority, Regime
from compliance_engine.regulations import (
    MTD_READINESS_CHECKLIST,
    RENTERS_RIGHTS_CHECKLIST,
)
from compliance_engine.scoring import (
    ComplianceStatus,
    ScoreCalculator,
    default_checklist,
    status_for_score,
)

NOW = date(2026, 6, 1)


@pytest.fixture
def scorer() -> ScoreCalculator:
    return ScoreCalculator()


def _items(regime: Regime, completed: int, total: int) -> list[ChecklistItem]:
    return [
        ChecklistItem(f"{regime.value}-{i}", regime, is_completed=i < completed)
        for i in range(total)
    ]


# ── Status thresholds ───────────────────────────────────────────────


@pytest.mark.parametrize(
    "score,status",
    [
        (0, ComplianceStatus.NOT_READY),
        (39, ComplianceStatus.NOT_READY),
        (40, ComplianceStatus.PARTIAL),
        (79, ComplianceStatus.PARTIAL),
        (80, ComplianceStatus.READY),
        (100, ComplianceStatus.READY),
    ],
)
def test_status_for_score(score: int, status: ComplianceStatus):
    assert status_for_score(score) == status


# ── Pillar scores ───────────────────────────────────────────────────


def test_pillar_with_no_items_scores_zero(scorer: ScoreCalculator):
    pillar = scorer.calculate_pillar_score(Regime.MTD, [], NOW)
    assert pillar.score == 0
    assert pillar.status == ComplianceStatus.NOT_READY
    assert pillar.total_items == 0
    assert pillar.outstanding_actions == 0


def test_pillar_counts_only_its_own_items(scorer: ScoreCalculator):
    items = _items(Regime.MTD, 2, 5) + _items(Regime.EPC, 0, 3)
    pillar = scorer.calculate_pillar_score(Regime.MTD, items, NOW)
    assert pillar.total_items == 5
    assert pillar.completed_items == 2
    assert pillar.outstanding_actions == 3
    assert pillar.score == 40
    assert pillar.status == ComplianceStatus.PARTIAL


def test_pillar_score_rounds_half_up(scorer: ScoreCalculator):
    # 1 of 8 is 12.5%
    pillar = scorer.calculate_pillar_score(
        Regime.EPC, _items(Regime.EPC, 1, 8), NOW
    )
    assert pillar.score == 13


def test_pillar_ready_at_80(scorer: ScoreCalculator):
    pillar = scorer.calculate_pillar_score(
        Regime.RENTERS_RIGHTS, _items(Regime.RENTERS_RIGHTS, 4, 5), NOW
    )
    assert pillar.score == 80
    assert pillar.status == ComplianceStatus.READY


# ── Next deadline ───────────────────────────────────────────────────


def test_next_mtd_deadline(scorer: ScoreCalculator):
    pillar = scorer.calculate_pillar_score(Regime.MTD, [], NOW)
    assert pillar.next_deadline == date(2026, 8, 7)
    assert pillar.days_until_deadline == 67


def test_days_until_rounds_up_partial_days(scorer: ScoreCalculator):
    pillar = scorer.calculate_pillar_score(
        Regime.MTD, [], datetime(2026, 6, 1, 12, 0)
    )
    assert pillar.days_until_deadline == 67


def test_deadline_equal_to_now_is_skipped(scorer: ScoreCalculator):
    assert scorer.get_next_deadline(
        Regime.RENTERS_RIGHTS, date(2026, 5, 1)
    ) == date(2026, 5, 31)


def test_next_epc_deadline(scorer: ScoreCalculator):
    assert scorer.get_next_deadline(Regime.EPC, NOW) == date(2029, 10, 1)


def test_no_deadline_once_calendar_exhausted(scorer: ScoreCalculator):
    pillar = scorer.calculate_pillar_score(Regime.EPC, [], date(2030, 10, 1))
    assert pillar.next_deadline is None
    assert pillar.days_until_deadline is None


# ── Overall compliance ──────────────────────────────────────────────


def test_overall_uses_pillar_weights(scorer: ScoreCalculator):
    items = (
        _items(Regime.MTD, 1, 1)
        + _items(Regime.RENTERS_RIGHTS, 0, 1)
        + _items(Regime.EPC, 1, 2)
    )
    overview = scorer.calculate_overall_compliance(items, NOW)
    # 100 * 0.35 + 0 * 0.40 + 50 * 0.25 = 47.5
    assert overview.overall_score == 48
    assert overview.mtd.score == 100
    assert overview.renters_rights.score == 0
    assert overview.epc.score == 50


def test_empty_pillar_keeps_its_weight(scorer: ScoreCalculator):
    items = _items(Regime.MTD, 2, 2) + _items(Regime.RENTERS_RIGHTS, 3, 3)
    overview = scorer.calculate_overall_compliance(items, NOW)
    assert overview.overall_score == 75


def test_all_complete_scores_100(scorer: ScoreCalculator):
    items = (
        _items(Regime.MTD, 3, 3)
        + _items(Regime.RENTERS_RIGHTS, 4, 4)
        + _items(Regime.EPC, 2, 2)
    )
    overview = scorer.calculate_overall_compliance(items, NOW)
    assert overview.overall_score == 100
    assert [p.regime for p in overview.pillars] == [
        Regime.MTD,
        Regime.RENTERS_RIGHTS,
        Regime.EPC,
    ]


def test_no_items_scores_zero(scorer: ScoreCalculator):
    overview = scorer.calculate_overall_compliance([], NOW)
    assert overview.overall_score == 0
    assert all(p.status == ComplianceStatus.NOT_READY for p in overview.pillars)


# ── Standard checklists ─────────────────────────────────────────────


def test_default_checklist_covers_every_pillar():
    items = default_checklist()
    counts = {
        regime: sum(1 for item in items if item.regime == regime)
        for regime in (Regime.MTD, Regime.RENTERS_RIGHTS, Regime.EPC)
    }
    assert counts == {Regime.MTD: 10, Regime.RENTERS_RIGHTS: 10, Regime.EPC: 6}
    assert not any(item.is_completed for item in items)


def test_default_checklist_items_use_template_keys():
    items = {item.item_id: item for item in default_checklist()}
    signup = items["mtd_signup"]
    assert signup.regime == Regime.MTD
    assert signup.priority == Priority.CRITICAL
    assert signup.title == "Signed up for MTD for Income Tax on HMRC"
    assert items["reassessment_booked"].priority == Priority.LOW


def test_default_checklist_marks_completed_keys(scorer: ScoreCalculator):
    items = default_checklist(
        completed=["epc_checked", "gap_analysis", "improvement_plan"]
    )
    overview = scorer.calculate_overall_compliance(items, NOW)
    assert overview.epc.completed_items == 3
    assert overview.epc.score == 50
    assert overview.mtd.score == 0
    # 50 * 0.25 = 12.5
    assert overview.overall_score == 13


def test_default_checklist_for_one_regime():
    items = default_checklist(regimes=[Regime.RENTERS_RIGHTS])
    assert {item.regime for item in items} == {Regime.RENTERS_RIGHTS}


def test_renters_rights_templates_carry_due_dates():
    info_sheet = next(
        t for t in RENTERS_RIGHTS_CHECKLIST if t.key == "information_sheet"
    )
    assert info_sheet.due_date == date(2026, 5, 31)
    assert info_sheet.per_property
    assert all(t.due_date is None for t in MTD_READINESS_CHECKLIST)
