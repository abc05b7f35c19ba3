"""
Readiness scoring for the three compliance pillars.

Each pillar score is the percentage of its checklist items completed.
The overall score is a fixed-weight average of the three.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence

from compliance_engine.models import (
    PILLARS,
    ChecklistItem,
    Moment,
    Regime,
    as_instant,
    days_until,
    round_half_up,
)
from compliance_engine.regulations import (
    PARTIAL_SCORE,
    PILLAR_WEIGHTS,
    READINESS_CHECKLISTS,
    READINESS_DEADLINES,
    READY_SCORE,
)

logger = logging.getLogger(__name__)


class ComplianceStatus(Enum):
    READY = "ready"
    PARTIAL = "partial"
    NOT_READY = "not_ready"


@dataclass
class PillarScore:
    regime: Regime
    score: int  # 0-100
    status: ComplianceStatus
    total_items: int
    completed_items: int
    outstanding_actions: int
    next_deadline: Optional[date]
    days_until_deadline: Optional[int]


@dataclass
class ComplianceOverview:
    overall_score: int
    mtd: PillarScore
    renters_rights: PillarScore
    epc: PillarScore

    @property
    def pillars(self) -> list[PillarScore]:
        return [self.mtd, self.renters_rights, self.epc]


def status_for_score(score: int) -> ComplianceStatus:
    if score >= READY_SCORE:
        return ComplianceStatus.READY
    if score >= PARTIAL_SCORE:
        return ComplianceStatus.PARTIAL
    return ComplianceStatus.NOT_READY


def default_checklist(
    completed: Iterable[str] = (),
    regimes: Sequence[Regime] = PILLARS,
) -> list[ChecklistItem]:
    """
    Build the standard readiness items for each regime.

    Items are keyed by their template key; keys listed in ``completed``
    start out done.
    """
    done = set(completed)
    return [
        ChecklistItem(
            item_id=template.key,
            regime=regime,
            is_completed=template.key in done,
            priority=template.priority,
            title=template.title,
        )
        for regime in regimes
        for template in READINESS_CHECKLISTS[regime]
    ]


class ScoreCalculator:
    """
    Turns checklist completion into readiness scores.

    The next deadline shown per pillar comes from a short fixed list for
    that pillar, not from the full deadline timeline.
    """

    def __init__(
        self,
        readiness_deadlines: Mapping[Regime, Sequence[date]] = READINESS_DEADLINES,
        weights: Mapping[Regime, Decimal] = PILLAR_WEIGHTS,
    ) -> None:
        self.readiness_deadlines = readiness_deadlines
        self.weights = weights

    def get_next_deadline(self, regime: Regime, now: Moment) -> Optional[date]:
        """Earliest readiness date strictly after ``now``, if any remain."""
        now_instant = as_instant(now)
        future = [
            d
            for d in self.readiness_deadlines.get(regime, ())
            if as_instant(d, now_instant) > now_instant
        ]
        return min(future) if future else None

    def calculate_pillar_score(
        self,
        regime: Regime,
        items: Sequence[ChecklistItem],
        now: Moment,
    ) -> PillarScore:
        pillar_items = [item for item in items if item.regime == regime]
        total = len(pillar_items)
        completed = sum(1 for item in pillar_items if item.is_completed)
        score = (
            int(round_half_up(Decimal(completed * 100) / total)) if total else 0
        )
        next_deadline = self.get_next_deadline(regime, now)

        return PillarScore(
            regime=regime,
            score=score,
            status=status_for_score(score),
            total_items=total,
            completed_items=completed,
            outstanding_actions=total - completed,
            next_deadline=next_deadline,
            days_until_deadline=(
                days_until(next_deadline, now) if next_deadline else None
            ),
        )

    def calculate_overall_compliance(
        self, items: Sequence[ChecklistItem], now: Moment
    ) -> ComplianceOverview:
        """
        Score every pillar and combine them with fixed weights.

        A pillar with no checklist items scores zero and still carries its
        full weight.
        """
        scores = {
            regime: self.calculate_pillar_score(regime, items, now)
            for regime in PILLARS
        }
        mtd = scores[Regime.MTD]
        renters_rights = scores[Regime.RENTERS_RIGHTS]
        epc = scores[Regime.EPC]

        weighted = sum(
            (Decimal(p.score) * self.weights[p.regime] for p in scores.values()),
            Decimal("0"),
        )
        overall = int(round_half_up(weighted))
        logger.debug(
            "Overall compliance %d (mtd=%d, renters_rights=%d, epc=%d)",
            overall,
            mtd.score,
            renters_rights.score,
            epc.score,
        )

        return ComplianceOverview(
            overall_score=overall,
            mtd=mtd,
            renters_rights=renters_rights,
            epc=epc,
        )
