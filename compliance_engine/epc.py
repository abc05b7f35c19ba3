"""
EPC rating estimator and upgrade planner.

Maps SAP scores to letter bands, measures the gap to band C, ranks
retrofit measures by cost per point and tracks spend against the
Minimum Energy Efficiency Standards cost cap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Union

from compliance_engine.models import round_half_up, to_decimal
from compliance_engine.regulations import (
    EPC_AVERAGE_COST_PER_POINT,
    EPC_COMPLIANT_RATINGS,
    EPC_ESTIMATE_HIGH_FACTOR,
    EPC_ESTIMATE_LOW_FACTOR,
    EPC_IMPROVEMENTS,
    EPC_MINIMUM_COMPLIANT_SCORE,
    EPC_RATING_BANDS,
    EPC_SPENDING_CAP,
    EPC_SPENDING_CAP_START,
    EpcImprovement,
    EpcRating,
    RatingBand,
)

logger = logging.getLogger(__name__)

Number = Union[int, float, str, Decimal]


@dataclass
class ImprovementRecommendation:
    """A catalog measure priced at the midpoint of its ranges."""

    improvement_type: str
    label: str
    description: str
    estimated_cost_mid: Decimal
    estimated_points_mid: Decimal
    cost_per_point: Decimal
    cost_effectiveness: str
    typical_timeline: str


@dataclass
class UpgradeCostEstimate:
    minimum: Decimal
    maximum: Decimal
    midpoint: Decimal


@dataclass
class CostCapUsage:
    """Spend on qualifying improvements measured against the cap."""

    cap: Decimal
    spent: Decimal
    remaining: Decimal
    percentage_used: int
    applies_from: date
    is_cap_reached: bool


def _recommend(improvement: EpcImprovement) -> ImprovementRecommendation:
    cost_mid = (improvement.cost_min + improvement.cost_max) / 2
    points_mid = Decimal(improvement.points_min + improvement.points_max) / 2
    return ImprovementRecommendation(
        improvement_type=improvement.improvement_type,
        label=improvement.label,
        description=improvement.description,
        estimated_cost_mid=cost_mid,
        estimated_points_mid=points_mid,
        cost_per_point=cost_mid / points_mid,
        cost_effectiveness=improvement.cost_effectiveness.value,
        typical_timeline=improvement.typical_timeline,
    )


class EpcEstimator:
    """
    EPC band lookup and cost-effectiveness ranking of improvements.

    Compliance means a rating of C or better.
    """

    def __init__(
        self,
        bands: Sequence[RatingBand] = EPC_RATING_BANDS,
        improvements: Sequence[EpcImprovement] = EPC_IMPROVEMENTS,
    ) -> None:
        self.bands = tuple(bands)
        self.improvements = tuple(improvements)

    def get_rating_for_score(self, score: float) -> EpcRating:
        """
        Return the letter band for a SAP score.

        Bands are checked best first on their lower bound, so scores above
        100 rate A and anything below the lowest band rates G.
        """
        for band in self.bands:
            if score >= band.min_score:
                return band.rating
        return self.bands[-1].rating

    def get_score_for_rating(self, rating: EpcRating) -> int:
        """Midpoint score of a band, rounded half up."""
        band = next(b for b in self.bands if b.rating == rating)
        return int(round_half_up(Decimal(band.min_score + band.max_score) / 2))

    def is_compliant(self, rating: EpcRating) -> bool:
        return rating in EPC_COMPLIANT_RATINGS

    def get_gap_to_c(self, score: float) -> float:
        """SAP points still needed to reach band C (never negative)."""
        return max(0, EPC_MINIMUM_COMPLIANT_SCORE - score)

    def get_recommended_improvements(
        self,
        current_score: float,
        budget: Optional[Number] = None,
    ) -> list[ImprovementRecommendation]:
        """
        Rank catalog improvements by cost per SAP point, cheapest first.

        With a budget, walk the ranked list once and keep each measure whose
        midpoint cost still fits. A skipped measure is never revisited, so
        this is a greedy pick in ranking order rather than the cheapest
        combination. The ranking does not promise the gap will be closed.
        A budget that is not a number affords nothing.
        """
        if self.get_gap_to_c(current_score) <= 0:
            return []

        ranked = sorted(
            (_recommend(imp) for imp in self.improvements),
            key=lambda r: r.cost_per_point,
        )

        if budget is None:
            return ranked

        remaining = to_decimal(budget)
        selected: list[ImprovementRecommendation] = []
        if remaining.is_nan():
            return selected
        for rec in ranked:
            if rec.estimated_cost_mid <= remaining:
                remaining -= rec.estimated_cost_mid
                selected.append(rec)

        logger.debug(
            "Selected %d of %d improvements within budget %s",
            len(selected),
            len(ranked),
            budget,
        )
        return selected

    def estimate_total_upgrade_cost(
        self, current_score: float
    ) -> UpgradeCostEstimate:
        """
        Rough whole-property cost to reach band C.

        The range runs from 0.5x to 1.8x of the midpoint.
        """
        gap = self.get_gap_to_c(current_score)
        if gap <= 0:
            zero = Decimal("0")
            return UpgradeCostEstimate(minimum=zero, maximum=zero, midpoint=zero)

        midpoint = to_decimal(gap) * EPC_AVERAGE_COST_PER_POINT
        return UpgradeCostEstimate(
            minimum=round_half_up(midpoint * EPC_ESTIMATE_LOW_FACTOR),
            maximum=round_half_up(midpoint * EPC_ESTIMATE_HIGH_FACTOR),
            midpoint=round_half_up(midpoint),
        )

    def cost_cap_usage(self, spent: Number) -> CostCapUsage:
        """
        Report how much of the per-property spending cap is used.

        Once the cap is reached the landlord can register the cost cap
        exemption. Spend that is not a number, or is negative infinity, counts
        as nothing spent.
        """
        spent_amount = to_decimal(spent)
        if spent_amount.is_nan() or (
            spent_amount.is_infinite() and spent_amount.is_signed()
        ):
            spent_amount = Decimal("0")
        cap = EPC_SPENDING_CAP
        reached = spent_amount >= cap
        percentage = 100 if reached else int(round_half_up(spent_amount / cap * 100))
        return CostCapUsage(
            cap=cap,
            spent=spent_amount,
            remaining=max(cap - spent_amount, Decimal("0")),
            percentage_used=percentage,
            applies_from=EPC_SPENDING_CAP_START,
            is_cap_reached=reached,
        )
