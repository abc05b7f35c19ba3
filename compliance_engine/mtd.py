"""
Making Tax Digital for Income Tax calculator.

Handles:
- Qualifying income and MTD phase classification
- Late payment penalties (day 15, day 30, daily accrual)
- Late submission penalty points
- Quarterly period lookup for the 2026/27 tax year
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Union

from compliance_engine.models import round_half_up, to_decimal
from compliance_engine.regulations import (
    DAYS_PER_YEAR,
    LATE_PENALTY_ANNUAL_RATE,
    LATE_PENALTY_FIRST_DAY,
    LATE_PENALTY_FIRST_RATE,
    LATE_PENALTY_SECOND_DAY,
    LATE_PENALTY_SECOND_RATE,
    MTD_LIMITED_COMPANY_MESSAGE,
    MTD_NOT_REQUIRED_MESSAGE,
    MTD_QUARTERLY_DEADLINES_2026_27,
    MTD_THRESHOLDS,
    PENALTY_POINTS_FINE,
    PENALTY_POINTS_MAX,
    PENALTY_POINTS_WARNING_AT,
    MtdPhase,
    MtdQuarter,
    MtdThreshold,
)

logger = logging.getLogger(__name__)

Number = Union[int, float, str, Decimal]


@dataclass(frozen=True)
class MtdCalculatorInput:
    """Income figures used to decide whether MTD applies."""

    gross_rental_income: Number
    self_employment_income: Number = Decimal("0")
    is_joint_ownership: bool = False
    has_limited_company_properties: bool = False


@dataclass
class MtdCalculatorResult:
    qualifying_income: Decimal
    phase: MtdPhase
    deadline: str
    message: str
    is_affected: bool


@dataclass
class LatePenalty:
    """Total late payment penalty and the components that make it up."""

    penalty: Decimal
    breakdown: list[str] = field(default_factory=list)


@dataclass
class PenaltyPointsStatus:
    points: int
    max_points: int
    is_warning: bool
    is_at_max: bool
    fine: Decimal


def _money(amount: Decimal) -> str:
    return f"£{round_half_up(amount, '0.01')}"


class MtdCalculator:
    """
    Classifies a landlord against the phased MTD rollout and prices
    late payments.
    """

    def __init__(
        self,
        thresholds: Sequence[MtdThreshold] = MTD_THRESHOLDS,
        quarters: Sequence[MtdQuarter] = MTD_QUARTERLY_DEADLINES_2026_27,
    ) -> None:
        self.thresholds = tuple(thresholds)
        self.quarters = tuple(quarters)

    def calculate_mtd_status(
        self, calc_input: MtdCalculatorInput
    ) -> MtdCalculatorResult:
        """
        Determine which MTD phase, if any, applies.

        Jointly owned rental income counts at half. Every threshold is
        compared with a strict greater-than, so income of exactly £50,000
        falls into the £30,000 phase. Income that is not a number never
        qualifies.
        """
        # NOTE: confirm against HMRC wording if the thresholds are revised;
        # some guidance uses "£50,000 or more".
        rental = to_decimal(calc_input.gross_rental_income)
        self_employment = to_decimal(calc_input.self_employment_income)

        # Properties held only through a limited company are outside MTD ITSA
        if calc_input.has_limited_company_properties and rental == 0:
            logger.debug("MTD not required: limited company income only")
            return MtdCalculatorResult(
                qualifying_income=Decimal("0"),
                phase=MtdPhase.NOT_REQUIRED,
                deadline="",
                message=MTD_LIMITED_COMPANY_MESSAGE,
                is_affected=False,
            )

        adjusted_rental = rental / 2 if calc_input.is_joint_ownership else rental
        qualifying = adjusted_rental + self_employment

        tiers = () if qualifying.is_nan() else self.thresholds
        for tier in tiers:
            if qualifying > tier.threshold:
                logger.debug(
                    "Qualifying income %s falls in phase %s",
                    qualifying,
                    tier.phase.value,
                )
                return MtdCalculatorResult(
                    qualifying_income=qualifying,
                    phase=tier.phase,
                    deadline=tier.deadline_label,
                    message=tier.message,
                    is_affected=True,
                )

        return MtdCalculatorResult(
            qualifying_income=qualifying,
            phase=MtdPhase.NOT_REQUIRED,
            deadline="",
            message=MTD_NOT_REQUIRED_MESSAGE,
            is_affected=False,
        )

    def calculate_late_penalty(
        self, amount_owed: Number, days_late: int
    ) -> LatePenalty:
        """
        Compute the late payment penalty on unpaid tax.

        3% of the amount is charged at day 15 and a further 3% at day 30.
        From day 31 interest-style penalty accrues daily at 10% a year.
        Components are summed at full precision and only the total is
        rounded to the penny.
        """
        amount = to_decimal(amount_owed)
        penalty = Decimal("0")
        breakdown: list[str] = []

        if days_late >= LATE_PENALTY_FIRST_DAY:
            first = amount * LATE_PENALTY_FIRST_RATE
            penalty += first
            breakdown.append(
                f"3% at day {LATE_PENALTY_FIRST_DAY}: {_money(first)}"
            )

        if days_late >= LATE_PENALTY_SECOND_DAY:
            second = amount * LATE_PENALTY_SECOND_RATE
            penalty += second
            breakdown.append(
                f"Additional 3% at day {LATE_PENALTY_SECOND_DAY}: "
                f"{_money(second)}"
            )

        if days_late > LATE_PENALTY_SECOND_DAY:
            extra_days = days_late - LATE_PENALTY_SECOND_DAY
            accrued = (
                amount * LATE_PENALTY_ANNUAL_RATE * extra_days / DAYS_PER_YEAR
            )
            penalty += accrued
            breakdown.append(
                f"10% pa for {extra_days} days after day "
                f"{LATE_PENALTY_SECOND_DAY}: {_money(accrued)}"
            )

        return LatePenalty(
            penalty=round_half_up(penalty, "0.01"),
            breakdown=breakdown,
        )

    def penalty_points_status(self, points: int) -> PenaltyPointsStatus:
        """Summarise late submission points against the fine threshold."""
        at_max = points >= PENALTY_POINTS_MAX
        return PenaltyPointsStatus(
            points=points,
            max_points=PENALTY_POINTS_MAX,
            is_warning=points >= PENALTY_POINTS_WARNING_AT,
            is_at_max=at_max,
            fine=PENALTY_POINTS_FINE if at_max else Decimal("0"),
        )

    def get_quarter_for_date(self, day: date) -> Optional[MtdQuarter]:
        """Return the quarterly update period containing ``day``."""
        for quarter in self.quarters:
            if quarter.period_start <= day <= quarter.period_end:
                return quarter
        return None
