"""
Section 13 rent increase calculator for the Renters' Rights regime.

Rent may rise once a year and the landlord must give two months' notice.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from compliance_engine.models import Tenancy, round_half_up, to_decimal
from compliance_engine.regulations import RENT_INCREASE_NOTICE_MONTHS

Number = Union[int, float, str, Decimal]


@dataclass
class RentIncreaseResult:
    increase_amount: Decimal
    percentage_increase: Decimal
    annual_increase: Decimal
    above_market_rate: bool
    notice_serve_date: Optional[date] = None
    effective_date: Optional[date] = None


def months_before(day: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to month end."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class RentIncreaseCalculator:
    """Works out the size of a proposed monthly rent increase and its notice date."""

    def __init__(self, notice_months: int = RENT_INCREASE_NOTICE_MONTHS) -> None:
        self.notice_months = notice_months

    def calculate(
        self,
        current_rent: Number,
        proposed_rent: Number,
        market_rent: Optional[Number] = None,
        effective_date: Optional[date] = None,
    ) -> Optional[RentIncreaseResult]:
        """
        Compare a proposed monthly rent with the current one.

        Returns None unless both rents are positive finite numbers. A market
        rent that is not a number is ignored. The notice date is the last day
        a Section 13 notice can be served for the increase to take effect on
        ``effective_date``.
        """
        current = to_decimal(current_rent)
        proposed = to_decimal(proposed_rent)
        if not (current.is_finite() and proposed.is_finite()):
            return None
        if current <= 0 or proposed <= 0:
            return None

        increase = proposed - current
        market = to_decimal(market_rent) if market_rent is not None else None
        if market is not None and market.is_nan():
            market = None

        return RentIncreaseResult(
            increase_amount=increase,
            percentage_increase=round_half_up(increase / current * 100, "0.01"),
            annual_increase=increase * 12,
            above_market_rate=market is not None and market > 0 and proposed > market,
            notice_serve_date=(
                months_before(effective_date, self.notice_months)
                if effective_date
                else None
            ),
            effective_date=effective_date,
        )

    def calculate_for_tenancy(
        self,
        tenancy: Tenancy,
        proposed_rent: Number,
        market_rent: Optional[Number] = None,
        effective_date: Optional[date] = None,
    ) -> Optional[RentIncreaseResult]:
        """Same as :meth:`calculate`, using the tenancy's current rent."""
        if tenancy.current_rent is None:
            return None
        return self.calculate(
            tenancy.current_rent,
            proposed_rent,
            market_rent=market_rent,
            effective_date=effective_date,
        )
