#!/usr/bin/env python3
"""
Quick Start Example
===================

Checks MTD status for a joint-owned portfolio, plans EPC upgrades for a
D-rated flat and lists the next deadlines, all as of a fixed date.

Usage:
    python examples/quick_start.py
"""

from datetime import date

from compliance_engine.deadlines import DeadlineEngine
from compliance_engine.epc import EpcEstimator
from compliance_engine.models import Certificate, Property
from compliance_engine.mtd import MtdCalculator, MtdCalculatorInput


def main() -> None:
    today = date(2026, 6, 1)

    # MTD: £70k joint rental income counts as £35k, plus £8k self-employment
    mtd = MtdCalculator().calculate_mtd_status(
        MtdCalculatorInput(
            gross_rental_income=70000,
            self_employment_income=8000,
            is_joint_ownership=True,
        )
    )
    print(f"Qualifying income: £{mtd.qualifying_income:,.2f}")
    print(f"MTD phase:         {mtd.phase.value} ({mtd.deadline})")
    print(f"                   {mtd.message}")

    # EPC: score 60 is a D, nine points short of C
    estimator = EpcEstimator()
    print(f"\nEPC rating:        {estimator.get_rating_for_score(60).value}")
    print(f"Gap to C:          {estimator.get_gap_to_c(60)} points")
    for rec in estimator.get_recommended_improvements(60, budget=600):
        print(
            f"  {rec.label:<32} £{rec.estimated_cost_mid:>8,.2f} "
            f"(£{rec.cost_per_point:,.2f}/point)"
        )

    # Deadlines, including a gas safety certificate renewal
    flat = Property("p1", "12 Acacia Avenue", "Leeds", "LS1 1AA")
    gas = Certificate("c1", "p1", "gas_safety", expiry_date=date(2026, 7, 15))
    print("\nUpcoming deadlines:")
    for d in DeadlineEngine().get_upcoming_deadlines([flat], [gas], today, limit=5):
        print(f"  {d.due_date}  {d.title}")


if __name__ == "__main__":
    main()
