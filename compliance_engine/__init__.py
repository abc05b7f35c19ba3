"""
Landlord Compliance Engine
==========================

Deadline, readiness and remediation calculations for UK landlords across
three regimes: Making Tax Digital for Income Tax, the Renters' Rights Act
and the EPC minimum rating standard.

Modules:
    models          - Properties, certificates, checklist items, deadlines
    regulations     - Regulatory reference tables (dates, thresholds, costs)
    mtd             - MTD phase classification and late penalties
    epc             - EPC ratings and cost-effective upgrade planning
    deadlines       - Combined, overdue-flagged deadline timeline
    scoring         - Per-pillar and overall readiness scores
    renters_rights  - Section 13 rent increase calculator
    report_generator- Reporting with CSV/JSON export
    cli             - Command-line interface
"""

__version__ = "1.0.0"

from compliance_engine.deadlines import DeadlineEngine
from compliance_engine.epc import EpcEstimator
from compliance_engine.mtd import MtdCalculator
from compliance_engine.renters_rights import RentIncreaseCalculator
from compliance_engine.report_generator import ReportGenerator
from compliance_engine.scoring import ScoreCalculator

__all__ = [
    "DeadlineEngine",
    "EpcEstimator",
    "MtdCalculator",
    "RentIncreaseCalculator",
    "ReportGenerator",
    "ScoreCalculator",
]
