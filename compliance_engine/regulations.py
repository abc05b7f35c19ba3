"""
Regulatory reference tables for the three compliance regimes.

Covers:
- MTD for Income Tax: income thresholds, 2026/27 quarterly calendar,
  late payment and penalty point rules
- Renters' Rights Act 2025: key implementation dates
- Minimum Energy Efficiency Standards: EPC bands, improvement catalog,
  key dates, spending cap and exemptions
- Default readiness checklists for each regime

Sources: HMRC MTD guidance and MHCLG Renters' Rights guidance as of
February 2026, typical EPC recommendation report data.

Everything here is built once at import time and never modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from compliance_engine.models import Priority, Regime


class MtdPhase(Enum):
    APRIL_2026 = "april_2026"
    APRIL_2027 = "april_2027"
    APRIL_2028 = "april_2028"
    NOT_REQUIRED = "not_required"


class EpcRating(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"


class CostEffectiveness(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------------------------------------------------------
# MTD for Income Tax
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MtdThreshold:
    """
    One phase of the MTD rollout.

    Qualifying income must be strictly greater than ``threshold`` for the
    phase to apply.
    """

    phase: MtdPhase
    threshold: Decimal
    start_date: date
    deadline_label: str
    label: str
    message: str
    description: str


@dataclass(frozen=True)
class MtdQuarter:
    """A quarterly update period and its submission deadline."""

    quarter: int
    period_start: date
    period_end: date
    submission_deadline: date
    label: str
    submit_by: str


# Ordered highest threshold first; the first match wins.
MTD_THRESHOLDS: tuple[MtdThreshold, ...] = (
    MtdThreshold(
        phase=MtdPhase.APRIL_2026,
        threshold=Decimal("50000"),
        start_date=date(2026, 4, 6),
        deadline_label="6 April 2026",
        label="Phase 1 — April 2026",
        message=(
            "You must comply NOW. MTD for Income Tax starts on 6 April 2026 "
            "for those with qualifying income over £50,000."
        ),
        description=(
            "Landlords with gross rental income over £50,000 must keep "
            "digital records and submit quarterly updates."
        ),
    ),
    MtdThreshold(
        phase=MtdPhase.APRIL_2027,
        threshold=Decimal("30000"),
        start_date=date(2027, 4, 6),
        deadline_label="6 April 2027",
        label="Phase 2 — April 2027",
        message=(
            "You have 1 year to prepare. The threshold drops to £30,000 "
            "in April 2027."
        ),
        description=(
            "The threshold drops to £30,000. More landlords will be "
            "brought into scope."
        ),
    ),
    MtdThreshold(
        phase=MtdPhase.APRIL_2028,
        threshold=Decimal("20000"),
        start_date=date(2028, 4, 6),
        deadline_label="6 April 2028",
        label="Phase 3 — April 2028",
        message=(
            "You have 2 years to prepare. The threshold drops to £20,000 "
            "in April 2028."
        ),
        description="The threshold drops further to £20,000.",
    ),
)

MTD_NOT_REQUIRED_MESSAGE = (
    "Not currently required, but voluntary signup is available. If your "
    "income grows above £20,000 you will need to comply from April 2028."
)

MTD_LIMITED_COMPANY_MESSAGE = (
    "Limited company rental income is not within scope of MTD for Income "
    "Tax Self Assessment."
)

MTD_QUARTERLY_DEADLINES_2026_27: tuple[MtdQuarter, ...] = (
    MtdQuarter(
        1,
        date(2026, 4, 6),
        date(2026, 7, 5),
        date(2026, 8, 7),
        "Q1: 6 Apr – 5 Jul 2026",
        "Submit by 7 Aug 2026",
    ),
    MtdQuarter(
        2,
        date(2026, 7, 6),
        date(2026, 10, 5),
        date(2026, 11, 7),
        "Q2: 6 Jul – 5 Oct 2026",
        "Submit by 7 Nov 2026",
    ),
    MtdQuarter(
        3,
        date(2026, 10, 6),
        date(2027, 1, 5),
        date(2027, 2, 7),
        "Q3: 6 Oct – 5 Jan 2027",
        "Submit by 7 Feb 2027",
    ),
    MtdQuarter(
        4,
        date(2027, 1, 6),
        date(2027, 4, 5),
        date(2027, 5, 7),
        "Q4: 6 Jan – 5 Apr 2027",
        "Submit by 7 May 2027",
    ),
)

MTD_FINAL_DECLARATION_DEADLINE = date(2028, 1, 31)

# Late payment penalties
LATE_PENALTY_FIRST_DAY = 15
LATE_PENALTY_SECOND_DAY = 30
LATE_PENALTY_FIRST_RATE = Decimal("0.03")
LATE_PENALTY_SECOND_RATE = Decimal("0.03")  # additional, not replacing
LATE_PENALTY_ANNUAL_RATE = Decimal("0.10")  # simple daily accrual after day 30
DAYS_PER_YEAR = 365

# Late submission penalty points
PENALTY_POINTS_MAX = 4
PENALTY_POINTS_WARNING_AT = 3
PENALTY_POINTS_FINE = Decimal("200")


# ---------------------------------------------------------------------------
# Renters' Rights Act
# ---------------------------------------------------------------------------

RENTERS_RIGHTS_ACT_START = date(2026, 5, 1)
RENTERS_RIGHTS_INFO_SHEET_DEADLINE = date(2026, 5, 31)
LANDLORD_DATABASE_DEADLINE = date(2026, 12, 31)  # estimated, regional rollout

RENT_INCREASE_NOTICE_MONTHS = 2


# ---------------------------------------------------------------------------
# EPC / Minimum Energy Efficiency Standards
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RatingBand:
    """A contiguous closed range of SAP scores sharing one letter."""

    rating: EpcRating
    min_score: int
    max_score: int
    colour: str

    @property
    def label(self) -> str:
        return f"{self.rating.value} ({self.min_score}-{self.max_score})"


@dataclass(frozen=True)
class EpcImprovement:
    """A standard retrofit measure with cost and SAP point ranges."""

    improvement_type: str
    label: str
    description: str
    cost_min: Decimal
    cost_max: Decimal
    points_min: int
    points_max: int
    cost_effectiveness: CostEffectiveness
    typical_timeline: str


# Best band first
EPC_RATING_BANDS: tuple[RatingBand, ...] = (
    RatingBand(EpcRating.A, 92, 100, "#008054"),
    RatingBand(EpcRating.B, 81, 91, "#19B459"),
    RatingBand(EpcRating.C, 69, 80, "#8DCA2F"),
    RatingBand(EpcRating.D, 55, 68, "#FCD601"),
    RatingBand(EpcRating.E, 39, 54, "#F0B400"),
    RatingBand(EpcRating.F, 21, 38, "#ED8B18"),
    RatingBand(EpcRating.G, 1, 20, "#E9153B"),
)

EPC_BANDS_BY_RATING: Mapping[EpcRating, RatingBand] = MappingProxyType(
    {band.rating: band for band in EPC_RATING_BANDS}
)

EPC_COMPLIANT_RATINGS = frozenset({EpcRating.A, EpcRating.B, EpcRating.C})
EPC_MINIMUM_COMPLIANT_SCORE = EPC_BANDS_BY_RATING[EpcRating.C].min_score

# Average cost of one SAP point, used for whole-property estimates
EPC_AVERAGE_COST_PER_POINT = Decimal("200")
EPC_ESTIMATE_LOW_FACTOR = Decimal("0.5")
EPC_ESTIMATE_HIGH_FACTOR = Decimal("1.8")

EPC_CURRENT_METHODOLOGY_DEADLINE = date(2029, 10, 1)
EPC_FINAL_DEADLINE = date(2030, 10, 1)
EPC_SPENDING_CAP_START = date(2025, 10, 1)
EPC_SPENDING_CAP = Decimal("10000")
EPC_NON_COMPLIANCE_FINE = Decimal("30000")

EPC_IMPROVEMENTS: tuple[EpcImprovement, ...] = (
    EpcImprovement(
        "loft_insulation",
        "Loft insulation",
        "Install or top up loft insulation to at least 270mm depth.",
        Decimal("300"),
        Decimal("500"),
        3,
        5,
        CostEffectiveness.HIGH,
        "1 day",
    ),
    EpcImprovement(
        "cavity_wall",
        "Cavity wall insulation",
        "Fill cavity walls with insulation material.",
        Decimal("350"),
        Decimal("500"),
        5,
        10,
        CostEffectiveness.HIGH,
        "1 day",
    ),
    EpcImprovement(
        "double_glazing",
        "Double glazing",
        "Replace single-glazed windows with double or triple glazing.",
        Decimal("3000"),
        Decimal("7000"),
        5,
        10,
        CostEffectiveness.MEDIUM,
        "1-2 weeks",
    ),
    EpcImprovement(
        "led_lighting",
        "LED lighting",
        "Replace all light fittings with LED bulbs.",
        Decimal("50"),
        Decimal("200"),
        1,
        2,
        CostEffectiveness.HIGH,
        "1 day",
    ),
    EpcImprovement(
        "hot_water_insulation",
        "Hot water cylinder insulation",
        "Add or upgrade hot water cylinder jacket.",
        Decimal("20"),
        Decimal("50"),
        1,
        2,
        CostEffectiveness.HIGH,
        "1 hour",
    ),
    EpcImprovement(
        "boiler_upgrade",
        "Boiler upgrade",
        "Replace old boiler with a modern condensing boiler.",
        Decimal("1500"),
        Decimal("3000"),
        5,
        15,
        CostEffectiveness.MEDIUM,
        "1-2 days",
    ),
    EpcImprovement(
        "solar_panels",
        "Solar panels",
        "Install photovoltaic solar panels on the roof.",
        Decimal("4000"),
        Decimal("8000"),
        8,
        12,
        CostEffectiveness.MEDIUM,
        "1-2 days",
    ),
    EpcImprovement(
        "heat_pump",
        "Heat pump",
        "Install an air source or ground source heat pump.",
        Decimal("8000"),
        Decimal("15000"),
        10,
        20,
        CostEffectiveness.LOW,
        "1-2 weeks",
    ),
)


@dataclass(frozen=True)
class EpcExemption:
    """A registrable exemption from the minimum rating requirement."""

    exemption_type: str
    label: str
    description: str
    duration: str


EPC_EXEMPTIONS: tuple[EpcExemption, ...] = (
    EpcExemption(
        "cost_cap",
        "Cost cap exemption",
        "All cost-effective improvements have been made within the "
        "£10,000 cap.",
        "5 years",
    ),
    EpcExemption(
        "tenant_consent",
        "Tenant consent refused",
        "The tenant has refused consent for the improvements to be "
        "carried out.",
        "5 years",
    ),
    EpcExemption(
        "devaluation",
        "Property devaluation",
        "An independent surveyor has determined the improvements would "
        "devalue the property by more than 5%.",
        "5 years",
    ),
    EpcExemption(
        "listed_building",
        "Listed building / conservation area",
        "The property is a listed building or in a conservation area where "
        "improvements would unacceptably alter the character.",
        "5 years",
    ),
    EpcExemption(
        "new_landlord",
        "New landlord (6-month grace period)",
        "You have recently become the landlord and have a 6-month grace "
        "period to comply.",
        "6 months",
    ),
)


# ---------------------------------------------------------------------------
# Certificates
# ---------------------------------------------------------------------------

CERTIFICATE_EXPIRING_SOON_DAYS = 30


# ---------------------------------------------------------------------------
# Readiness scoring
# ---------------------------------------------------------------------------

# Shorter per-regime date lists used for the "next deadline" on each
# readiness card. Kept separate from the full deadline calendar.
READINESS_DEADLINES: Mapping[Regime, tuple[date, ...]] = MappingProxyType(
    {
        Regime.MTD: (
            date(2026, 4, 6),
            date(2026, 8, 7),
            date(2026, 11, 7),
            date(2027, 2, 7),
            date(2027, 5, 7),
        ),
        Regime.RENTERS_RIGHTS: (
            date(2026, 5, 1),
            date(2026, 5, 31),
            date(2026, 12, 31),
        ),
        Regime.EPC: (
            date(2029, 10, 1),
            date(2030, 10, 1),
        ),
    }
)

# Nearer deadlines weigh more. Must sum to 1.
PILLAR_WEIGHTS: Mapping[Regime, Decimal] = MappingProxyType(
    {
        Regime.MTD: Decimal("0.35"),
        Regime.RENTERS_RIGHTS: Decimal("0.40"),
        Regime.EPC: Decimal("0.25"),
    }
)

READY_SCORE = 80
PARTIAL_SCORE = 40


# ---------------------------------------------------------------------------
# Readiness checklists
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChecklistTemplate:
    """A standard readiness task seeded for every landlord."""

    key: str
    title: str
    description: str
    priority: Priority
    due_date: Optional[date] = None
    per_property: bool = False


MTD_READINESS_CHECKLIST: tuple[ChecklistTemplate, ...] = (
    ChecklistTemplate(
        "check_income_threshold",
        "Checked qualifying income against threshold",
        "Calculate your total gross rental income to determine which MTD "
        "phase applies to you.",
        Priority.CRITICAL,
    ),
    ChecklistTemplate(
        "government_gateway",
        "Registered for Government Gateway account",
        "You need a Government Gateway account to access HMRC online services.",
        Priority.CRITICAL,
    ),
    ChecklistTemplate(
        "mtd_signup",
        "Signed up for MTD for Income Tax on HMRC",
        "Register for MTD for Income Tax through your Government Gateway "
        "account.",
        Priority.CRITICAL,
    ),
    ChecklistTemplate(
        "chosen_software",
        "Chosen HMRC-recognised MTD software",
        "Select compatible software from the HMRC-approved list to keep "
        "digital records and submit updates.",
        Priority.HIGH,
    ),
    ChecklistTemplate(
        "digital_records",
        "Set up digital record-keeping",
        "Start keeping digital records of all rental income and expenses.",
        Priority.HIGH,
    ),
    ChecklistTemplate(
        "bank_feeds",
        "Connected bank feeds (if using compatible software)",
        "Link your bank account to your MTD software for automatic "
        "transaction imports.",
        Priority.MEDIUM,
    ),
    ChecklistTemplate(
        "expense_categories",
        "Categorised property expenses correctly",
        "Ensure expenses are categorised using HMRC-aligned categories.",
        Priority.HIGH,
    ),
    ChecklistTemplate(
        "quarterly_schedule",
        "Understood quarterly submission schedule",
        "Know the four quarterly periods and their submission deadlines.",
        Priority.MEDIUM,
    ),
    ChecklistTemplate(
        "self_assessment_filed",
        "Filed 2024/25 Self Assessment (by 31 Jan 2026)",
        "Ensure your most recent Self Assessment is filed before MTD begins.",
        Priority.HIGH,
    ),
    ChecklistTemplate(
        "agent_appointed",
        "Appointed agent (if using one) and authorised them",
        "If using a tax agent or accountant, ensure they are authorised to "
        "act on your behalf for MTD.",
        Priority.MEDIUM,
    ),
)

RENTERS_RIGHTS_CHECKLIST: tuple[ChecklistTemplate, ...] = (
    ChecklistTemplate(
        "tenancy_type_understood",
        "Tenancy type updated/understood (AST to periodic assured)",
        "Understand that all ASTs will convert to periodic assured "
        "tenancies from 1 May 2026.",
        Priority.CRITICAL,
        date(2026, 5, 1),
        per_property=True,
    ),
    ChecklistTemplate(
        "written_statement",
        "Written statement of terms prepared",
        "Prepare a written statement of terms for new tenancies from "
        "1 May 2026.",
        Priority.HIGH,
        date(2026, 5, 1),
        per_property=True,
    ),
    ChecklistTemplate(
        "information_sheet",
        "Government Information Sheet provided to existing tenants",
        "Provide the government Information Sheet to all existing tenants "
        "by 31 May 2026.",
        Priority.CRITICAL,
        date(2026, 5, 31),
        per_property=True,
    ),
    ChecklistTemplate(
        "section8_grounds",
        "Section 8 grounds understood",
        "Understand the replacement grounds for possession now that "
        "Section 21 is abolished.",
        Priority.HIGH,
        date(2026, 5, 1),
    ),
    ChecklistTemplate(
        "rent_increase_process",
        "Rent increase process updated (Section 13, once per year, "
        "2 months notice)",
        "Update your rent increase process to comply with the new Section 13 "
        "requirements.",
        Priority.HIGH,
        date(2026, 5, 1),
    ),
    ChecklistTemplate(
        "pet_policy",
        "Pet policy updated (must allow with insurance option)",
        "Update your pet policy. You cannot unreasonably refuse pets. You "
        "can require pet insurance.",
        Priority.MEDIUM,
        date(2026, 5, 1),
        per_property=True,
    ),
    ChecklistTemplate(
        "landlord_database",
        "Landlord Database registration",
        "Register on the mandatory Landlord Database when available in your "
        "region.",
        Priority.HIGH,
        date(2026, 12, 31),
        per_property=True,
    ),
    ChecklistTemplate(
        "ombudsman_registration",
        "Ombudsman registration (when required)",
        "Register with the Landlord Ombudsman when the requirement comes "
        "into effect.",
        Priority.MEDIUM,
        date(2028, 6, 30),
    ),
    ChecklistTemplate(
        "asb_process",
        "Anti-social behaviour process documented",
        "Document your process for dealing with anti-social behaviour "
        "complaints.",
        Priority.MEDIUM,
        date(2026, 5, 1),
    ),
    ChecklistTemplate(
        "rent_arrears_process",
        "Rent arrears process documented (for Section 8 Ground 8/10/11)",
        "Document your process for dealing with rent arrears under the new "
        "Section 8 grounds.",
        Priority.HIGH,
        date(2026, 5, 1),
    ),
)

EPC_READINESS_CHECKLIST: tuple[ChecklistTemplate, ...] = (
    ChecklistTemplate(
        "epc_checked",
        "Checked current EPC rating for all properties",
        "Review your EPC certificates and check ratings against the upcoming "
        "minimum C requirement.",
        Priority.HIGH,
    ),
    ChecklistTemplate(
        "gap_analysis",
        "Completed gap-to-C analysis",
        "Identify which properties need improvements to reach EPC C by the "
        "2030 deadline.",
        Priority.HIGH,
    ),
    ChecklistTemplate(
        "improvement_plan",
        "Created improvement plan",
        "Plan the energy efficiency improvements needed, with costs and "
        "timelines.",
        Priority.MEDIUM,
    ),
    ChecklistTemplate(
        "grant_research",
        "Researched available grants (Warm Homes, BUS, GBIS, ECO4)",
        "Check eligibility for government grants to offset improvement costs.",
        Priority.MEDIUM,
    ),
    ChecklistTemplate(
        "works_started",
        "Started improvement works",
        "Begin carrying out the planned energy efficiency improvements.",
        Priority.MEDIUM,
    ),
    ChecklistTemplate(
        "reassessment_booked",
        "Booked EPC reassessment",
        "After improvements, book a new EPC assessment to confirm the updated "
        "rating.",
        Priority.LOW,
    ),
)

READINESS_CHECKLISTS: Mapping[Regime, tuple[ChecklistTemplate, ...]] = (
    MappingProxyType(
        {
            Regime.MTD: MTD_READINESS_CHECKLIST,
            Regime.RENTERS_RIGHTS: RENTERS_RIGHTS_CHECKLIST,
            Regime.EPC: EPC_READINESS_CHECKLIST,
        }
    )
)


def get_mtd_threshold(phase: MtdPhase) -> Optional[MtdThreshold]:
    for threshold in MTD_THRESHOLDS:
        if threshold.phase == phase:
            return threshold
    return None


def get_improvement(improvement_type: str) -> Optional[EpcImprovement]:
    """Look up a catalog entry by its type key."""
    for improvement in EPC_IMPROVEMENTS:
        if improvement.improvement_type == improvement_type:
            return improvement
    return None


def get_exemption(exemption_type: str) -> Optional[EpcExemption]:
    for exemption in EPC_EXEMPTIONS:
        if exemption.exemption_type == exemption_type:
            return exemption
    return None
