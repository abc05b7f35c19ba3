"""
Domain records shared by the compliance calculators.

Properties, tenancies, certificates and checklist items are supplied by the
caller and never modified. Deadlines are produced by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union


class Regime(Enum):
    MTD = "mtd"
    RENTERS_RIGHTS = "renters_rights"
    EPC = "epc"
    CERTIFICATE = "certificate"  # pseudo-regime for certificate expiries


PILLARS: tuple[Regime, ...] = (Regime.MTD, Regime.RENTERS_RIGHTS, Regime.EPC)


class Priority(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class OwnershipType(Enum):
    SOLE = "sole"
    JOINT = "joint"
    LIMITED_COMPANY = "limited_company"


@dataclass(frozen=True)
class Property:
    """A rented property owned by a landlord."""

    property_id: str
    address_line1: str
    city: str = ""
    postcode: str = ""
    address_line2: Optional[str] = None
    owner_id: Optional[str] = None
    ownership_type: OwnershipType = OwnershipType.SOLE


@dataclass(frozen=True)
class Tenancy:
    tenancy_id: str
    property_id: str
    tenant_name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    current_rent: Optional[Decimal] = None
    status: str = "active"  # active, ended, notice_served


@dataclass(frozen=True)
class Certificate:
    """
    A safety or compliance certificate attached to a property.

    Status is not stored here; it is derived from ``expiry_date`` each
    time it is asked for.
    """

    certificate_id: str
    property_id: str
    category: str  # gas_safety, eicr, epc, smoke_co, ...
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


@dataclass(frozen=True)
class ChecklistItem:
    """One readiness task for a regime, optionally tied to a property."""

    item_id: str
    regime: Regime
    is_completed: bool = False
    priority: Priority = Priority.MEDIUM
    property_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    title: str = ""


@dataclass(frozen=True)
class Deadline:
    """A dated obligation on the compliance timeline."""

    deadline_id: str
    title: str
    due_date: date
    regime: Regime
    description: str = ""
    property_id: Optional[str] = None
    is_critical: bool = False
    is_overdue: bool = False


Moment = Union[date, datetime]

ONE_DAY = timedelta(days=1)


def as_instant(moment: Moment, tz_source: Optional[datetime] = None) -> datetime:
    """
    Normalise a date or datetime to a datetime.

    A bare date means midnight at the start of that day. When ``tz_source``
    is timezone-aware the result takes its tzinfo so the two can be compared.
    """
    if isinstance(moment, datetime):
        return moment
    tzinfo = tz_source.tzinfo if isinstance(tz_source, datetime) else None
    return datetime.combine(moment, time.min, tzinfo=tzinfo)


def is_before(day: date, now: Moment) -> bool:
    """True when midnight of ``day`` is strictly earlier than ``now``."""
    now_instant = as_instant(now)
    return as_instant(day, now_instant) < now_instant


def days_until(day: date, now: Moment) -> int:
    """Whole days from ``now`` to ``day``, rounded up."""
    now_instant = as_instant(now)
    delta = as_instant(day, now_instant) - now_instant
    return -((-delta) // ONE_DAY)


def to_decimal(value: Union[int, float, str, Decimal]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Decimal, places: str = "1") -> Decimal:
    """Round away from zero on ties, the way money is usually rounded."""
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)
