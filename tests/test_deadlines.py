"""Tests for the DeadlineEngine and certificate status."""

from datetime import date, datetime

import pytest

from compliance_engine.deadlines import (
    CertificateStatus,
    DeadlineEngine,
    get_certificate_status,
)
from compliance_engine.models import Certificate, Property, Regime


@pytest.fixture
def engine() -> DeadlineEngine:
    return DeadlineEngine()


@pytest.fixture
def properties() -> list[Property]:
    return [
        Property("p1", "12 Acacia Avenue", city="Leeds", postcode="LS1 1AA"),
        Property("p2", "3 Mill Lane", city="York"),
    ]


def _cert(cert_id: str, expiry: date | None, category: str = "gas_safety",
          property_id: str = "p1") -> Certificate:
    return Certificate(cert_id, property_id, category, expiry_date=expiry)


# ── Regime calendars ────────────────────────────────────────────────


def test_mtd_deadlines(engine: DeadlineEngine):
    deadlines = engine.get_mtd_deadlines()
    assert [d.deadline_id for d in deadlines] == [
        "mtd-q1", "mtd-q2", "mtd-q3", "mtd-q4",
    ]
    assert deadlines[0].due_date == date(2026, 8, 7)
    assert deadlines[0].title == "MTD Q1: 6 Apr – 5 Jul 2026"
    assert deadlines[0].description == "Submit by 7 Aug 2026"
    assert all(d.regime == Regime.MTD for d in deadlines)


def test_renters_rights_deadlines(engine: DeadlineEngine):
    deadlines = engine.get_renters_rights_deadlines()
    critical = [d.deadline_id for d in deadlines if d.is_critical]
    assert critical == ["rra-phase1", "rra-info-sheet"]
    assert deadlines[-1].due_date == date(2026, 12, 31)


def test_epc_deadlines(engine: DeadlineEngine):
    current, final = engine.get_epc_deadlines()
    assert current.due_date == date(2029, 10, 1)
    assert not current.is_critical
    assert final.due_date == date(2030, 10, 1)
    assert final.is_critical
    assert "£30,000" in final.description


# ── Certificate deadlines ───────────────────────────────────────────


def test_certificate_title_includes_address(
    engine: DeadlineEngine, properties: list[Property]
):
    [deadline] = engine.get_certificate_deadlines(
        properties, [_cert("c1", date(2026, 9, 1))]
    )
    assert deadline.deadline_id == "cert-c1"
    assert deadline.title == "gas safety renewal — 12 Acacia Avenue"
    assert deadline.description == "Certificate expires on 2026-09-01"
    assert deadline.regime == Regime.CERTIFICATE
    assert deadline.property_id == "p1"


def test_certificate_for_unknown_property_has_no_address(
    engine: DeadlineEngine, properties: list[Property]
):
    [deadline] = engine.get_certificate_deadlines(
        properties, [_cert("c9", date(2026, 9, 1), "eicr", "p-missing")]
    )
    assert deadline.title == "eicr renewal"


def test_hyphenated_category_title(engine: DeadlineEngine):
    [deadline] = engine.get_certificate_deadlines(
        [], [_cert("c2", date(2026, 9, 1), "smoke-co")]
    )
    assert deadline.title == "smoke co renewal"


def test_certificate_without_expiry_is_skipped(
    engine: DeadlineEngine, properties: list[Property]
):
    certs = [_cert("c1", None), _cert("c2", date(2027, 3, 1))]
    deadlines = engine.get_certificate_deadlines(properties, certs)
    assert [d.deadline_id for d in deadlines] == ["cert-c2"]


# ── Combined timeline ───────────────────────────────────────────────


def test_all_deadlines_sorted_ascending(
    engine: DeadlineEngine, properties: list[Property]
):
    certs = [
        _cert("a", date(2026, 4, 6)),
        _cert("b", date(2026, 1, 1)),
        _cert("c", date(2026, 12, 31)),
    ]
    deadlines = engine.get_all_deadlines(properties, certs, date(2026, 6, 1))
    assert len(deadlines) == 12
    dates = [d.due_date for d in deadlines]
    assert dates == sorted(dates)
    cert_ids = [d.deadline_id for d in deadlines if d.regime == Regime.CERTIFICATE]
    assert cert_ids == ["cert-b", "cert-a", "cert-c"]


def test_same_date_keeps_source_order(
    engine: DeadlineEngine, properties: list[Property]
):
    certs = [_cert("c1", date(2026, 12, 31))]
    deadlines = engine.get_all_deadlines(properties, certs, date(2026, 6, 1))
    ids = [d.deadline_id for d in deadlines]
    assert ids.index("rra-database") + 1 == ids.index("cert-c1")


def test_overdue_is_strictly_before_now(engine: DeadlineEngine):
    deadlines = {
        d.deadline_id: d
        for d in engine.get_all_deadlines([], [], date(2026, 5, 31))
    }
    assert deadlines["rra-phase1"].is_overdue
    # Due today at midnight is not overdue when now is also midnight
    assert not deadlines["rra-info-sheet"].is_overdue
    assert not deadlines["mtd-q1"].is_overdue


def test_overdue_later_on_due_date(engine: DeadlineEngine):
    deadlines = {
        d.deadline_id: d
        for d in engine.get_all_deadlines([], [], datetime(2026, 5, 31, 9, 0))
    }
    assert deadlines["rra-info-sheet"].is_overdue


def test_source_calendars_are_not_flagged(engine: DeadlineEngine):
    engine.get_all_deadlines([], [], date(2031, 1, 1))
    assert not any(d.is_overdue for d in engine.get_epc_deadlines())


# ── Upcoming deadlines ──────────────────────────────────────────────


def test_upcoming_filters_then_limits(engine: DeadlineEngine):
    upcoming = engine.get_upcoming_deadlines([], [], date(2026, 6, 1), limit=3)
    assert [d.deadline_id for d in upcoming] == [
        "mtd-q1", "mtd-q2", "rra-database",
    ]


def test_upcoming_includes_certificate(
    engine: DeadlineEngine, properties: list[Property]
):
    certs = [_cert("c1", date(2026, 7, 15))]
    upcoming = engine.get_upcoming_deadlines(
        properties, certs, date(2026, 6, 1), limit=2
    )
    assert [d.deadline_id for d in upcoming] == ["cert-c1", "mtd-q1"]


def test_upcoming_includes_deadline_due_now(engine: DeadlineEngine):
    upcoming = engine.get_upcoming_deadlines([], [], date(2026, 8, 7), limit=1)
    assert upcoming[0].deadline_id == "mtd-q1"
    assert not upcoming[0].is_overdue


def test_upcoming_after_calendar_year(engine: DeadlineEngine):
    upcoming = engine.get_upcoming_deadlines([], [], date(2027, 1, 1), limit=2)
    assert [d.deadline_id for d in upcoming] == ["mtd-q3", "mtd-q4"]


def test_upcoming_default_limit(engine: DeadlineEngine):
    upcoming = engine.get_upcoming_deadlines([], [], date(2025, 1, 1))
    assert len(upcoming) == 9


def test_nothing_upcoming_after_final_deadline(engine: DeadlineEngine):
    assert engine.get_upcoming_deadlines([], [], date(2030, 10, 2)) == []


# ── Certificate status ──────────────────────────────────────────────


NOW = date(2026, 6, 1)


def test_missing_certificate():
    assert get_certificate_status(None, NOW) == CertificateStatus.MISSING


def test_certificate_without_expiry_is_valid():
    assert get_certificate_status(_cert("c1", None), NOW) == CertificateStatus.VALID


@pytest.mark.parametrize(
    "expiry,status",
    [
        (date(2026, 5, 31), CertificateStatus.EXPIRED),
        (date(2026, 6, 1), CertificateStatus.EXPIRING_SOON),
        (date(2026, 6, 30), CertificateStatus.EXPIRING_SOON),
        (date(2026, 7, 1), CertificateStatus.VALID),
        (date(2026, 12, 1), CertificateStatus.VALID),
    ],
)
def test_certificate_status_from_expiry(expiry: date, status: CertificateStatus):
    assert get_certificate_status(_cert("c1", expiry), NOW) == status
