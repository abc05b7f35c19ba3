"""
Compliance deadline engine.

Builds one chronological timeline from:
- MTD quarterly submission deadlines
- Renters' Rights Act implementation dates
- EPC minimum rating deadlines
- Certificate expiry dates for the landlord's properties

and works out certificate status from expiry dates on every read.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from enum import Enum
from typing import Optional, Sequence

from compliance_engine.models import (
    Certificate,
    Deadline,
    Moment,
    Property,
    Regime,
    as_instant,
    is_before,
)
from compliance_engine.regulations import (
    CERTIFICATE_EXPIRING_SOON_DAYS,
    EPC_CURRENT_METHODOLOGY_DEADLINE,
    EPC_FINAL_DEADLINE,
    EPC_NON_COMPLIANCE_FINE,
    LANDLORD_DATABASE_DEADLINE,
    MTD_QUARTERLY_DEADLINES_2026_27,
    RENTERS_RIGHTS_ACT_START,
    RENTERS_RIGHTS_INFO_SHEET_DEADLINE,
)

logger = logging.getLogger(__name__)


class CertificateStatus(Enum):
    VALID = "valid"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    MISSING = "missing"


def _category_title(category: str) -> str:
    return category.replace("_", " ").replace("-", " ")


def get_certificate_status(
    certificate: Optional[Certificate], now: Moment
) -> CertificateStatus:
    """
    Derive a certificate's status as of ``now``.

    A certificate without an expiry date counts as valid. One expiring
    less than 30 days after ``now`` is expiring soon.
    """
    if certificate is None:
        return CertificateStatus.MISSING
    if certificate.expiry_date is None:
        return CertificateStatus.VALID
    if is_before(certificate.expiry_date, now):
        return CertificateStatus.EXPIRED
    now_instant = as_instant(now)
    window_end = now_instant + timedelta(days=CERTIFICATE_EXPIRING_SOON_DAYS)
    if as_instant(certificate.expiry_date, now_instant) < window_end:
        return CertificateStatus.EXPIRING_SOON
    return CertificateStatus.VALID


class DeadlineEngine:
    """
    Assembles regulatory and certificate deadlines into a timeline.

    The regime calendars are fixed; only certificate deadlines depend on
    the caller's data, and only overdue flags depend on ``now``.
    """

    def get_mtd_deadlines(self) -> list[Deadline]:
        return [
            Deadline(
                deadline_id=f"mtd-q{q.quarter}",
                title=f"MTD {q.label}",
                due_date=q.submission_deadline,
                regime=Regime.MTD,
                description=q.submit_by,
            )
            for q in MTD_QUARTERLY_DEADLINES_2026_27
        ]

    def get_renters_rights_deadlines(self) -> list[Deadline]:
        return [
            Deadline(
                deadline_id="rra-phase1",
                title="Renters' Rights Act takes effect",
                due_date=RENTERS_RIGHTS_ACT_START,
                regime=Regime.RENTERS_RIGHTS,
                description=(
                    "Section 21 abolished. ASTs convert to periodic. "
                    "New rules take effect."
                ),
                is_critical=True,
            ),
            Deadline(
                deadline_id="rra-info-sheet",
                title="Information Sheet deadline for existing tenants",
                due_date=RENTERS_RIGHTS_INFO_SHEET_DEADLINE,
                regime=Regime.RENTERS_RIGHTS,
                description=(
                    "Government Information Sheet must be provided to all "
                    "existing tenants."
                ),
                is_critical=True,
            ),
            Deadline(
                deadline_id="rra-database",
                title="Landlord Database registration (estimated)",
                due_date=LANDLORD_DATABASE_DEADLINE,
                regime=Regime.RENTERS_RIGHTS,
                description=(
                    "Mandatory registration on the Landlord Database "
                    "(regional rollout)."
                ),
            ),
        ]

    def get_epc_deadlines(self) -> list[Deadline]:
        return [
            Deadline(
                deadline_id="epc-current-method",
                title="EPC C under current methodology deadline",
                due_date=EPC_CURRENT_METHODOLOGY_DEADLINE,
                regime=Regime.EPC,
                description=(
                    "Last date to get EPC C under current EER methodology "
                    "(valid for up to 10 years)."
                ),
            ),
            Deadline(
                deadline_id="epc-final",
                title="EPC C final deadline — all rental properties",
                due_date=EPC_FINAL_DEADLINE,
                regime=Regime.EPC,
                description=(
                    "All rental properties must meet EPC C. Fines up to "
                    f"£{EPC_NON_COMPLIANCE_FINE:,} per property."
                ),
                is_critical=True,
            ),
        ]

    def get_certificate_deadlines(
        self,
        properties: Sequence[Property],
        certificates: Sequence[Certificate],
    ) -> list[Deadline]:
        """
        One renewal deadline per certificate that has an expiry date.

        The property's first address line is appended to the title when the
        property is among ``properties``; otherwise it is left off.
        """
        by_id = {p.property_id: p for p in properties}
        deadlines: list[Deadline] = []

        for cert in certificates:
            if cert.expiry_date is None:
                continue
            title = f"{_category_title(cert.category)} renewal"
            prop = by_id.get(cert.property_id)
            if prop is not None:
                title = f"{title} — {prop.address_line1}"
            deadlines.append(
                Deadline(
                    deadline_id=f"cert-{cert.certificate_id}",
                    title=title,
                    due_date=cert.expiry_date,
                    regime=Regime.CERTIFICATE,
                    description=(
                        f"Certificate expires on {cert.expiry_date.isoformat()}"
                    ),
                    property_id=cert.property_id,
                )
            )

        return deadlines

    def get_all_deadlines(
        self,
        properties: Sequence[Property],
        certificates: Sequence[Certificate],
        now: Moment,
    ) -> list[Deadline]:
        """
        Every deadline, oldest first, flagged overdue when before ``now``.

        The sort is stable, so entries sharing a date keep source order:
        MTD, Renters' Rights, EPC, then certificates.
        """
        combined = (
            self.get_mtd_deadlines()
            + self.get_renters_rights_deadlines()
            + self.get_epc_deadlines()
            + self.get_certificate_deadlines(properties, certificates)
        )
        stamped = [
            replace(d, is_overdue=is_before(d.due_date, now)) for d in combined
        ]
        logger.debug(
            "Built %d deadlines, %d overdue",
            len(stamped),
            sum(1 for d in stamped if d.is_overdue),
        )
        return sorted(stamped, key=lambda d: d.due_date)

    def get_upcoming_deadlines(
        self,
        properties: Sequence[Property],
        certificates: Sequence[Certificate],
        now: Moment,
        limit: int = 10,
    ) -> list[Deadline]:
        """The next ``limit`` deadlines that are not yet past."""
        upcoming = [
            d
            for d in self.get_all_deadlines(properties, certificates, now)
            if not is_before(d.due_date, now)
        ]
        return upcoming[:limit]
