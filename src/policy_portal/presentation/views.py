"""Read-only view models for the review screen and the signed certificate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from policy_portal.models import PolicyDocument, SignatureData

EMPLOYEE_ID_PLACEHOLDER = "-"


@dataclass(frozen=True)
class NumberedSection:
    number: int
    title: str
    rules: tuple[str, ...]


@dataclass(frozen=True)
class ReviewView:
    """A policy laid out for reading: header plus 1-based numbered sections."""

    company_name: str
    document_title: str
    date: str
    sections: tuple[NumberedSection, ...]


def build_review_view(policy: PolicyDocument) -> ReviewView:
    return ReviewView(
        company_name=policy.company_name,
        document_title=policy.document_title,
        date=policy.date,
        sections=tuple(
            NumberedSection(number=i, title=s.title, rules=s.rules)
            for i, s in enumerate(policy.sections, start=1)
        ),
    )


@dataclass(frozen=True)
class CertificateView:
    """Everything the signed-confirmation screen displays."""

    employee_name: str
    employee_id: str
    document_title: str
    company_name: str
    signed_on: str
    timestamp: str


def format_local_date(timestamp: str, *, date_format: str = "%d/%m/%Y", tz_name: str = "") -> str:
    """Render an ISO-8601 instant as a calendar date in *tz_name* (server local if empty)."""
    moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    tz = ZoneInfo(tz_name) if tz_name else None
    return moment.astimezone(tz).strftime(date_format)


def build_certificate(
    policy: PolicyDocument,
    signature: SignatureData,
    *,
    date_format: str = "%d/%m/%Y",
    tz_name: str = "",
) -> CertificateView:
    return CertificateView(
        employee_name=signature.employee_name,
        employee_id=signature.employee_id or EMPLOYEE_ID_PLACEHOLDER,
        document_title=policy.document_title,
        company_name=policy.company_name,
        signed_on=format_local_date(signature.timestamp, date_format=date_format, tz_name=tz_name),
        timestamp=signature.timestamp,
    )
