"""Pydantic data models for policy-portal.

Attributes are snake_case; JSON on the wire (provider responses, API bodies)
uses the camelCase aliases, e.g. ``companyName`` and ``employeeId``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ── Policy document ──────────────────────────────────────────────────


class PolicySection(BaseModel):
    """A titled group of rule statements, in display order."""

    model_config = _WIRE_CONFIG

    title: str
    rules: tuple[str, ...]


class PolicyDocument(BaseModel):
    """Structured representation of a company policy."""

    model_config = _WIRE_CONFIG

    company_name: str
    document_title: str
    date: str = ""
    sections: tuple[PolicySection, ...]

    @property
    def rule_count(self) -> int:
        return sum(len(s.rules) for s in self.sections)


# ── Signature ────────────────────────────────────────────────────────


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC instant with millisecond precision and a ``Z`` suffix.

    Sub-millisecond parts round up, so the result is never earlier than *now*.
    """
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    moment += timedelta(microseconds=(1000 - moment.microsecond % 1000) % 1000)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SignatureData(BaseModel):
    """Immutable record of who acknowledged a policy and when."""

    model_config = _WIRE_CONFIG

    employee_name: str = Field(min_length=1)
    employee_id: str = ""  # empty string means "not provided"
    timestamp: str = Field(default_factory=utc_timestamp)

    @property
    def signed_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))
