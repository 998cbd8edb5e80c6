"""Read-completion tracking and acknowledgement form validation."""

from __future__ import annotations

from policy_portal.review.gate import (
    DEFAULT_READ_BUFFER,
    AcknowledgementForm,
    ReadCompletionGate,
    ReviewSession,
)

__all__ = [
    "DEFAULT_READ_BUFFER",
    "AcknowledgementForm",
    "ReadCompletionGate",
    "ReviewSession",
]
