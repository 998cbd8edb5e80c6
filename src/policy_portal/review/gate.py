"""Review/acknowledgement gate.

Two independent conditions must both hold before a signature is recorded:

1. **Read completion**: the reader has scrolled to within ``buffer`` units
   of the bottom of the policy pane, or the pane never needed scrolling.
   Once open the gate stays open for that document instance.
2. **Form validity**: a non-empty employee name and an explicit
   acknowledgement. The employee ID is optional.

Neither condition failing is an error: submission is simply a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from policy_portal.models import PolicyDocument, SignatureData, utc_timestamp

log = logging.getLogger(__name__)

DEFAULT_READ_BUFFER = 50.0


class ReadCompletionGate:
    """Tracks scroll geometry of the policy pane; latches open."""

    def __init__(self, buffer: float = DEFAULT_READ_BUFFER) -> None:
        if buffer < 0:
            raise ValueError(f"buffer must be >= 0, got {buffer}")
        self._buffer = buffer
        self._open = False

    @property
    def buffer(self) -> float:
        return self._buffer

    @property
    def is_open(self) -> bool:
        return self._open

    def measure(self, viewport_height: float, content_height: float) -> bool:
        """Mount/update check: content that fits the viewport opens the gate."""
        if not self._open and content_height <= viewport_height:
            log.debug("Content fits viewport (%s <= %s); read gate open", content_height, viewport_height)
            self._open = True
        return self._open

    def observe_scroll(
        self,
        scroll_offset: float,
        viewport_height: float,
        content_height: float,
    ) -> bool:
        """Scroll event: open once less than ``buffer`` units remain unseen."""
        if not self._open and scroll_offset + viewport_height >= content_height - self._buffer:
            log.debug("Scrolled to bottom at offset %s; read gate open", scroll_offset)
            self._open = True
        return self._open


@dataclass(frozen=True)
class AcknowledgementForm:
    """Values of the acknowledgement form at submission time."""

    employee_name: str = ""
    employee_id: str = ""
    agreed: bool = False

    @property
    def is_valid(self) -> bool:
        return bool(self.employee_name) and self.agreed is True


class ReviewSession:
    """Review of one policy document instance, from display to signature."""

    def __init__(self, policy: PolicyDocument, *, read_buffer: float = DEFAULT_READ_BUFFER) -> None:
        self.policy = policy
        self.gate = ReadCompletionGate(read_buffer)

    @property
    def has_read_to_bottom(self) -> bool:
        return self.gate.is_open

    def can_submit(self, form: AcknowledgementForm) -> bool:
        """Whether the submit control should be enabled for *form*."""
        return self.gate.is_open and form.is_valid

    def submit(self, form: AcknowledgementForm, now: datetime | None = None) -> SignatureData | None:
        """Build the signature record, or return None when either gate is closed."""
        if not self.can_submit(form):
            log.debug(
                "Submission ignored",
                extra={"read_gate_open": self.gate.is_open, "form_valid": form.is_valid},
            )
            return None
        return SignatureData(
            employee_name=form.employee_name,
            employee_id=form.employee_id,
            timestamp=utc_timestamp(now),
        )
