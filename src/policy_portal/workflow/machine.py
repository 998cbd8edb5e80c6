"""Workflow state machine: Upload → Processing → Review → Signed.

One :class:`PolicyWorkflow` owns the current policy, the signature and the
user-facing error message for a single acknowledgement pass. Only the
operations below change that state; anything else raises
:class:`~policy_portal.exceptions.InvalidTransitionError`.

- ``upload``: UPLOAD → PROCESSING → REVIEW, or back to UPLOAD on failure
- ``use_default_template``: UPLOAD → REVIEW
- ``measure`` / ``scroll``: REVIEW → REVIEW
- ``sign``: REVIEW → SIGNED, unchanged when a gate is closed
- ``cancel``: REVIEW → UPLOAD
- ``reset``: any → UPLOAD
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING

from policy_portal.defaults import DEFAULT_POLICY
from policy_portal.exceptions import ExtractionError, ImageRejectedError, InvalidTransitionError
from policy_portal.extraction.images import ImagePolicy, load_image
from policy_portal.review.gate import DEFAULT_READ_BUFFER, AcknowledgementForm, ReviewSession
from policy_portal.workflow.states import WorkflowSnapshot, WorkflowState

if TYPE_CHECKING:
    from policy_portal.extraction.protocols import IPolicyExtractor
    from policy_portal.models import PolicyDocument, SignatureData

log = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "تعذر معالجة الصورة. يرجى التأكد من وضوح النص والمحاولة مرة أخرى."


class PolicyWorkflow:
    """Single-user acknowledgement workflow over an injectable extractor."""

    def __init__(
        self,
        extractor: IPolicyExtractor,
        *,
        workflow_id: str = "",
        image_policy: ImagePolicy | None = None,
        read_buffer: float = DEFAULT_READ_BUFFER,
        default_policy: PolicyDocument = DEFAULT_POLICY,
    ) -> None:
        self.workflow_id = workflow_id
        self._extractor = extractor
        self._image_policy = image_policy or ImagePolicy()
        self._read_buffer = read_buffer
        self._default_policy = default_policy

        self._state = WorkflowState.UPLOAD
        self._review: ReviewSession | None = None
        self._signature: SignatureData | None = None
        self._error: str | None = None
        # Bumped on reset so a late extraction result cannot resurrect a policy
        self._generation = 0

    # ── Read-only state ──────────────────────────────────────────────

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def policy(self) -> PolicyDocument | None:
        return self._review.policy if self._review else None

    @property
    def signature(self) -> SignatureData | None:
        return self._signature

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def review(self) -> ReviewSession | None:
        return self._review

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            state=self._state,
            policy=self.policy,
            signature=self._signature,
            error=self._error,
            has_read_to_bottom=bool(self._review and self._review.has_read_to_bottom),
        )

    # ── Transitions ──────────────────────────────────────────────────

    async def upload(self, payload: bytes | str, mime_type: str | None = None) -> WorkflowSnapshot:
        """Decode *payload*, extract the policy and move to REVIEW.

        Any intake or extraction failure returns the workflow to UPLOAD with
        the fixed error message; nothing is retried.
        """
        self._require("upload", WorkflowState.UPLOAD)
        self._state = WorkflowState.PROCESSING
        self._error = None
        generation = self._generation
        log.info("Processing uploaded image", extra={"workflow_id": self.workflow_id})

        try:
            image = load_image(payload, mime_type, self._image_policy)
            policy = await self._extractor.extract(image)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._state = WorkflowState.UPLOAD
            raise
        except (ImageRejectedError, ExtractionError) as exc:
            log.warning("Upload failed: %s", exc, extra={"workflow_id": self.workflow_id})
            return self._fail_upload(generation)
        except Exception:
            log.exception("Extractor raised an unexpected error", extra={"workflow_id": self.workflow_id})
            return self._fail_upload(generation)

        if generation != self._generation:
            log.info("Discarding extraction result after reset", extra={"workflow_id": self.workflow_id})
            return self.snapshot()

        self._enter_review(policy)
        return self.snapshot()

    def use_default_template(self) -> WorkflowSnapshot:
        """Skip extraction and review the built-in policy."""
        self._require("use the default template", WorkflowState.UPLOAD)
        self._error = None
        self._enter_review(self._default_policy)
        return self.snapshot()

    def measure(self, viewport_height: float, content_height: float) -> bool:
        """Report pane geometry on mount/update; returns the read-gate state."""
        review = self._require_review("measure")
        return review.gate.measure(viewport_height, content_height)

    def scroll(self, scroll_offset: float, viewport_height: float, content_height: float) -> bool:
        """Report a scroll event; returns the read-gate state."""
        review = self._require_review("scroll")
        return review.gate.observe_scroll(scroll_offset, viewport_height, content_height)

    def sign(
        self,
        employee_name: str,
        employee_id: str = "",
        agreed: bool = False,
        *,
        now: datetime | None = None,
    ) -> SignatureData | None:
        """Record the signature if both gates hold; otherwise change nothing."""
        review = self._require_review("sign")
        form = AcknowledgementForm(employee_name=employee_name, employee_id=employee_id, agreed=agreed)
        signature = review.submit(form, now=now)
        if signature is None:
            return None

        self._signature = signature
        self._state = WorkflowState.SIGNED
        log.info(
            "Policy signed",
            extra={"workflow_id": self.workflow_id, "document_title": review.policy.document_title},
        )
        return signature

    def cancel(self) -> WorkflowSnapshot:
        """Abandon the document under review without signing."""
        self._require("cancel", WorkflowState.REVIEW)
        return self.reset()

    def reset(self) -> WorkflowSnapshot:
        """Return to the initial UPLOAD configuration from any state."""
        previous = self._state
        self._generation += 1
        self._clear()
        self._error = None
        self._state = WorkflowState.UPLOAD
        log.info("Workflow reset from %s", previous.value, extra={"workflow_id": self.workflow_id})
        return self.snapshot()

    # ── Internals ────────────────────────────────────────────────────

    def _require(self, operation: str, *allowed: WorkflowState) -> None:
        if self._state not in allowed:
            raise InvalidTransitionError(operation, self._state.value)

    def _require_review(self, operation: str) -> ReviewSession:
        self._require(operation, WorkflowState.REVIEW)
        assert self._review is not None
        return self._review

    def _clear(self) -> None:
        self._review = None
        self._signature = None

    def _enter_review(self, policy: PolicyDocument) -> None:
        self._signature = None
        self._review = ReviewSession(policy, read_buffer=self._read_buffer)
        self._state = WorkflowState.REVIEW
        log.info(
            "Reviewing policy",
            extra={
                "workflow_id": self.workflow_id,
                "sections": len(policy.sections),
                "rules": policy.rule_count,
            },
        )

    def _fail_upload(self, generation: int) -> WorkflowSnapshot:
        if generation == self._generation:
            self._clear()
            self._error = EXTRACTION_FAILED_MESSAGE
            self._state = WorkflowState.UPLOAD
        return self.snapshot()
