"""Tests for the Upload → Processing → Review → Signed state machine."""

from __future__ import annotations

import asyncio

import pytest

from policy_portal.defaults import DEFAULT_POLICY
from policy_portal.exceptions import ExtractionError, InvalidTransitionError
from policy_portal.extraction.images import ImagePolicy
from policy_portal.models import PolicyDocument
from policy_portal.workflow.machine import EXTRACTION_FAILED_MESSAGE, PolicyWorkflow
from policy_portal.workflow.states import WorkflowState
from tests.fakes.fake_extractor import FakePolicyExtractor, GatedPolicyExtractor


def _assert_initial(workflow: PolicyWorkflow) -> None:
    assert workflow.state is WorkflowState.UPLOAD
    assert workflow.policy is None
    assert workflow.signature is None
    assert workflow.error is None


async def _reviewing(workflow: PolicyWorkflow, png_data_url: str) -> PolicyWorkflow:
    await workflow.upload(png_data_url)
    assert workflow.state is WorkflowState.REVIEW
    return workflow


class TestInitialState:
    def test_starts_in_upload(self, fake_extractor: FakePolicyExtractor) -> None:
        _assert_initial(PolicyWorkflow(fake_extractor))


class TestUpload:
    @pytest.mark.asyncio
    async def test_successful_upload_enters_review(
        self, fake_extractor: FakePolicyExtractor, sample_policy: PolicyDocument, png_data_url: str
    ) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        snap = await workflow.upload(png_data_url)

        assert snap.state is WorkflowState.REVIEW
        assert snap.policy == sample_policy
        assert snap.error is None
        assert snap.has_read_to_bottom is False
        assert len(fake_extractor.calls) == 1
        assert fake_extractor.calls[0].mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_accepts_raw_bytes(self, fake_extractor: FakePolicyExtractor, png_bytes: bytes) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        await workflow.upload(png_bytes)
        assert workflow.state is WorkflowState.REVIEW
        assert fake_extractor.calls[0].data == png_bytes

    @pytest.mark.asyncio
    async def test_extraction_failure_returns_to_upload_with_error(
        self, sample_policy: PolicyDocument, png_data_url: str
    ) -> None:
        extractor = FakePolicyExtractor(policy=sample_policy, error=ExtractionError("boom"))
        workflow = PolicyWorkflow(extractor)

        snap = await workflow.upload(png_data_url)

        assert snap.state is WorkflowState.UPLOAD
        assert snap.policy is None
        assert snap.signature is None
        assert snap.error == EXTRACTION_FAILED_MESSAGE
        assert snap.error

    @pytest.mark.asyncio
    async def test_unexpected_extractor_error_is_normalized(
        self, sample_policy: PolicyDocument, png_data_url: str
    ) -> None:
        extractor = FakePolicyExtractor(policy=sample_policy, error=RuntimeError("socket closed"))
        workflow = PolicyWorkflow(extractor)

        snap = await workflow.upload(png_data_url)

        assert snap.state is WorkflowState.UPLOAD
        assert snap.error == EXTRACTION_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_successful_retry_clears_error(self, sample_policy: PolicyDocument, png_data_url: str) -> None:
        extractor = FakePolicyExtractor(policy=sample_policy, error=ExtractionError("boom"))
        workflow = PolicyWorkflow(extractor)
        await workflow.upload(png_data_url)
        assert workflow.error

        extractor.fail_with(None)
        snap = await workflow.upload(png_data_url)

        assert snap.state is WorkflowState.REVIEW
        assert snap.error is None
        assert len(extractor.calls) == 2

    @pytest.mark.asyncio
    async def test_rejected_image_skips_extractor(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        snap = await workflow.upload("data:text/plain;base64,aGVsbG8=")

        assert snap.state is WorkflowState.UPLOAD
        assert snap.error == EXTRACTION_FAILED_MESSAGE
        assert fake_extractor.calls == []

    @pytest.mark.asyncio
    async def test_oversized_image_skips_extractor(self, fake_extractor: FakePolicyExtractor, png_bytes: bytes) -> None:
        workflow = PolicyWorkflow(fake_extractor, image_policy=ImagePolicy(max_bytes=8))
        snap = await workflow.upload(png_bytes)

        assert snap.error == EXTRACTION_FAILED_MESSAGE
        assert fake_extractor.calls == []

    @pytest.mark.asyncio
    async def test_processing_state_while_extracting(self, sample_policy: PolicyDocument, png_data_url: str) -> None:
        extractor = GatedPolicyExtractor(policy=sample_policy)
        workflow = PolicyWorkflow(extractor)

        task = asyncio.create_task(workflow.upload(png_data_url))
        await extractor.started.wait()
        assert workflow.state is WorkflowState.PROCESSING

        with pytest.raises(InvalidTransitionError):
            await workflow.upload(png_data_url)
        with pytest.raises(InvalidTransitionError):
            workflow.use_default_template()

        extractor.release()
        snap = await task
        assert snap.state is WorkflowState.REVIEW

    @pytest.mark.asyncio
    async def test_reset_during_processing_discards_late_result(
        self, sample_policy: PolicyDocument, png_data_url: str
    ) -> None:
        extractor = GatedPolicyExtractor(policy=sample_policy)
        workflow = PolicyWorkflow(extractor)

        task = asyncio.create_task(workflow.upload(png_data_url))
        await extractor.started.wait()
        workflow.reset()
        extractor.release()
        await task

        _assert_initial(workflow)

    @pytest.mark.asyncio
    async def test_reset_during_processing_discards_late_failure(
        self, sample_policy: PolicyDocument, png_data_url: str
    ) -> None:
        extractor = GatedPolicyExtractor(policy=sample_policy, error=ExtractionError("late"))
        workflow = PolicyWorkflow(extractor)

        task = asyncio.create_task(workflow.upload(png_data_url))
        await extractor.started.wait()
        workflow.reset()
        extractor.release()
        await task

        _assert_initial(workflow)


class TestDefaultTemplate:
    def test_enters_review_without_extraction(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        snap = workflow.use_default_template()

        assert snap.state is WorkflowState.REVIEW
        assert snap.policy == DEFAULT_POLICY
        assert fake_extractor.calls == []

    @pytest.mark.asyncio
    async def test_clears_previous_error(self, sample_policy: PolicyDocument, png_data_url: str) -> None:
        workflow = PolicyWorkflow(FakePolicyExtractor(policy=sample_policy, error=ExtractionError("x")))
        await workflow.upload(png_data_url)
        assert workflow.error

        workflow.use_default_template()
        assert workflow.error is None

    def test_custom_default_policy(self, fake_extractor: FakePolicyExtractor, sample_policy: PolicyDocument) -> None:
        workflow = PolicyWorkflow(fake_extractor, default_policy=sample_policy)
        assert workflow.use_default_template().policy == sample_policy

    def test_not_allowed_in_review(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        with pytest.raises(InvalidTransitionError):
            workflow.use_default_template()


class TestSigning:
    @pytest.mark.asyncio
    async def test_sign_before_read_is_noop(self, fake_extractor: FakePolicyExtractor, png_data_url: str) -> None:
        workflow = await _reviewing(PolicyWorkflow(fake_extractor), png_data_url)
        workflow.measure(viewport_height=600, content_height=3000)

        assert workflow.sign("Sara", "", agreed=True) is None
        assert workflow.state is WorkflowState.REVIEW
        assert workflow.signature is None

    @pytest.mark.asyncio
    async def test_invalid_form_is_noop(self, fake_extractor: FakePolicyExtractor, png_data_url: str) -> None:
        workflow = await _reviewing(PolicyWorkflow(fake_extractor), png_data_url)
        workflow.measure(600, 300)

        assert workflow.sign("", "E-1", agreed=True) is None
        assert workflow.sign("Sara", "E-1", agreed=False) is None
        assert workflow.state is WorkflowState.REVIEW
        assert workflow.error is None

    @pytest.mark.asyncio
    async def test_sign_after_scroll(self, fake_extractor: FakePolicyExtractor, png_data_url: str) -> None:
        workflow = await _reviewing(PolicyWorkflow(fake_extractor), png_data_url)
        assert workflow.measure(600, 3000) is False
        assert workflow.scroll(1000, 600, 3000) is False
        assert workflow.scroll(2360, 600, 3000) is True

        sig = workflow.sign("Sara Ali", "E-42", agreed=True)

        assert sig is not None
        assert workflow.state is WorkflowState.SIGNED
        assert workflow.signature == sig
        assert sig.employee_name == "Sara Ali"

    def test_short_document_signs_without_scroll(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        workflow.measure(viewport_height=900, content_height=700)

        assert workflow.sign("Sara", agreed=True) is not None

    def test_gate_state_in_snapshot(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        assert workflow.snapshot().has_read_to_bottom is False
        workflow.scroll(0, 900, 700)
        assert workflow.snapshot().has_read_to_bottom is True

    def test_sign_not_allowed_outside_review(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        with pytest.raises(InvalidTransitionError):
            workflow.sign("Sara", agreed=True)
        with pytest.raises(InvalidTransitionError):
            workflow.scroll(0, 100, 100)

    def test_cannot_sign_twice(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        workflow.measure(900, 700)
        workflow.sign("Sara", agreed=True)
        with pytest.raises(InvalidTransitionError):
            workflow.sign("Sara", agreed=True)

    def test_new_document_gets_fresh_gate(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        workflow.measure(900, 700)
        workflow.cancel()
        workflow.use_default_template()
        assert workflow.snapshot().has_read_to_bottom is False


class TestCancelAndReset:
    def test_cancel_from_review(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        workflow.cancel()
        _assert_initial(workflow)

    def test_cancel_not_allowed_in_upload(self, fake_extractor: FakePolicyExtractor) -> None:
        with pytest.raises(InvalidTransitionError):
            PolicyWorkflow(fake_extractor).cancel()

    def test_reset_from_signed(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        workflow.measure(900, 700)
        workflow.sign("Sara", agreed=True)
        workflow.reset()
        _assert_initial(workflow)

    def test_reset_from_review(self, fake_extractor: FakePolicyExtractor) -> None:
        workflow = PolicyWorkflow(fake_extractor)
        workflow.use_default_template()
        workflow.reset()
        _assert_initial(workflow)

    @pytest.mark.asyncio
    async def test_reset_from_upload_clears_error(self, sample_policy: PolicyDocument, png_data_url: str) -> None:
        workflow = PolicyWorkflow(FakePolicyExtractor(policy=sample_policy, error=ExtractionError("x")))
        await workflow.upload(png_data_url)
        workflow.reset()
        _assert_initial(workflow)

    def test_invalid_transition_carries_state(self, fake_extractor: FakePolicyExtractor) -> None:
        with pytest.raises(InvalidTransitionError) as excinfo:
            PolicyWorkflow(fake_extractor).cancel()
        assert excinfo.value.state == "UPLOAD"
        assert excinfo.value.operation == "cancel"
