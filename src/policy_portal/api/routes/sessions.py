"""Workflow endpoints: one route per state-machine transition."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field

from policy_portal.models import PolicyDocument, SignatureData
from policy_portal.presentation.views import build_certificate
from policy_portal.workflow.machine import PolicyWorkflow
from policy_portal.workflow.states import WorkflowState

log = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["workflow"])


# ── Request / response models ────────────────────────────────────────


class SnapshotResponse(BaseModel):
    """Current state of one workflow."""

    session_id: str
    state: WorkflowState
    policy: Optional[PolicyDocument] = None
    signature: Optional[SignatureData] = None
    error: Optional[str] = None
    has_read_to_bottom: bool = False


class UploadRequest(BaseModel):
    """Image as a ``data:`` URL or bare base64, as produced by FileReader."""

    image: str = Field(min_length=1)
    mime_type: Optional[str] = None


class MeasureRequest(BaseModel):
    viewport_height: float = Field(ge=0)
    content_height: float = Field(ge=0)


class ScrollRequest(MeasureRequest):
    scroll_offset: float


class SignRequest(BaseModel):
    """Acknowledgement form values; invalid combinations are ignored, not rejected."""

    employee_name: str = ""
    employee_id: str = ""
    agreed: bool = False


class CertificateResponse(BaseModel):
    employee_name: str
    employee_id: str
    document_title: str
    company_name: str
    signed_on: str
    timestamp: str


# ── Helpers ──────────────────────────────────────────────────────────


def _workflow(req: Request, session_id: str) -> PolicyWorkflow:
    return req.app.state.registry.get(session_id)


def _snapshot(session_id: str, workflow: PolicyWorkflow) -> SnapshotResponse:
    snap = workflow.snapshot()
    return SnapshotResponse(
        session_id=session_id,
        state=snap.state,
        policy=snap.policy,
        signature=snap.signature,
        error=snap.error,
        has_read_to_bottom=snap.has_read_to_bottom,
    )


# ── Routes ───────────────────────────────────────────────────────────


@router.post("", response_model=SnapshotResponse, status_code=201)
async def create_session(req: Request) -> SnapshotResponse:
    session_id, workflow = req.app.state.registry.create()
    return _snapshot(session_id, workflow)


@router.get("/{session_id}", response_model=SnapshotResponse)
async def get_session(session_id: str, req: Request) -> SnapshotResponse:
    return _snapshot(session_id, _workflow(req, session_id))


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, req: Request) -> Response:
    req.app.state.registry.discard(session_id)
    return Response(status_code=204)


@router.post("/{session_id}/upload", response_model=SnapshotResponse)
async def upload(session_id: str, request: UploadRequest, req: Request) -> SnapshotResponse:
    """Extract a policy from the uploaded image.

    Failures are not HTTP errors: the snapshot comes back in UPLOAD state
    with ``error`` set.
    """
    workflow = _workflow(req, session_id)
    await workflow.upload(request.image, request.mime_type)
    return _snapshot(session_id, workflow)


@router.post("/{session_id}/default-template", response_model=SnapshotResponse)
async def use_default_template(session_id: str, req: Request) -> SnapshotResponse:
    workflow = _workflow(req, session_id)
    workflow.use_default_template()
    return _snapshot(session_id, workflow)


@router.post("/{session_id}/measure", response_model=SnapshotResponse)
async def measure(session_id: str, request: MeasureRequest, req: Request) -> SnapshotResponse:
    workflow = _workflow(req, session_id)
    workflow.measure(request.viewport_height, request.content_height)
    return _snapshot(session_id, workflow)


@router.post("/{session_id}/scroll", response_model=SnapshotResponse)
async def scroll(session_id: str, request: ScrollRequest, req: Request) -> SnapshotResponse:
    workflow = _workflow(req, session_id)
    workflow.scroll(request.scroll_offset, request.viewport_height, request.content_height)
    return _snapshot(session_id, workflow)


@router.post("/{session_id}/sign", response_model=SnapshotResponse)
async def sign(session_id: str, request: SignRequest, req: Request) -> SnapshotResponse:
    workflow = _workflow(req, session_id)
    workflow.sign(request.employee_name, request.employee_id, request.agreed)
    return _snapshot(session_id, workflow)


@router.post("/{session_id}/cancel", response_model=SnapshotResponse)
async def cancel(session_id: str, req: Request) -> SnapshotResponse:
    workflow = _workflow(req, session_id)
    workflow.cancel()
    return _snapshot(session_id, workflow)


@router.post("/{session_id}/reset", response_model=SnapshotResponse)
async def reset(session_id: str, req: Request) -> SnapshotResponse:
    workflow = _workflow(req, session_id)
    workflow.reset()
    return _snapshot(session_id, workflow)


@router.get("/{session_id}/certificate", response_model=CertificateResponse)
async def certificate(session_id: str, req: Request) -> CertificateResponse:
    """The signed confirmation record; 404 until the workflow is SIGNED."""
    workflow = _workflow(req, session_id)
    if workflow.state is not WorkflowState.SIGNED or workflow.policy is None or workflow.signature is None:
        raise HTTPException(status_code=404, detail="No signed record for this session")

    presentation = req.app.state.settings.presentation
    view = build_certificate(
        workflow.policy,
        workflow.signature,
        date_format=presentation.date_format,
        tz_name=presentation.timezone,
    )
    return CertificateResponse(
        employee_name=view.employee_name,
        employee_id=view.employee_id,
        document_title=view.document_title,
        company_name=view.company_name,
        signed_on=view.signed_on,
        timestamp=view.timestamp,
    )
