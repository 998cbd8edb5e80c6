"""Workflow states and the immutable snapshot exposed to views."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from policy_portal.models import PolicyDocument, SignatureData


class WorkflowState(str, Enum):
    """The four screens of the acknowledgement journey."""

    UPLOAD = "UPLOAD"
    PROCESSING = "PROCESSING"
    REVIEW = "REVIEW"
    SIGNED = "SIGNED"


@dataclass(frozen=True)
class WorkflowSnapshot:
    """Point-in-time view of a workflow's held state."""

    state: WorkflowState
    policy: Optional[PolicyDocument] = None
    signature: Optional[SignatureData] = None
    error: Optional[str] = None
    has_read_to_bottom: bool = False
