"""Acknowledgement workflow state machine and its session registry."""

from __future__ import annotations

from policy_portal.workflow.machine import EXTRACTION_FAILED_MESSAGE, PolicyWorkflow
from policy_portal.workflow.sessions import WorkflowRegistry
from policy_portal.workflow.states import WorkflowSnapshot, WorkflowState

__all__ = [
    "EXTRACTION_FAILED_MESSAGE",
    "PolicyWorkflow",
    "WorkflowRegistry",
    "WorkflowSnapshot",
    "WorkflowState",
]
