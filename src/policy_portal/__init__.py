"""policy-portal: turn a policy image into a reviewable document and collect signed acknowledgements.

Usage::

    from policy_portal import (
        AppSettings,
        PolicyDocument, PolicySection, SignatureData,
        PolicyWorkflow, WorkflowState,
        LiteLLMPolicyExtractor, create_extractor,
    )
"""

from __future__ import annotations

from policy_portal.core.config import AppSettings
from policy_portal.defaults import DEFAULT_POLICY
from policy_portal.exceptions import (
    ExtractionError,
    ImageRejectedError,
    InvalidTransitionError,
    PolicyPortalError,
)
from policy_portal.extraction import (
    IPolicyExtractor,
    LiteLLMPolicyExtractor,
    PolicyImage,
    create_extractor,
    load_image,
)
from policy_portal.models import PolicyDocument, PolicySection, SignatureData
from policy_portal.review import AcknowledgementForm, ReadCompletionGate, ReviewSession
from policy_portal.workflow import PolicyWorkflow, WorkflowRegistry, WorkflowSnapshot, WorkflowState

__all__ = [
    "AppSettings",
    "DEFAULT_POLICY",
    "PolicyDocument",
    "PolicySection",
    "SignatureData",
    "PolicyImage",
    "load_image",
    "IPolicyExtractor",
    "LiteLLMPolicyExtractor",
    "create_extractor",
    "AcknowledgementForm",
    "ReadCompletionGate",
    "ReviewSession",
    "PolicyWorkflow",
    "WorkflowRegistry",
    "WorkflowSnapshot",
    "WorkflowState",
    "PolicyPortalError",
    "ExtractionError",
    "ImageRejectedError",
    "InvalidTransitionError",
]
