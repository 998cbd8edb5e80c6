"""Exception hierarchy for policy-portal."""


class PolicyPortalError(Exception):
    """Base exception for all policy-portal errors."""


class ExtractionError(PolicyPortalError):
    """Raised when a policy image could not be turned into a PolicyDocument.

    Covers provider/network failures, an absent response body and a body
    that does not conform to the policy schema.
    """


class ImageRejectedError(PolicyPortalError):
    """Raised when an uploaded payload violates the image intake policy."""


class InvalidTransitionError(PolicyPortalError):
    """Raised when a workflow operation is not allowed in the current state."""

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(f"Cannot {operation} while workflow is in state {state!r}")
        self.operation = operation
        self.state = state
