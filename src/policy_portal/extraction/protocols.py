"""Extraction gateway protocol every provider implements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from policy_portal.extraction.images import PolicyImage
    from policy_portal.models import PolicyDocument


@runtime_checkable
class IPolicyExtractor(Protocol):
    """Converts a policy image into a structured :class:`PolicyDocument`.

    Implementations make exactly one attempt per call and normalize every
    failure into :class:`~policy_portal.exceptions.ExtractionError`.
    """

    async def extract(self, image: PolicyImage) -> PolicyDocument:
        """Read, structure and return the policy shown in *image*."""
        ...
