"""Extraction gateway: image intake plus the pluggable policy extractor.

Usage::

    from policy_portal.extraction import load_image, create_extractor

    image = load_image(data_url)
    policy = await create_extractor(settings).extract(image)
"""

from __future__ import annotations

from policy_portal.extraction.factory import create_extractor
from policy_portal.extraction.gateway import LiteLLMPolicyExtractor, parse_policy_response
from policy_portal.extraction.images import ImagePolicy, PolicyImage, load_image, sniff_mime_type
from policy_portal.extraction.protocols import IPolicyExtractor

__all__ = [
    "IPolicyExtractor",
    "ImagePolicy",
    "LiteLLMPolicyExtractor",
    "PolicyImage",
    "create_extractor",
    "load_image",
    "parse_policy_response",
    "sniff_mime_type",
]
