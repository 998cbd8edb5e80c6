"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from policy_portal.core.config import AppSettings

log = logging.getLogger(__name__)

# LiteLLM model prefixes served locally without credentials
_NO_KEY_PREFIXES = ("ollama/", "ollama_chat/")


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_review(settings)
    _check_upload(settings)


def _check_api_key(settings: AppSettings) -> None:
    """The built-in gateway needs a credential unless the model runs locally."""
    extraction = settings.extraction
    if extraction.backend != "litellm":
        return
    if extraction.model.startswith(_NO_KEY_PREFIXES):
        return
    if not extraction.api_key:
        raise ValueError(
            f"POLICY_EXTRACTION_API_KEY (or GEMINI_API_KEY) is required for model "
            f"'{extraction.model}'. Set it via environment variable or secrets manager."
        )


def _check_review(settings: AppSettings) -> None:
    if settings.review.read_buffer < 0:
        raise ValueError(
            f"POLICY_REVIEW_READ_BUFFER must be >= 0, got {settings.review.read_buffer}"
        )


def _check_upload(settings: AppSettings) -> None:
    """Warn when the whitelist admits non-image types."""
    odd = [m for m in settings.upload.allowed_mime_types if not m.startswith("image/")]
    if odd:
        log.warning("POLICY_UPLOAD_ALLOWED_MIME_TYPES contains non-image types: %s", odd)
