"""Nested pydantic-settings configuration for the application.

Each sub-config reads its own ``POLICY_<GROUP>_*`` env vars::

    export POLICY_EXTRACTION_MODEL=gemini/gemini-2.5-flash
    export POLICY_EXTRACTION_API_KEY=AIza...
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_MIME_TYPES = [
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/gif",
    "image/heic",
    "image/heif",
]


class ExtractionConfig(BaseSettings):
    """Extraction gateway configuration.

    ``backend`` is ``"litellm"`` for the built-in gateway or a dotted path
    ``package.module:Class`` for an external one. The API key is also read
    from ``GEMINI_API_KEY``.
    """

    model_config = {"env_prefix": "POLICY_EXTRACTION_"}

    backend: str = "litellm"
    model: str = "gemini/gemini-2.5-flash"
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "api_key",
            "POLICY_EXTRACTION_API_KEY",
            "GEMINI_API_KEY",
        ),
    )
    temperature: float = 0.0
    timeout: Optional[float] = None


class UploadConfig(BaseSettings):
    """Image intake policy.

    Env vars use ``POLICY_UPLOAD_`` prefix.
    """

    model_config = {"env_prefix": "POLICY_UPLOAD_"}

    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    allowed_mime_types: list[str] = Field(default_factory=lambda: list(DEFAULT_MIME_TYPES))


class ReviewConfig(BaseSettings):
    """Read-completion gate configuration.

    Env vars use ``POLICY_REVIEW_`` prefix.
    """

    model_config = {"env_prefix": "POLICY_REVIEW_"}

    read_buffer: float = 50.0


class PresentationConfig(BaseSettings):
    """Page and certificate rendering.

    Env vars use ``POLICY_PRESENTATION_`` prefix. ``timezone`` is an IANA
    name; empty means the server's local zone.
    """

    model_config = {"env_prefix": "POLICY_PRESENTATION_"}

    portal_name: str = "بوابة السياسات"
    company_name: str = "Global Network"
    date_format: str = "%d/%m/%Y"
    timezone: str = ""


class SessionConfig(BaseSettings):
    """In-memory session registry.

    Env vars use ``POLICY_SESSION_`` prefix.
    """

    model_config = {"env_prefix": "POLICY_SESSION_"}

    max_sessions: int = Field(default=256, ge=1)


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``POLICY_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "POLICY_OBSERVABILITY_"}

    service_name: str = "policy-portal"
    log_level: str = "INFO"


class APIConfig(BaseSettings):
    """HTTP server configuration.

    Env vars use ``POLICY_API_`` prefix.
    """

    model_config = {"env_prefix": "POLICY_API_"}

    title: str = "Policy Portal"
    description: str = "Policy image extraction, review and employee acknowledgement"
    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    extraction: ExtractionConfig = ExtractionConfig()
    upload: UploadConfig = UploadConfig()
    review: ReviewConfig = ReviewConfig()
    presentation: PresentationConfig = PresentationConfig()
    session: SessionConfig = SessionConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    api: APIConfig = APIConfig()
