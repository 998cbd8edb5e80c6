"""LiteLLM-backed extraction gateway.

Sends the policy image and instructions to a multimodal model in one
``litellm.acompletion()`` call, asking for JSON that conforms to
:data:`~policy_portal.extraction.prompts.POLICY_RESPONSE_SCHEMA`. Supports any
LiteLLM model prefix (``gemini/``, ``anthropic/``, ``openai/`` ...).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from policy_portal.exceptions import ExtractionError
from policy_portal.extraction.prompts import POLICY_RESPONSE_SCHEMA, build_messages
from policy_portal.models import PolicyDocument

if TYPE_CHECKING:
    from policy_portal.core.config import ExtractionConfig
    from policy_portal.extraction.images import PolicyImage

log = logging.getLogger(__name__)


def _strip_fences(content: str) -> str:
    start = content.find("```json")
    if start == -1:
        return content.strip()
    start += 7
    end = content.rfind("```")
    return content[start:end].strip() if end > start else content[start:].strip()


def parse_policy_response(content: str, *, today: date | None = None) -> PolicyDocument:
    """Deserialize the provider's JSON body into a :class:`PolicyDocument`.

    A missing or blank ``date`` is filled with *today*.

    Raises:
        ExtractionError: body is not JSON or does not match the schema.
    """
    try:
        policy = PolicyDocument.model_validate_json(_strip_fences(content))
    except ValidationError as exc:
        raise ExtractionError(f"Extraction response does not match the policy schema: {exc}") from exc

    if not policy.date.strip():
        policy = policy.model_copy(update={"date": (today or date.today()).isoformat()})
    return policy


class LiteLLMPolicyExtractor:
    """Single-attempt policy extraction via ``litellm.acompletion()``."""

    def __init__(self, config: ExtractionConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    def _request_kwargs(self, image: PolicyImage) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "messages": build_messages(image.to_data_url()),
            "temperature": self._config.temperature,
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": "policy_document",
                    "schema": POLICY_RESPONSE_SCHEMA,
                    "strict": True,
                },
            },
            "num_retries": 0,
        }
        if self._config.api_key:
            kwargs["api_key"] = self._config.api_key
        if self._config.timeout is not None:
            kwargs["timeout"] = self._config.timeout
        return kwargs

    async def extract(self, image: PolicyImage) -> PolicyDocument:
        """Run one extraction call. Every failure surfaces as ExtractionError."""
        from litellm import acompletion

        log.info(
            "Requesting policy extraction",
            extra={"model": self._config.model, "mime_type": image.mime_type, "bytes": image.size},
        )
        try:
            response = await acompletion(**self._request_kwargs(image))
        except Exception as exc:
            log.warning("Extraction request failed: %s", exc)
            raise ExtractionError("Failed to extract policy text. Please try again.") from exc

        content = _response_text(response)
        if not content:
            raise ExtractionError("No response text from extraction service")

        policy = parse_policy_response(content)
        log.info(
            "Policy extracted",
            extra={"sections": len(policy.sections), "rules": policy.rule_count},
        )
        return policy


def _response_text(response: Any) -> str:
    try:
        return response.choices[0].message.content or ""
    except (AttributeError, IndexError):
        return ""
