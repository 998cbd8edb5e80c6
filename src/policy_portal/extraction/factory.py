"""Extraction gateway factory: resolves the provider from config."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from policy_portal.extraction.gateway import LiteLLMPolicyExtractor
from policy_portal.extraction.protocols import IPolicyExtractor

if TYPE_CHECKING:
    from policy_portal.core.config import AppSettings

log = logging.getLogger(__name__)


def _import_dotted_path(spec: str) -> Any:
    """Import ``package.module:Attr`` (or ``package.module.Attr``)."""
    if ":" in spec:
        module_path, attr = spec.split(":", 1)
    else:
        module_path, _, attr = spec.rpartition(".")
    if not module_path or not attr:
        raise ImportError(f"Invalid dotted path: {spec!r}")
    module = importlib.import_module(module_path)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ImportError(f"{module_path!r} has no attribute {attr!r}") from exc


def create_extractor(settings: AppSettings) -> IPolicyExtractor:
    """Create the extraction gateway selected by ``settings.extraction.backend``.

    ``"litellm"`` returns the built-in :class:`LiteLLMPolicyExtractor`. A
    dotted path like ``mypackage.ocr:AzureExtractor`` is imported and called
    with ``settings``.

    Raises:
        ImportError: If the dotted-path class cannot be found.
        TypeError: If the resolved object is not callable.
    """
    backend_spec = settings.extraction.backend

    if backend_spec == "litellm":
        log.info("Using built-in LiteLLM extractor with model %s", settings.extraction.model)
        return LiteLLMPolicyExtractor(settings.extraction)

    log.info("Loading external extractor: %s", backend_spec)
    cls = _import_dotted_path(backend_spec)

    if not callable(cls):
        raise TypeError(
            f"Extractor backend {backend_spec!r} resolved to {cls!r}, "
            "which is not callable"
        )

    return cls(settings)
