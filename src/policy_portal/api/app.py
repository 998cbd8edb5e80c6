"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncGenerator

from fastapi import FastAPI

from policy_portal.api.middleware.error_handler import register_error_handlers
from policy_portal.api.routes import health, pages, sessions
from policy_portal.core.config import APIConfig, AppSettings
from policy_portal.core.logging_config import setup_logging
from policy_portal.core.startup_checks import validate_settings
from policy_portal.extraction.factory import create_extractor
from policy_portal.extraction.images import ImagePolicy
from policy_portal.workflow.machine import PolicyWorkflow
from policy_portal.workflow.sessions import WorkflowRegistry

if TYPE_CHECKING:
    from policy_portal.extraction.protocols import IPolicyExtractor

log = logging.getLogger(__name__)


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("policy-portal")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


def build_registry(settings: AppSettings, extractor: IPolicyExtractor) -> WorkflowRegistry:
    """Session registry whose workflows share one extractor and intake policy."""
    image_policy = ImagePolicy.from_config(settings.upload)

    def _new_workflow(session_id: str) -> PolicyWorkflow:
        return PolicyWorkflow(
            extractor,
            workflow_id=session_id,
            image_policy=image_policy,
            read_buffer=settings.review.read_buffer,
        )

    return WorkflowRegistry(_new_workflow, max_sessions=settings.session.max_sessions)


def create_app(
    settings: AppSettings | None = None,
    extractor: IPolicyExtractor | None = None,
) -> FastAPI:
    """Build the application.

    Settings are read from the environment at startup unless given. When no
    *extractor* is injected the one named by ``POLICY_EXTRACTION_BACKEND``
    is created after the startup checks pass.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application startup/shutdown lifecycle."""
        resolved = settings or AppSettings()
        setup_logging(resolved.observability)

        backend = extractor
        if backend is None:
            validate_settings(resolved)
            backend = create_extractor(resolved)

        app.state.settings = resolved
        app.state.extractor = backend
        app.state.registry = build_registry(resolved, backend)
        log.info("Policy portal ready")
        yield
        log.info("Discarding %d in-memory sessions", len(app.state.registry))

    api_config = settings.api if settings else APIConfig()
    app = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan,
    )
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(pages.router)
    app.include_router(sessions.router, prefix="/api")
    return app


app = create_app()
