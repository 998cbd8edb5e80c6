"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from policy_portal.exceptions import InvalidTransitionError, PolicyPortalError


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(InvalidTransitionError)
    async def handle_invalid_transition(request: Request, exc: InvalidTransitionError) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={"error": str(exc), "type": "invalid_transition", "state": exc.state},
        )

    @app.exception_handler(PolicyPortalError)
    async def handle_generic_error(request: Request, exc: PolicyPortalError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc), "type": "policy_portal_error"})

    @app.exception_handler(KeyError)
    async def handle_not_found(request: Request, exc: KeyError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc), "type": "not_found"})
