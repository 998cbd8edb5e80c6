"""Browser entry points: one page per session, rendered for its current state."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from policy_portal.presentation.pages import render_page

router = APIRouter(tags=["pages"], include_in_schema=False)


@router.get("/")
async def index(req: Request) -> RedirectResponse:
    """Start a fresh workflow and send the browser to its page."""
    session_id, _ = req.app.state.registry.create()
    return RedirectResponse(url=f"/sessions/{session_id}", status_code=303)


@router.get("/sessions/{session_id}", response_model=None)
async def session_page(session_id: str, req: Request) -> HTMLResponse | RedirectResponse:
    registry = req.app.state.registry
    if session_id not in registry:
        # Sessions live in memory only; after a restart start over
        return RedirectResponse(url="/", status_code=303)
    workflow = registry.get(session_id)
    html = render_page(workflow.snapshot(), session_id, req.app.state.settings.presentation)
    return HTMLResponse(html)
