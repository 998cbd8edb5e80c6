"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe. Returns 200 while the process is up."""
    return {"status": "ok"}


@router.get("/ready")
async def ready(req: Request) -> dict[str, object]:
    """Readiness probe: reports whether the session registry is wired."""
    registry = getattr(req.app.state, "registry", None)
    return {
        "status": "ready" if registry is not None else "starting",
        "sessions": len(registry) if registry is not None else 0,
    }
