"""Administrative routes for Character Table."""

from __future__ import annotations

from fastapi import APIRouter

from character_table.core.metrics import metrics_response

router = APIRouter()


@router.get("/health", summary="Liveness check")
def health() -> dict[str, bool]:
    return {"ok": True}


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


__all__ = ["router"]
