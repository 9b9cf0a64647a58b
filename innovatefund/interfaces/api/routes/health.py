"""Liveness endpoint."""

from fastapi import APIRouter

from innovatefund.utils import now_in_app_timezone

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "OK", "timestamp": now_in_app_timezone().isoformat()}
