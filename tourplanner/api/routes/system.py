"""System routes."""

from fastapi import APIRouter

from tourplanner.infrastructure.health import get_health_status

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check():
    """Health check with Supabase testing. Returns service status, version and dependency health."""
    return await get_health_status()
