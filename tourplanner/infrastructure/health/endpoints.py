"""Payload for GET /health."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

from tourplanner.infrastructure.health.checks import check_auth_service, check_supabase_connection
from tourplanner.infrastructure.rate_limit import get_rate_limit_mode


async def get_health_status(service_name: str = "tourplanner") -> Dict[str, Any]:
    """Probe dependencies concurrently.

    Args:
        service_name: Service name for response

    Returns:
        Dict with overall status ("healthy" only if every dependency is),
        per-dependency results and the active rate limit mode
    """
    database, auth = await asyncio.gather(check_supabase_connection(), check_auth_service())
    dependencies = {"supabase": database, "auth": auth}

    healthy = all(dep["status"] == "healthy" for dep in dependencies.values())

    return {
        "status": "healthy" if healthy else "degraded",
        "service": service_name,
        "version": "1.0.0",
        "dependencies": dependencies,
        "rate_limit": get_rate_limit_mode(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
