"""Health reporting for the Supabase dependencies."""

from tourplanner.infrastructure.health.checks import check_auth_service, check_supabase_connection
from tourplanner.infrastructure.health.endpoints import get_health_status

__all__ = [
    "check_auth_service",
    "check_supabase_connection",
    "get_health_status",
]
