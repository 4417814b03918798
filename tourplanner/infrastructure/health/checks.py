"""Dependency checks for /health.

Each check makes one cheap call with a short timeout and reports
"healthy", "unconfigured", "timeout" or "unavailable".
"""

import asyncio
from typing import Any, Callable, Dict

from tourplanner.infrastructure.database import SupabaseClient


async def _check(call: Callable[[], Any], timeout: float) -> Dict[str, Any]:
    client = SupabaseClient()
    if not client.is_configured():
        return {"status": "unconfigured", "error": "Supabase credentials not set"}

    try:
        await asyncio.wait_for(asyncio.to_thread(call, client.client), timeout=timeout)
    except asyncio.TimeoutError:
        return {"status": "timeout", "error": f"Request timed out after {timeout:g}s"}
    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}

    return {"status": "healthy"}


async def check_supabase_connection(timeout: float = 2.0) -> Dict[str, Any]:
    """Read one row id from the profiles table."""
    return await _check(
        lambda supabase: supabase.table("profiles").select("id").limit(1).execute(),
        timeout,
    )


async def check_auth_service(timeout: float = 2.0) -> Dict[str, Any]:
    """List a single user through the auth admin API."""
    return await _check(
        lambda supabase: supabase.auth.admin.list_users(page=1, per_page=1),
        timeout,
    )
