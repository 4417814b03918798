"""Infrastructure modules.

Components behind the request layer:
- Database: Supabase client singleton and repository pattern
- Auth: session validation against the managed auth service
- CSRF: double-submit token issue and check
- Rate Limiting: in-process fixed window counters
- Health: dependency health checks
"""
