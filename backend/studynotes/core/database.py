"""
Database connections: async Supabase client setup.
"""

import logging

from supabase import AsyncClient, acreate_client

from studynotes.config import get_settings

logger = logging.getLogger(__name__)

# Singleton client (lazy init, created on first use inside the event loop)
_client: AsyncClient | None = None


async def get_supabase_client() -> AsyncClient:
    """Get the async Supabase client (singleton).

    Prefers the service_role key when configured. Every query in the services
    filters on the authenticated user's id, so RLS is not relied upon.
    """
    global _client
    if _client is None:
        settings = get_settings()
        key = settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_KEY
        _client = await acreate_client(settings.SUPABASE_URL, key)
        logger.info(f"Supabase client created for {settings.SUPABASE_URL[:40]}")
    return _client
