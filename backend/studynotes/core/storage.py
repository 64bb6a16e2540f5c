"""
Artifact store helpers.

The store is Supabase (PostgREST). Services build queries with the usual
`db.table(...).select(...).eq(...)` chain and hand them to `execute`, which
turns transport and PostgREST failures into `StorageError`.
"""

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError

from studynotes.core.exceptions import StorageError

logger = logging.getLogger(__name__)


async def execute(query: Any) -> Any:
    """Await a PostgREST query or RPC call.

    Returns:
        The APIResponse (with `.data` and `.count`).

    Raises:
        StorageError: If the store rejects the request or cannot be reached.
    """
    try:
        return await query.execute()
    except APIError as e:
        logger.error(f"❌ Store rejected request: {e.message} (code={e.code})")
        raise StorageError(e.message) from e
    except httpx.HTTPError as e:
        logger.error(f"❌ Store unreachable: {e}")
        raise StorageError(str(e)) from e


def first_row(response: Any) -> dict | None:
    """First row of a response, or None when the result set is empty."""
    data = response.data
    if isinstance(data, list):
        return data[0] if data else None
    return data or None
