"""
FastAPI dependency injection functions.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import AsyncClient

from studynotes.core.database import get_supabase_client
from studynotes.core.exceptions import NotAuthenticated
from studynotes.core.llm_provider import create_llm
from studynotes.core.security import decode_access_token
from studynotes.features.generation.generator import ArtifactGenerator

# Bearer token scheme for Swagger UI (missing header handled below, not by FastAPI)
bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncClient:
    """Dependency: get async Supabase client."""
    return await get_supabase_client()


def get_generator() -> ArtifactGenerator:
    """Dependency: artifact generator bound to the configured LLM."""
    return ArtifactGenerator(create_llm())


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Dependency: extract and validate user_id from the Supabase JWT.

    Returns:
        str: The user's UUID as string.

    Raises:
        NotAuthenticated: If the token is missing, invalid or expired.
    """
    if credentials is None:
        raise NotAuthenticated("Missing bearer token.")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise NotAuthenticated("Token is invalid or expired.")

    user_id = payload.get("sub")
    if not user_id:
        raise NotAuthenticated("Token does not identify a user.")

    return user_id
