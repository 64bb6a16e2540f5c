"""
Security utilities: verification of Supabase access tokens.

Sign-up and sign-in happen in Supabase Auth; this service only checks the
JWT it issues and reads the user id from it.
"""

from jose import jwt, JWTError

from studynotes.config import get_settings


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a Supabase JWT. Returns payload or None if invalid."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
        return payload
    except JWTError:
        return None
