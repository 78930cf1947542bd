"""
FastAPI dependency functions for authentication.

These functions are used as FastAPI dependencies to verify tokens and
resolve the caller's identity:

- get_authenticated_user: verifies the Supabase Bearer token (ES256, JWKS)
  and returns its claims. No database access.
- get_current_user: additionally resolves the caller's app_user row, which
  owns recommendation sessions. Creates the row on first contact.

Every protected route depends on one of these. Unauthenticated callers get
a 401 before any other processing happens.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from media_recommender.config import settings
from media_recommender.db.client import get_supabase_client
from media_recommender.services.user_service import get_user_by_open_id, upsert_user

logger = logging.getLogger(__name__)

# The client caches keys and handles key rotation (cache_keys=True)
_jwks_client: PyJWKClient | None = None


@dataclass
class AuthenticatedUser:
    """
    Claims of a verified Supabase access token.

    Attributes:
        user_id: The 'sub' claim (external identity, stored as app_user.open_id)
        access_token: The full JWT (for creating authenticated Supabase clients)
        email: 'email' claim, if present
        name: Display name from user_metadata, if present
        login_method: Provider from app_metadata, if present
    """
    user_id: str
    access_token: str
    email: Optional[str] = None
    name: Optional[str] = None
    login_method: Optional[str] = None


@dataclass
class CurrentUser:
    """
    The caller's app_user row plus their token.

    Attributes:
        id: app_user.id (owner key for recommendation sessions)
        open_id: External identity
        role: 'user' or 'admin'
        access_token: The full JWT
    """
    id: int
    open_id: str
    role: str
    access_token: str


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def _extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        logger.warning("Missing Authorization header")
        raise _unauthorized("unauthorized", "Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid Authorization header format")
        raise _unauthorized("unauthorized", "Invalid Authorization header format")

    return parts[1]


def _decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a Supabase access token and return its payload.

    Raises:
        HTTPException: 401 if the token is invalid, expired, or unverifiable
    """
    try:
        jwks_client = get_jwks_client()
        signing_key = jwks_client.get_signing_key_from_jwt(token)

        return decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience="authenticated",
            issuer=settings.SUPABASE_ISSUER,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": True,
                "verify_iss": True,
            }
        )

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except Exception as e:
        logger.error(f"Unexpected error during token verification: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")


def _optional_claim(value: Any) -> Optional[str]:
    return str(value) if value else None


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None
) -> AuthenticatedUser:
    """
    Verify the Bearer token and return the caller's claims.

    Args:
        authorization: Authorization header value ("Bearer <token>")

    Returns:
        AuthenticatedUser with the 'sub' claim and the token itself

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Security:
        - The token is the ONLY source of truth for identity
        - Any user id sent in a request body is ignored
    """
    token = _extract_bearer_token(authorization)
    payload = _decode_access_token(token)

    user_id = payload.get("sub")
    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    user_metadata = payload.get("user_metadata") or {}
    app_metadata = payload.get("app_metadata") or {}

    logger.info(f"Token verified successfully for user_id={user_id}")

    return AuthenticatedUser(
        user_id=str(user_id),
        access_token=token,
        email=_optional_claim(payload.get("email")),
        name=_optional_claim(user_metadata.get("full_name") or user_metadata.get("name")),
        login_method=_optional_claim(app_metadata.get("provider")),
    )


async def get_current_user(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> CurrentUser:
    """
    Resolve the authenticated caller's app_user row.

    A caller that has a valid token but never hit /auth/sign-in gets their
    row created here, so protected operations always have an owner id.

    Raises:
        HTTPException: 401 from get_authenticated_user, 500 if the lookup fails
    """
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        user = await get_user_by_open_id(supabase_client, auth_user.user_id)
        if user is None:
            user = await upsert_user(
                supabase_client,
                open_id=auth_user.user_id,
                name=auth_user.name,
                email=auth_user.email,
                login_method=auth_user.login_method,
            )
    except Exception as e:
        logger.error(f"Failed to resolve app_user for open_id={auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "user_lookup_failed", "details": "Failed to load user record"}
        )

    return CurrentUser(
        id=int(user["id"]),
        open_id=str(user["open_id"]),
        role=str(user.get("role") or "user"),
        access_token=auth_user.access_token,
    )
