"""
User service.

Keeps the app_user table in sync with the identity provider. A row is
created on a user's first sign-in and updated (keyed by open_id, the JWT
'sub' claim) on every later one. Users are never deleted here; deleting a
user cascades to their recommendation sessions in the database.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, cast

from supabase import Client

logger = logging.getLogger(__name__)

USER_TABLE = "app_user"


async def get_user_by_open_id(
    supabase_client: Client,
    open_id: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch the app_user row for an external identity.

    Args:
        supabase_client: Authenticated Supabase client
        open_id: External-provider identifier (JWT 'sub' claim)

    Returns:
        The user dict, or None if the user has never signed in
    """
    logger.debug(f"Fetching app_user for open_id={open_id}")

    result = (
        supabase_client.table(USER_TABLE)
        .select("*")
        .eq("open_id", open_id)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.info(f"No app_user found for open_id={open_id}")
        return None

    return cast(Dict[str, Any], result.data[0])


async def upsert_user(
    supabase_client: Client,
    open_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    login_method: Optional[str] = None,
    signed_in_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Create or update the app_user row for a successful sign-in.

    Only the fields that are provided are written, so a provider that omits
    the email on a later sign-in does not erase it. The role is never sent:
    the authenticated role has no write grant on app_user.role, and the
    app_user_assign_role trigger sets it from the app.owner_open_id database
    setting.

    Args:
        supabase_client: Authenticated Supabase client
        open_id: External-provider identifier (JWT 'sub' claim)
        name: Display name
        email: Email address
        login_method: Sign-in provider name
        signed_in_at: Sign-in time (defaults to now, UTC)

    Returns:
        The stored user row

    Raises:
        Exception: If the upsert returns no row
    """
    if not open_id:
        raise ValueError("open_id is required to upsert a user")

    timestamp = (signed_in_at or datetime.now(timezone.utc)).isoformat()

    user_data: Dict[str, Any] = {
        "open_id": open_id,
        "updated_at": timestamp,
        "last_signed_in": timestamp,
    }

    if name is not None:
        user_data["name"] = name
    if email is not None:
        user_data["email"] = email
    if login_method is not None:
        user_data["login_method"] = login_method

    logger.info(f"Upserting app_user for open_id={open_id} (login_method={login_method})")

    result = (
        supabase_client.table(USER_TABLE)
        .upsert(user_data, on_conflict="open_id")
        .execute()
    )

    if not result.data or len(result.data) == 0:
        raise Exception("Failed to upsert user: no data returned")

    user: Dict[str, Any] = cast(Dict[str, Any], result.data[0])
    logger.info(f"app_user {user.get('id')} signed in (open_id={open_id})")

    return user
