import asyncio
import os
from typing import Optional

from fastapi import Depends, Header, HTTPException

from setup_logging_optimized import get_logger
from utils.supabase import get_supabase_client, is_supabase_configured

logger = get_logger(__name__)


async def get_auth_header(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Extract JWT token from Authorization header"""
    if authorization and authorization.startswith("Bearer "):
        return authorization.replace("Bearer ", "", 1).strip() or None
    return None


def _resolve_user_id(token: str) -> Optional[str]:
    response = get_supabase_client().auth.get_user(token)
    user = getattr(response, "user", None)
    return getattr(user, "id", None) if user else None


async def get_optional_user_id(token: Optional[str] = Depends(get_auth_header)) -> Optional[str]:
    """
    Resolve the authenticated principal, or None when there is none.

    DEV_USER_ID stands in for a real user when no token is sent or Supabase
    is not configured (local development).
    """
    dev_user_id = os.getenv("DEV_USER_ID")
    if not token or not is_supabase_configured():
        return dev_user_id or None

    try:
        return await asyncio.to_thread(_resolve_user_id, token)
    except Exception as e:
        logger.warning(f"Token verification failed: {e}")
        return None


async def get_current_user_id(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
