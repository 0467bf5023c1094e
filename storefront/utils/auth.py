"""
Cookie handling and FastAPI dependencies for authenticated routes
"""
import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import Cookie, Depends, HTTPException, Response
from jose import ExpiredSignatureError, JWTError
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..config.database import get_database
from ..config.settings import get_settings
from .security import LOGIN_TOKEN, decode_token

logger = logging.getLogger(__name__)
settings = get_settings()

TOKEN_COOKIE = "token"


def _cookie_options() -> Dict[str, Any]:
    return {
        "httponly": True,
        "secure": settings.production,
        "samesite": "none" if settings.production else "lax",
    }


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.cookie_expiration_days * 24 * 60 * 60,
        **_cookie_options(),
    )


def clear_auth_cookie(response: Response) -> None:
    response.set_cookie(TOKEN_COOKIE, "", max_age=0, **_cookie_options())


async def get_current_user(
    token: Optional[str] = Cookie(None),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> Dict[str, Any]:
    """
    Resolve the user behind the auth cookie

    Returns:
        The user document as stored in the database

    Raises:
        HTTPException: 401 if the cookie is missing, expired, invalid or
            refers to a user that no longer exists
    """
    if not token:
        raise HTTPException(status_code=401, detail="Token missing, please login again")

    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired, please login again")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid Token, please login again")

    if payload.get("type") != LOGIN_TOKEN:
        raise HTTPException(status_code=401, detail="Invalid Token, please login again")

    user_id = payload.get("_id")
    if not user_id or not ObjectId.is_valid(user_id):
        raise HTTPException(status_code=401, detail="Invalid Token, please login again")

    user = await db.users.find_one({"_id": ObjectId(user_id)})
    if not user:
        logger.info(f"Token presented for missing user {user_id}")
        raise HTTPException(status_code=401, detail="Invalid Token, please login again")

    return user


async def require_admin(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if not current_user.get("is_admin"):
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return current_user
