"""
User profile routes
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

from ..config.database import get_database
from ..schemas import UpdateUserRequest, UserResponse
from ..utils.auth import get_current_user
from ..utils.dependencies import ensure_owner_or_admin, get_document_or_404, validate_object_id
from ..utils.serializers import user_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/{user_id}", status_code=200, response_model=UserResponse)
async def get_user(user_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Get a user profile by ID"""
    try:
        ensure_owner_or_admin(current_user, validate_object_id(user_id, "user"))
        user = await get_document_or_404(db, "users", user_id, "User")
        return user_profile(user)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error getting your details, please try again later")


@router.patch("/{user_id}", status_code=200, response_model=UserResponse)
async def update_user(
    user_id: str,
    user_update: UpdateUserRequest,
    current_user=Depends(get_current_user),
    db=Depends(get_database)
):
    """Update name or email of a user"""
    try:
        ensure_owner_or_admin(current_user, validate_object_id(user_id, "user"))
        user = await get_document_or_404(db, "users", user_id, "User")

        update_doc = user_update.model_dump(exclude_none=True)
        if update_doc.get("email") and update_doc["email"] != user["email"]:
            if await db.users.find_one({"email": update_doc["email"]}):
                raise HTTPException(status_code=400, detail="Email is already in use")

        if update_doc:
            try:
                await db.users.update_one({"_id": user["_id"]}, {"$set": update_doc})
            except DuplicateKeyError:
                raise HTTPException(status_code=400, detail="Email is already in use")

        updated_user = await db.users.find_one({"_id": user["_id"]})

        logger.info(f"User updated: {user_id}")
        return user_profile(updated_user)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error updating your details, please try again later")
