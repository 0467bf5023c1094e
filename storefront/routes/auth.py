"""
Signup, login, logout and the password reset flow
"""
import logging
from datetime import timedelta

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.concurrency import run_in_threadpool

from ..config.database import get_database
from ..config.settings import get_settings
from ..schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SanitizedUserResponse,
    SignupRequest,
)
from ..utils.auth import clear_auth_cookie, get_current_user, set_auth_cookie
from ..utils.mail import password_reset_html, password_reset_link, send_mail
from ..utils.security import (
    create_login_token,
    create_password_reset_token,
    hash_password,
    hash_reset_token,
    reset_token_matches,
    verify_password,
)
from ..utils.serializers import sanitize_user, utcnow

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", status_code=201, response_model=SanitizedUserResponse)
async def signup(payload: SignupRequest, response: Response, db=Depends(get_database)):
    """Create an account and log it in"""
    try:
        existing_user = await db.users.find_one({"email": payload.email})
        if existing_user:
            raise HTTPException(status_code=400, detail="User already exists")

        password_hash = await run_in_threadpool(hash_password, payload.password)

        user_doc = {
            "name": payload.name,
            "email": payload.email,
            "password": password_hash,
            "is_verified": True,
            "is_admin": False,
            "created_at": utcnow()
        }

        try:
            result = await db.users.insert_one(user_doc)
        except DuplicateKeyError:
            # Lost a race against a concurrent signup with the same email
            raise HTTPException(status_code=400, detail="User already exists")

        user_doc["_id"] = result.inserted_id
        secure_info = sanitize_user(user_doc)
        set_auth_cookie(response, create_login_token(secure_info))

        logger.info(f"User signed up: {payload.email} (ID: {result.inserted_id})")
        return secure_info

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to sign up {payload.email}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error occurred during signup, please try again later")


@router.post("/login", status_code=200, response_model=SanitizedUserResponse)
async def login(payload: LoginRequest, response: Response, db=Depends(get_database)):
    """Check credentials and set the auth cookie"""
    try:
        existing_user = await db.users.find_one({"email": payload.email})

        if existing_user and await run_in_threadpool(verify_password, payload.password, existing_user["password"]):
            secure_info = sanitize_user(existing_user)
            set_auth_cookie(response, create_login_token(secure_info))
            logger.info(f"User logged in: {payload.email}")
            return secure_info

        failed = JSONResponse(status_code=404, content={"message": "Invalid Credentials"})
        clear_auth_cookie(failed)
        return failed

    except Exception as e:
        logger.error(f"Failed to log in {payload.email}: {str(e)}")
        raise HTTPException(status_code=500, detail="Some error occurred while logging in, please try again later")


@router.post("/forgot-password", status_code=200, response_model=MessageResponse)
async def forgot_password(payload: ForgotPasswordRequest, db=Depends(get_database)):
    """Mail a single-use password reset link"""
    try:
        existing_user = await db.users.find_one({"email": payload.email})
        if not existing_user:
            raise HTTPException(status_code=404, detail="Provided email does not exist")

        # Only the most recent link stays valid
        await db.password_reset_tokens.delete_many({"user": existing_user["_id"]})

        reset_token = create_password_reset_token(sanitize_user(existing_user))
        now = utcnow()
        await db.password_reset_tokens.insert_one({
            "user": existing_user["_id"],
            "token": hash_reset_token(reset_token),
            "expires_at": now + timedelta(minutes=settings.password_reset_expiration_minutes),
            "created_at": now
        })

        link = password_reset_link(str(existing_user["_id"]), reset_token)
        await send_mail(existing_user["email"], "Password Reset Link", password_reset_html(link))

        return {"message": f"Password reset link sent to {existing_user['email']}"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to send password reset mail to {payload.email}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error occurred while sending password reset mail")


@router.post("/reset-password", status_code=200, response_model=MessageResponse)
async def reset_password(payload: ResetPasswordRequest, db=Depends(get_database)):
    """Set a new password using the token from a reset link"""
    try:
        existing_user = await db.users.find_one({"_id": ObjectId(payload.user_id)})
        if not existing_user:
            raise HTTPException(status_code=404, detail="User does not exist")

        reset_row = await db.password_reset_tokens.find_one({"user": existing_user["_id"]})
        if not reset_row:
            raise HTTPException(status_code=404, detail="Reset link is not valid")

        if reset_row["expires_at"] < utcnow():
            await db.password_reset_tokens.delete_one({"_id": reset_row["_id"]})
            raise HTTPException(status_code=404, detail="Reset link has expired")

        if not reset_token_matches(payload.token, reset_row["token"]):
            raise HTTPException(status_code=404, detail="Reset link has expired")

        password_hash = await run_in_threadpool(hash_password, payload.password)
        await db.password_reset_tokens.delete_one({"_id": reset_row["_id"]})
        await db.users.update_one(
            {"_id": existing_user["_id"]},
            {"$set": {"password": password_hash}}
        )

        logger.info(f"Password reset for user {payload.user_id}")
        return {"message": "Password updated successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to reset password for user {payload.user_id}: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail="Error occurred while resetting the password, please try again later"
        )


@router.get("/check-auth", status_code=200, response_model=SanitizedUserResponse)
async def check_auth(current_user=Depends(get_current_user)):
    """Return the logged-in user"""
    return sanitize_user(current_user)


@router.get("/logout", status_code=200, response_model=MessageResponse)
async def logout(response: Response):
    """Expire the auth cookie"""
    clear_auth_cookie(response)
    return {"message": "Logout successful"}
