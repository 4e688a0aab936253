"""API routes for login and session handling"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import logging

from auth import compare_password, get_current_user, sign_token
from config import auth_config
from models import User
from services import get_user_by_email

logger = logging.getLogger(__name__)
router = APIRouter()


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/api/auth/login", response_class=JSONResponse)
def login(credentials: LoginRequest):
    """Verify credentials and set the auth cookie"""
    try:
        user = get_user_by_email(credentials.email)
        if user is None or not compare_password(credentials.password, user.password_hash):
            logger.info(f"Failed login for {credentials.email}")
            raise HTTPException(status_code=401, detail="Invalid credentials")

        response = JSONResponse({"user": user.to_dict()})
        response.set_cookie(
            key=auth_config.cookie_name,
            value=sign_token(user),
            httponly=True,
            secure=auth_config.secure_cookie,
            samesite="strict",
            max_age=auth_config.token_ttl_hours * 3600
        )
        logger.info(f"User {user.email} logged in")
        return response
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/api/auth/logout", response_class=JSONResponse)
async def logout():
    response = JSONResponse({"success": True})
    response.delete_cookie(auth_config.cookie_name)
    return response


@router.get("/api/auth/me", response_class=JSONResponse)
async def current_user(user: User = Depends(get_current_user)):
    return {"user": user.to_dict()}
