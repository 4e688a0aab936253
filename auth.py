"""Authentication: JWT cookie tokens, password hashing and role gating"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

import bcrypt
import jwt
from fastapi import Depends, HTTPException, Request

from config import auth_config
from models import User
from services import get_user_by_id

logger = logging.getLogger(__name__)


def sign_token(user: User) -> str:
    """Issue a signed token for `user`"""
    payload = {
        'userId': user.id,
        'email': user.email,
        'role': user.role,
        'exp': datetime.now(timezone.utc) + timedelta(hours=auth_config.token_ttl_hours)
    }
    return jwt.encode(payload, auth_config.jwt_secret, algorithm=auth_config.jwt_algorithm)


def verify_token(token: str) -> Dict[str, Any]:
    """Decode a token, raising jwt.PyJWTError when invalid or expired"""
    return jwt.decode(token, auth_config.jwt_secret, algorithms=[auth_config.jwt_algorithm])


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=auth_config.bcrypt_rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def compare_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def get_user_from_token(token: Optional[str]) -> Optional[User]:
    if not token:
        return None
    try:
        payload = verify_token(token)
    except jwt.PyJWTError as e:
        logger.info(f"Token rejected: {e}")
        return None
    return get_user_by_id(payload.get('userId'))


def get_current_user(request: Request) -> User:
    """Dependency resolving the user behind the auth cookie"""
    user = get_user_from_token(request.cookies.get(auth_config.cookie_name))
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_roles(*roles: str):
    """Dependency factory admitting only users holding one of `roles`"""
    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning(f"User {user.email} ({user.role}) denied, requires {roles}")
            raise HTTPException(status_code=401, detail="Unauthorized")
        return user
    return dependency
