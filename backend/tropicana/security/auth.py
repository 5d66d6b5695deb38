"""
Authentication and authorization
JWT bearer tokens for back-office users and role checks on top of them
"""
import bcrypt
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional, List
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from tropicana.config import settings
from tropicana.database import get_db
from tropicana.models.users import User

logger = logging.getLogger(__name__)

ADMIN = "ADMIN"
MANAGER = "MANAGER"
STAFF = "STAFF"

security = HTTPBearer()


def get_password_hash(password: str) -> str:
    """Hash a password"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(user_id: int, roles: Optional[List[str]] = None,
                        expires_minutes: Optional[int] = None) -> str:
    """Create a JWT carrying the user id and role names"""
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user_id),
        "roles": roles or [],
        "exp": expire
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode a JWT"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the logged-in user from the bearer token"""
    payload = decode_token(credentials.credentials)

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )
    user = db.query(User).filter(User.id == user_id).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is disabled"
        )

    return user


def require_roles(*allowed_roles: str):
    """Dependency factory: the user must hold one of the roles; ADMIN always passes"""
    async def role_checker(current_user: User = Depends(get_current_user)):
        roles = set(current_user.role_names)
        if ADMIN not in roles and not roles.intersection(allowed_roles):
            logger.info(f"User {current_user.username} denied, needs one of {list(allowed_roles)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return current_user
    return role_checker


# Convenience role checkers
require_admin = require_roles(ADMIN)
require_manager = require_roles(ADMIN, MANAGER)
require_staff = require_roles(ADMIN, MANAGER, STAFF)
