import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from .config import JWT_ALGORITHM, SECRET_KEY
from .database import get_db
from .models import User, UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict:
    """Verify an HS256 access token and return its claims"""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Expired access token presented")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please log in again.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Access token rejected: {e}")
        raise HTTPException(status_code=401, detail="Not authorized to access this route") from e


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the user named by the bearer token's `id` claim"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    payload = decode_access_token(credentials.credentials)

    user_id = payload.get("id")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError) as e:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims") from e

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Token references unknown user {user_id}")
        raise HTTPException(status_code=401, detail="Not authorized to access this route")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


def require_role(*roles: UserRole):
    """
    Dependency factory restricting a route to the given roles.

    Usage: `current_user: User = Depends(require_role(UserRole.CLIENT))`
    """
    allowed = {role.value for role in roles}

    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(f"⚠️ User {user.id} with role {user.role} denied; requires {sorted(allowed)}")
            raise HTTPException(status_code=403, detail="User role not authorized to access this route")
        return user

    return checker
