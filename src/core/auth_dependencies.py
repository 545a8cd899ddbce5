"""
FastAPI dependencies for JWT authentication and role checks.
"""
import jwt
from fastapi import Depends, Header, HTTPException, status
from typing import Callable, Iterable, Optional
from src.core import config


class AuthenticatedUser:
    """Caller identity extracted from a verified access token."""

    def __init__(self, user_id: str, name: str, role: str):
        self.user_id = user_id
        self.name = name
        self.role = role

    def __repr__(self):
        return f"AuthenticatedUser(user_id={self.user_id}, role={self.role})"


def verify_token(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    Verify JWT token from Authorization header.

    Args:
        authorization: Authorization header value (Bearer <token>)

    Returns:
        AuthenticatedUser built from the token claims

    Raises:
        HTTPException: If token is missing, invalid, or expired
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header"
        )

    if not authorization.startswith('Bearer '):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format"
        )

    token = authorization[7:]

    try:
        payload = jwt.decode(
            token,
            config.settings.jwt_secret,
            algorithms=[config.settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    user_id = payload.get('sub')
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    return AuthenticatedUser(
        user_id=str(user_id),
        name=payload.get('name') or str(user_id),
        role=payload.get('role', '')
    )


def require_roles(roles: Iterable[str]) -> Callable[..., AuthenticatedUser]:
    """
    Build a dependency that only admits callers holding one of the roles.

    Args:
        roles: Allowed role names

    Returns:
        FastAPI dependency returning the authenticated caller
    """
    allowed = frozenset(roles)

    def dependency(user: AuthenticatedUser = Depends(verify_token)) -> AuthenticatedUser:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return user

    return dependency
