"""
Authentication Dependency for FastAPI.

The host application signs an HS256 service token per request:
- sub  → acting user id (required; "assistant" and "system" are refused)
- name → display name (optional, used when the user creates a conversation)

Secret, issuer and audience come from the app's Config (app.state.config).
Raises HTTPException 401 if unauthorized.
"""

import jwt
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from dealroom.domain.value_objects.user_id import RESERVED_USER_IDS, UserId


@dataclass
class AuthUser:
    user_id: UserId
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.user_id.value


security = HTTPBearer()


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    """
    Extract and validate the acting user from the JWT token.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    config = request.app.state.config
    try:
        claims = jwt.decode(
            credentials.credentials,
            config.SERVICE_AUTH_SECRET,
            algorithms=["HS256"],
            audience=config.SERVICE_AUTH_AUDIENCE,
            issuer=config.SERVICE_AUTH_ISSUER,
            options={"require": ["exp", "iat", "aud", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    subject = str(claims.get("sub") or "").strip()
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing required claims in token",
        )

    user_id = UserId(subject)
    if user_id in RESERVED_USER_IDS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token subject {subject} is reserved",
        )

    return AuthUser(user_id=user_id, name=claims.get("name"))
