"""Shared API dependencies."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_access_token
from app.db.session import AsyncSessionLocal, get_db
from app.services.ledger import SlotInventoryLedger

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session(session: AsyncSession = Depends(get_db)) -> AsyncSession:
    """Request-scoped session for plain reads and writes."""
    return session


@lru_cache
def get_ledger() -> SlotInventoryLedger:
    """Process-wide ledger; its per-lot locks must be shared by all requests."""
    return SlotInventoryLedger(AsyncSessionLocal)


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a verified bearer token."""

    id: UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(credentials.credentials)
        return CurrentUser(id=UUID(claims["sub"]), role=claims.get("role", "driver"))
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalid or expired",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: insufficient role",
        )
    return user
