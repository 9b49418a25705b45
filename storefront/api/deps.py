"""
API dependencies

Identity comes from an external session provider that issues bearer JWTs;
this module only turns a verified token into a Principal and enforces the
back-office role check.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.core.config import settings
from storefront.core.database import get_db  # noqa: F401  re-exported for routes
from storefront.core.security import decode_token

# Optional bearer - doesn't fail if no Authorization header
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as asserted by the identity provider."""
    subject: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role in settings.ADMIN_ROLES


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access" or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )

    return Principal(subject=str(payload["sub"]), role=payload.get("role"))


async def get_current_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Require a back-office role"""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return principal
