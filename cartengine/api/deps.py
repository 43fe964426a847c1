# cartengine/api/deps.py
"""
Caller identity for the HTTP layer.

Authentication happens upstream; the gateway forwards who the caller is in
the X-User-Email and X-User-Role headers and this service trusts them.
"""
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from cartengine.data.models.user import UserRole


@dataclass(frozen=True)
class Identity:
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def get_identity(
    x_user_email: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Identity:
    if not x_user_email or not x_user_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing caller identity")
    return Identity(email=x_user_email.strip().lower(), role=x_user_role.strip())


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return identity


def ensure_self_or_admin(identity: Identity, email: str) -> None:
    """Regular users may only act on their own email."""
    if identity.is_admin:
        return
    if identity.email != email.strip().lower():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
