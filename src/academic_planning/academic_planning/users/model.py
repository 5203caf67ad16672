from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an application account.

    Plain data object; password_hash never leaves the service layer.
    """

    user_id: int
    email: str
    name: str
    password_hash: Optional[str]
    role: Role
    created_at: Optional[datetime] = None
    is_active: bool = True

    def public_dict(self) -> Dict[str, Any]:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "createdAt": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class Identity:
    """Claims carried by a session and by the signed access token."""

    user_id: int
    email: str
    name: str
    role: Role

    def to_claims(self) -> Dict[str, Any]:
        return {"sub": self.user_id, "email": self.email, "name": self.name, "role": self.role.value}

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.user_id, "email": self.email, "name": self.name, "role": self.role.value}

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Identity":
        return cls(
            user_id=int(claims["sub"]),
            email=str(claims["email"]),
            name=str(claims.get("name") or ""),
            role=Role(claims["role"]),
        )
