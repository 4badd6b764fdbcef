"""
User profile models.

The profile is replaced wholesale on every successful fetch or update; the
client never patches individual fields locally.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from .access import SubscriptionStatus


@dataclass(frozen=True)
class UserProfile:
    """
    The authenticated user as returned by the backend.

    subscription_status is the only input to access control.
    """

    id: Any
    """Backend identifier (opaque)."""

    email: str
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    phone: str = ""

    subscription_status: Optional[SubscriptionStatus] = None
    """Parsed tier; None when the backend sent nothing recognizable."""

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.email

    @property
    def is_pro(self) -> bool:
        return self.subscription_status is SubscriptionStatus.ACTIVE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Create from the backend's "user" object. Null fields become ""."""
        return cls(
            id=data.get("id"),
            email=data.get("email") or "",
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            company=data.get("company") or "",
            phone=data.get("phone") or "",
            subscription_status=SubscriptionStatus.parse(data.get("subscription_status")),
        )


@dataclass(frozen=True)
class ProfileUpdate:
    """Fields the profile screen may change. Email is read-only."""

    first_name: str = ""
    last_name: str = ""
    company: str = ""
    phone: str = ""

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileUpdate":
        return cls(
            first_name=profile.first_name,
            last_name=profile.last_name,
            company=profile.company,
            phone=profile.phone,
        )

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Registration:
    """Sign-up form value."""

    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    phone: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)
