"""
Pydantic schemas for authentication and user profile endpoints.

WHY: Sign-in itself happens at the identity provider. These schemas cover
what the back-office adds on top: the caller's profile, admin
pre-provisioning and role changes.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from infraworks.models.user import UserRole
from infraworks.schemas.common import CamelModel


class ProfileResponse(CamelModel):
    """Stored profile of a principal."""

    uid: str
    email: str = ""
    display_name: str = ""
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SessionRequest(CamelModel):
    """
    Optional profile details sent on sign-in.

    WHY: Tokens do not always carry email/name claims. The client can send
    what the identity provider returned so a new profile is not blank.
    """

    email: Optional[EmailStr] = None
    display_name: Optional[str] = Field(default=None, max_length=255)


class ProfileCreate(CamelModel):
    """Admin pre-provisioning request."""

    uid: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    display_name: str = Field(default="", max_length=255)
    role: UserRole = UserRole.VIEWER


class RoleUpdate(CamelModel):
    """Role change request."""

    role: UserRole
