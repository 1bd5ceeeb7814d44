"""
User profile model.

WHY: The identity provider only tells us who a principal is. The profile is
the business record (display name, role) stored against that principal id;
roles determine what the principal may change in the back-office.
"""

import enum
from sqlalchemy import Column, String

from infraworks.models.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    WHY: Roles form a total order (see ROLE_LEVELS). Authorization compares
    the integer levels, never the enum identity.
    """

    VIEWER = "viewer"
    MANAGER = "manager"
    ADMIN = "admin"


ROLE_LEVELS = {
    UserRole.VIEWER.value: 1,
    UserRole.MANAGER.value: 2,
    UserRole.ADMIN.value: 3,
}


class UserProfile(Base, TimestampMixin):
    """
    Stored profile for an authenticated principal.

    WHY: Keyed by the provider's principal id (uid) rather than a generated
    id, so resolving a caller is a single primary-key lookup. Profiles are
    never deleted.
    """

    __tablename__ = "users"

    uid = Column(String(128), primary_key=True)
    email = Column(String(255), nullable=False, default="", index=True)
    display_name = Column("displayName", String(255), nullable=False, default="")
    role = Column(String(16), nullable=False, default=UserRole.VIEWER.value)

    def __repr__(self) -> str:
        return f"<UserProfile(uid={self.uid}, email={self.email}, role={self.role})>"
