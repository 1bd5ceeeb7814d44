"""
Achievement model.

WHY: Awards and milestones shown on the public About page, maintained by
managers from the back-office.
"""

from sqlalchemy import Column, String, Text

from infraworks.models.base import Base, TimestampMixin, PrimaryKeyMixin


class Achievement(Base, PrimaryKeyMixin, TimestampMixin):
    """Award or milestone entry."""

    __tablename__ = "achievements"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column("imageUrl", String(1024), nullable=False, default="")
    date = Column(String(64), nullable=False, default="")  # free-form, e.g. "March 2024"
    created_by = Column("createdBy", String(128), nullable=True)
    updated_by = Column("updatedBy", String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<Achievement(id={self.id}, title={self.title})>"
