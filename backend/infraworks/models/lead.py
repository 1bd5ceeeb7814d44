"""
Lead models.

WHAT: Contact-form leads and quotation requests from the public site.

WHY: Both are append-only sinks reviewed by the sales team. There is no
update or delete path, so they only carry a creation timestamp.
"""

from sqlalchemy import Column, Float, Integer, String, Text

from infraworks.models.base import Base, CreatedAtMixin, PrimaryKeyMixin


class ContactLead(Base, PrimaryKeyMixin, CreatedAtMixin):
    """Contact form submission."""

    __tablename__ = "contactLeads"

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False, default="")
    subject = Column(String(255), nullable=False, default="")
    message = Column(Text, nullable=False, default="")


class QuotationRequest(Base, PrimaryKeyMixin, CreatedAtMixin):
    """
    Quotation calculator submission.

    WHY: The estimate is stored with the request so sales sees the same
    number the visitor saw, even if the rate table changes later.
    """

    __tablename__ = "quotationRequests"

    project_type = Column("projectType", String(50), nullable=False)
    area = Column(Float, nullable=False)
    floors = Column(Integer, nullable=False)
    location = Column(String(255), nullable=False, default="")
    quality = Column(String(50), nullable=False)
    estimate = Column(Float, nullable=False)
