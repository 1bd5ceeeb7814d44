"""
Lead Data Access Objects.

WHY: Contact leads and quotation requests are append-only. These DAOs
inherit the generic create/list operations and add nothing that mutates
an existing record.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.dao.base import BaseDAO
from infraworks.models.lead import ContactLead, QuotationRequest


class ContactLeadDAO(BaseDAO[ContactLead]):
    """Data Access Object for ContactLead model."""

    def __init__(self, session: AsyncSession):
        super().__init__(ContactLead, session)


class QuotationRequestDAO(BaseDAO[QuotationRequest]):
    """Data Access Object for QuotationRequest model."""

    def __init__(self, session: AsyncSession):
        super().__init__(QuotationRequest, session)
