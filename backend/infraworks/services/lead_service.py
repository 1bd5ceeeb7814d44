"""
Lead Service.

WHAT: Records contact-form leads and quotation requests from the public
site.

WHY: Both are public, append-only sinks: no role requirement, no update or
delete path. Field presence is validated by the request schema before these
methods are called.
"""

import logging
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.dao.base import SERVER_TIMESTAMP
from infraworks.dao.lead import ContactLeadDAO, QuotationRequestDAO
from infraworks.models.lead import ContactLead, QuotationRequest
from infraworks.services.quotation import estimate_cost

logger = logging.getLogger(__name__)


class LeadService:
    """
    Service for lead capture.

    Args:
        session: Async database session
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.contact_dao = ContactLeadDAO(session)
        self.quotation_dao = QuotationRequestDAO(session)

    async def record_contact_lead(self, fields: Dict[str, Any]) -> ContactLead:
        """
        Append a contact-form lead.

        Args:
            fields: name, email, phone, subject, message

        Returns:
            Stored lead
        """
        lead = await self.contact_dao.create(**fields, created_at=SERVER_TIMESTAMP)
        logger.info("Contact lead %s recorded", lead.id)
        return lead

    async def record_quotation_request(self, fields: Dict[str, Any]) -> QuotationRequest:
        """
        Append a quotation request.

        WHAT: When the client did not send an estimate, the server computes
        it with the same rate table the calculator uses.

        Args:
            fields: project_type, area, floors, location, quality, estimate?

        Returns:
            Stored request
        """
        data = dict(fields)
        if data.get("estimate") is None:
            data["estimate"] = estimate_cost(
                data["project_type"], data["quality"], data["area"], data["floors"]
            ).estimate

        request = await self.quotation_dao.create(**data, created_at=SERVER_TIMESTAMP)
        logger.info(
            "Quotation request %s recorded (%s, %s)",
            request.id,
            request.project_type,
            request.quality,
        )
        return request
