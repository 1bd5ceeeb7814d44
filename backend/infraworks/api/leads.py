"""
Public lead capture API endpoints.

WHAT: Contact form, quotation request, and the calculator preview.

WHY: These are the only public write endpoints. They append and never
read back, so there is nothing to protect beyond body validation.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.db.session import get_db
from infraworks.schemas.lead import (
    ContactLeadCreate,
    LeadReceipt,
    QuotationEstimateRequest,
    QuotationEstimateResponse,
    QuotationRequestCreate,
)
from infraworks.services.lead_service import LeadService
from infraworks.services.quotation import estimate_cost


router = APIRouter(prefix="/leads", tags=["leads"])


@router.post(
    "/contact",
    response_model=LeadReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Submit contact form",
)
async def submit_contact(
    data: ContactLeadCreate,
    db: AsyncSession = Depends(get_db),
) -> LeadReceipt:
    lead = await LeadService(db).record_contact_lead(data.model_dump(mode="json"))
    return LeadReceipt(id=lead.id, created_at=lead.created_at)


@router.post(
    "/quotation",
    response_model=LeadReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Submit quotation request",
)
async def submit_quotation(
    data: QuotationRequestCreate,
    db: AsyncSession = Depends(get_db),
) -> LeadReceipt:
    """
    Record a quotation request.

    WHAT: The stored estimate is the client's when sent, otherwise computed
    here. The receipt echoes it back.
    """
    request = await LeadService(db).record_quotation_request(data.model_dump())
    return LeadReceipt(id=request.id, created_at=request.created_at, estimate=request.estimate)


@router.post(
    "/quotation/estimate",
    response_model=QuotationEstimateResponse,
    summary="Preview cost estimate",
    description="Compute the estimate without recording anything",
)
async def preview_estimate(data: QuotationEstimateRequest) -> QuotationEstimateResponse:
    result = estimate_cost(data.project_type, data.quality, data.area, data.floors)
    return QuotationEstimateResponse(
        estimate=result.estimate,
        rate_per_sq_ft=result.rate_per_sq_ft,
        floor_multiplier=result.floor_multiplier,
    )
