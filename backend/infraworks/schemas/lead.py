"""
Pydantic schemas for the public lead endpoints.

WHAT: Contact form, quotation request and the estimate preview.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from infraworks.schemas.common import CamelModel


class ContactLeadCreate(CamelModel):
    """Contact form submission."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(default="", max_length=50)
    subject: str = Field(default="", max_length=255)
    message: str = Field(..., min_length=1, max_length=10000)


class QuotationEstimateRequest(CamelModel):
    """Inputs of the cost calculator."""

    project_type: str = Field(..., min_length=1, max_length=50)
    quality: str = Field(..., min_length=1, max_length=50)
    area: float = Field(..., gt=0)
    floors: int = Field(..., ge=1, le=200)


class QuotationEstimateResponse(CamelModel):
    estimate: float
    rate_per_sq_ft: int
    floor_multiplier: float


class QuotationRequestCreate(QuotationEstimateRequest):
    """
    Quotation request submission.

    estimate is optional; the server computes it when omitted.
    """

    location: str = Field(default="", max_length=255)
    estimate: Optional[float] = Field(default=None, ge=0)


class LeadReceipt(CamelModel):
    """Acknowledgement returned to the public site."""

    id: str
    created_at: Optional[datetime] = None
    estimate: Optional[float] = None
