"""
Offer schemas for request/response models
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from ..enums.offer import OfferStatus
from .item import ItemResponse


class OfferCreate(BaseModel):
    seller_id: Optional[str] = None  # Omit for an open offer
    item_name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    expected_price: float = Field(allow_inf_nan=False)
    condition: str
    location: Optional[str] = None


class OfferAccept(BaseModel):
    agreed_price: float = Field(allow_inf_nan=False)


class OfferResponse(BaseModel):
    id: UUID
    giver_id: UUID
    seller_id: Optional[UUID]
    item_name: str
    description: Optional[str]
    image_url: Optional[str]
    expected_price: float
    agreed_price: Optional[float]
    condition: str
    location: Optional[str]
    status: OfferStatus
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class OfferMessageResponse(BaseModel):
    message: str
    offer: OfferResponse


class OfferListResponse(BaseModel):
    offers: List[OfferResponse]


class OfferAcceptResponse(BaseModel):
    message: str
    offer: OfferResponse
    draft_item: Optional[ItemResponse] = None
    warning: Optional[str] = None
