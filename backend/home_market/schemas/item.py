"""
Item schemas for request/response models
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from ..enums.item import ItemStatus


class ItemCreate(BaseModel):
    category_id: UUID
    name: str
    description: Optional[str] = None
    price: float = Field(allow_inf_nan=False)
    stock: int
    condition: Optional[str] = None
    image_urls: List[str] = Field(default_factory=list)  # Already-hosted image references


class ItemUpdate(BaseModel):
    category_id: Optional[UUID] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False)
    stock: Optional[int] = None
    condition: Optional[str] = None
    status: Optional[ItemStatus] = None


class ItemImageResponse(BaseModel):
    id: UUID
    image_url: str

    class Config:
        from_attributes = True


class ItemResponse(BaseModel):
    id: UUID
    shop_id: UUID
    category_id: Optional[UUID]
    name: str
    description: Optional[str]
    price: float
    stock: int
    condition: Optional[str]
    status: ItemStatus
    images: List[ItemImageResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ItemMessageResponse(BaseModel):
    message: str
    item: ItemResponse


class ItemPublish(BaseModel):
    category_id: UUID


class ItemFilter(BaseModel):
    """Filter parameters for marketplace browsing"""
    keyword: Optional[str] = None  # Search in name/description
    category_id: Optional[UUID] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    limit: int = Field(10, ge=1, le=100)
    offset: int = Field(0, ge=0)
