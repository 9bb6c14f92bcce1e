"""
Order schemas
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from ..enums.log import RelatedType
from ..enums.order import OrderStatus


class OrderLineCreate(BaseModel):
    item_id: UUID
    quantity: int


class OrderCreate(BaseModel):
    items: List[OrderLineCreate] = Field(default_factory=list)
    shipping_address: str
    shipping_courier: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: str  # Checked against OrderStatus by the order engine


class ShippingReceiptInput(BaseModel):
    shipping_courier: str
    shipping_receipt: str


class OrderItemResponse(BaseModel):
    id: UUID
    order_id: UUID
    item_id: UUID
    quantity: int
    price: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: UUID
    buyer_id: UUID
    shop_id: UUID
    total_price: float
    status: OrderStatus
    shipping_address: str
    shipping_courier: Optional[str]
    shipping_receipt: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class HistoryStatusResponse(BaseModel):
    id: UUID
    related_id: UUID
    related_type: RelatedType
    old_status: str
    new_status: str
    changed_by: UUID
    timestamp: datetime
    note: Optional[str]

    class Config:
        from_attributes = True


class OrderMessageResponse(BaseModel):
    message: str
    order: OrderResponse


class OrderTrackingResponse(BaseModel):
    order: OrderResponse
    order_items: List[OrderItemResponse]
    history: List[HistoryStatusResponse] = Field(default_factory=list)
