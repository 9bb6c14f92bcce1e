"""
Order and order line models
"""

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel, value_enum
from ..enums.order import OrderStatus


class Order(BaseModel):
    __tablename__ = "orders"

    buyer_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    shop_id = Column(Uuid, ForeignKey("shops.id"), nullable=False, index=True)

    # Snapshot of line prices at creation time
    total_price = Column(Float, nullable=False)
    status = Column(value_enum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)

    shipping_address = Column(Text, nullable=False)
    shipping_courier = Column(String(100), nullable=True)
    shipping_receipt = Column(String(100), nullable=True)

    buyer = relationship("User")
    shop = relationship("Shop")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(BaseModel):
    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),)

    order_id = Column(Uuid, ForeignKey("orders.id"), nullable=False, index=True)
    item_id = Column(Uuid, ForeignKey("items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)  # Unit price snapshot

    order = relationship("Order", back_populates="items")
    item = relationship("Item")
