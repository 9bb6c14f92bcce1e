"""
Item models for shop listings
"""

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel, value_enum
from ..enums.item import ItemStatus


class Item(BaseModel):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_items_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
    )

    shop_id = Column(Uuid, ForeignKey("shops.id"), nullable=False, index=True)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True)  # Null for drafts
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    condition = Column(String(50), nullable=True)
    status = Column(value_enum(ItemStatus), nullable=False, default=ItemStatus.ACTIVE, index=True)

    shop = relationship("Shop")
    category = relationship("Category")
    images = relationship("ItemImage", back_populates="item", cascade="all, delete-orphan")


class ItemImage(BaseModel):
    __tablename__ = "item_images"

    item_id = Column(Uuid, ForeignKey("items.id"), nullable=False, index=True)
    image_url = Column(Text, nullable=False)

    item = relationship("Item", back_populates="images")
