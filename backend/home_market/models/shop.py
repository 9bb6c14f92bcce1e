"""
Shop and category models
"""

from sqlalchemy import Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class Shop(BaseModel):
    __tablename__ = "shops"

    # One shop per seller
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    owner = relationship("User", back_populates="shop")
    categories = relationship("Category", back_populates="shop")


class Category(BaseModel):
    __tablename__ = "categories"

    shop_id = Column(Uuid, ForeignKey("shops.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)

    shop = relationship("Shop", back_populates="categories")
