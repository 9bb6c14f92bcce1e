"""
Offer model for giver proposals
"""

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel, value_enum
from ..enums.offer import OfferStatus


class Offer(BaseModel):
    __tablename__ = "offers"
    __table_args__ = (
        CheckConstraint("expected_price >= 0", name="ck_offers_expected_price_non_negative"),
        # agreed_price is set exactly when the offer is accepted
        CheckConstraint(
            "(status = 'accepted' AND agreed_price IS NOT NULL) OR "
            "(status != 'accepted' AND agreed_price IS NULL)",
            name="ck_offers_agreed_price_status",
        ),
    )

    giver_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    # Null means an open offer
    seller_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)

    item_name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    expected_price = Column(Float, nullable=False)
    agreed_price = Column(Float, nullable=True)
    condition = Column(String(50), nullable=False)
    location = Column(String(200), nullable=True)
    status = Column(value_enum(OfferStatus), nullable=False, default=OfferStatus.PENDING, index=True)

    giver = relationship("User", foreign_keys=[giver_id])
    seller = relationship("User", foreign_keys=[seller_id])
