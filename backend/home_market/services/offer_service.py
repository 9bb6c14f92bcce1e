"""
Offer engine: giver proposals, seller decisions and draft item derivation.

State machine::

    pending --accept(seller, agreed_price)--> accepted
    pending --reject(seller)--> rejected

Accepted and rejected are terminal. Transitions are conditional updates on
``status = 'pending'`` so two concurrent decisions cannot both win.
"""

import math
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import SQLAlchemyError

from ..core.logging import get_logger
from ..enums.item import ItemStatus
from ..enums.log import NotificationType, RelatedType
from ..enums.offer import OfferStatus
from ..enums.user import UserRole
from ..models.item import Item
from ..models.offer import Offer
from ..models.shop import Shop
from ..schemas.offer import OfferCreate
from .base import BaseService
from .exceptions import (
    NoShopOwned,
    NotSellerOrOwner,
    OfferNotFound,
    OfferStatusConflict,
    RoleDenied,
    StoreUnavailable,
    ValidationError,
)

logger = get_logger(__name__)

DRAFT_ITEM_FAILED_WARNING = "Offer accepted, but failed to create draft item"


@dataclass
class AcceptResult:
    offer: Offer
    draft_item: Optional[Item]
    warning: Optional[str] = None


class OfferService(BaseService):

    def create_offer(self, giver_id: UUID, role: UserRole, data: OfferCreate) -> Offer:
        if role != UserRole.GIVER:
            raise RoleDenied("Access denied: only giver role is allowed")

        seller_id = None
        if data.seller_id:
            try:
                seller_id = UUID(data.seller_id)
            except ValueError:
                raise ValidationError("Invalid seller_id format")
            seller = self.guard.resolve(seller_id)
            if seller is None or seller.role != UserRole.SELLER:
                raise ValidationError("Target seller not found")

        if not math.isfinite(data.expected_price) or data.expected_price < 0:
            raise ValidationError("Expected price must be a non-negative number")

        offer = Offer(
            giver_id=giver_id,
            seller_id=seller_id,
            item_name=data.item_name,
            description=data.description,
            image_url=data.image_url,
            expected_price=data.expected_price,
            condition=data.condition,
            location=data.location,
            status=OfferStatus.PENDING,
            created_by=str(giver_id),
        )
        self._save(offer)
        logger.info(f"Offer {offer.id} created by giver {giver_id} (seller={seller_id or 'open'})")

        if seller_id:
            self.log_sink.record_notification(
                seller_id,
                "New Offer Received",
                f"You received an offer from a giver for '{offer.item_name}'.",
                NotificationType.OFFER,
                offer.id,
            )
        return offer

    def get_my_offers(self, giver_id: UUID, role: UserRole) -> List[Offer]:
        if role != UserRole.GIVER:
            raise RoleDenied("Access denied: only giver role is allowed")
        return (
            self.db.query(Offer)
            .filter(Offer.giver_id == giver_id)
            .order_by(Offer.created_at.desc())
            .all()
        )

    def get_offers_to_seller(self, seller_id: UUID, role: UserRole) -> List[Offer]:
        """
        Seller inbox: offers addressed to this seller in any status, plus open
        offers nobody has decided on yet.
        """
        if role != UserRole.SELLER:
            raise RoleDenied("Access denied: only seller can view offers")
        self._require_shop(seller_id)

        return (
            self.db.query(Offer)
            .filter(
                or_(
                    Offer.seller_id == seller_id,
                    and_(Offer.seller_id.is_(None), Offer.status == OfferStatus.PENDING),
                )
            )
            .order_by(Offer.created_at.desc())
            .all()
        )

    def accept_offer(self, seller_id: UUID, offer_id: UUID, agreed_price: float) -> AcceptResult:
        """
        Accept a pending offer and derive a draft item in the seller's shop.

        The accept commits on its own. If the draft item cannot be stored
        afterwards the offer stays accepted and the result carries a warning
        instead of a draft item.
        """
        shop = self._require_shop(seller_id)
        offer = self._get_decidable_offer(seller_id, offer_id)
        if agreed_price is None or not math.isfinite(agreed_price) or agreed_price < 0:
            raise ValidationError("Agreed price must be a non-negative number")

        old_status = offer.status
        self._transition(offer, seller_id, OfferStatus.ACCEPTED, agreed_price=agreed_price)
        logger.info(f"Offer {offer_id} accepted by seller {seller_id} at {agreed_price}")

        draft_item = self._build_draft_item(offer, shop)
        warning = None
        try:
            self._save(draft_item)
        except StoreUnavailable:
            logger.error(f"Offer {offer_id} accepted but draft item creation failed")
            draft_item = None
            warning = DRAFT_ITEM_FAILED_WARNING

        self.log_sink.record_status_change(
            offer.id, RelatedType.OFFER, old_status, OfferStatus.ACCEPTED, seller_id,
            note=f"agreed_price={agreed_price}",
        )
        self.log_sink.record_notification(
            offer.giver_id,
            "Offer Accepted",
            f"Your offer for '{offer.item_name}' was accepted at {agreed_price:.2f}.",
            NotificationType.OFFER,
            offer.id,
        )
        return AcceptResult(offer=offer, draft_item=draft_item, warning=warning)

    def reject_offer(self, seller_id: UUID, offer_id: UUID) -> Offer:
        self._require_shop(seller_id)
        offer = self._get_decidable_offer(seller_id, offer_id)

        old_status = offer.status
        self._transition(offer, seller_id, OfferStatus.REJECTED)
        logger.info(f"Offer {offer_id} rejected by seller {seller_id}")

        self.log_sink.record_status_change(
            offer.id, RelatedType.OFFER, old_status, OfferStatus.REJECTED, seller_id,
        )
        self.log_sink.record_notification(
            offer.giver_id,
            "Offer Rejected",
            f"Your offer for '{offer.item_name}' was rejected.",
            NotificationType.OFFER,
            offer.id,
        )
        return offer

    def _require_shop(self, seller_id: UUID) -> Shop:
        shop = self.guard.shop_for(seller_id)
        if shop is None:
            raise NoShopOwned()
        return shop

    def _get_decidable_offer(self, seller_id: UUID, offer_id: UUID) -> Offer:
        offer = self.db.query(Offer).filter(Offer.id == offer_id).first()
        if offer is None:
            raise OfferNotFound()
        if offer.seller_id is not None and offer.seller_id != seller_id:
            raise NotSellerOrOwner()
        if offer.status != OfferStatus.PENDING:
            raise OfferStatusConflict(f"Offer is already {offer.status.value}")
        return offer

    def _transition(
        self,
        offer: Offer,
        seller_id: UUID,
        new_status: OfferStatus,
        agreed_price: Optional[float] = None,
    ) -> None:
        """Move a pending offer to ``new_status``; an open offer is claimed by ``seller_id``."""
        stmt = (
            update(Offer)
            .where(
                Offer.id == offer.id,
                Offer.status == OfferStatus.PENDING,
                or_(Offer.seller_id.is_(None), Offer.seller_id == seller_id),
            )
            .values(
                status=new_status,
                agreed_price=agreed_price,
                seller_id=seller_id,
                updated_by=str(seller_id),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                raise OfferStatusConflict("Offer was already decided by another request")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update offer {offer.id}: {e}", exc_info=True)
            raise StoreUnavailable() from e
        self.db.refresh(offer)

    @staticmethod
    def _build_draft_item(offer: Offer, shop: Shop) -> Item:
        return Item(
            shop_id=shop.id,
            category_id=None,
            name=offer.item_name,
            description=(
                f"Draft from offer: {offer.description or '-'}. "
                f"Condition: {offer.condition}. Original location: {offer.location or '-'}."
            ),
            price=offer.agreed_price,
            stock=1,
            condition=offer.condition,
            status=ItemStatus.DRAFT,
            created_by=str(shop.user_id),
        )
