"""
Catalog operations around the lifecycle engines: marketplace browsing,
the seller's own listings, draft publication and admin moderation.

Items are never hard-deleted; delete and moderation move them to inactive.
"""

import math
from typing import List
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from ..core.logging import get_logger
from ..enums.item import ItemStatus
from ..enums.log import RelatedType
from ..enums.user import UserRole
from ..models.item import Item, ItemImage
from ..models.shop import Shop
from ..schemas.item import ItemCreate, ItemFilter, ItemUpdate
from .base import BaseService
from .exceptions import (
    CategoryNotOwned,
    ItemNotFound,
    NoShopOwned,
    RoleDenied,
    StateConflict,
    Unauthorized,
    ValidationError,
)

logger = get_logger(__name__)

# Columns that may not be cleared by an update
REQUIRED_ITEM_FIELDS = ("name", "price", "stock")


def _check_price_and_stock(price=None, stock=None) -> None:
    if price is not None and (not math.isfinite(price) or price < 0):
        raise ValidationError("Price must be a non-negative number")
    if stock is not None and stock < 0:
        raise ValidationError("Stock cannot be negative")


class ItemService(BaseService):

    def list_market_items(self, item_filter: ItemFilter) -> List[Item]:
        query = (
            self.db.query(Item)
            .options(selectinload(Item.images))
            .filter(Item.status == ItemStatus.ACTIVE)
        )

        if item_filter.keyword:
            search_term = f"%{item_filter.keyword}%"
            query = query.filter(or_(Item.name.ilike(search_term), Item.description.ilike(search_term)))
        if item_filter.category_id:
            query = query.filter(Item.category_id == item_filter.category_id)
        if item_filter.min_price is not None:
            query = query.filter(Item.price >= item_filter.min_price)
        if item_filter.max_price is not None:
            query = query.filter(Item.price <= item_filter.max_price)

        return (
            query.order_by(Item.created_at.desc())
            .offset(item_filter.offset)
            .limit(item_filter.limit)
            .all()
        )

    def get_item_detail(self, item_id: UUID) -> Item:
        item = self.db.query(Item).filter(Item.id == item_id).first()
        if item is None or item.status != ItemStatus.ACTIVE:
            raise ItemNotFound()
        return item

    def create_item(self, seller_id: UUID, role: UserRole, data: ItemCreate) -> Item:
        """List a new active item in the seller's shop, with optional image references."""
        if role != UserRole.SELLER:
            raise RoleDenied("Access denied: only seller can create items")
        shop = self._require_shop(seller_id)
        if not self.guard.category_owned_by(data.category_id, shop.id):
            raise CategoryNotOwned()
        _check_price_and_stock(data.price, data.stock)

        item = Item(
            shop_id=shop.id,
            category_id=data.category_id,
            name=data.name,
            description=data.description,
            price=data.price,
            stock=data.stock,
            condition=data.condition,
            status=ItemStatus.ACTIVE,
            images=[ItemImage(image_url=url, created_by=str(seller_id)) for url in data.image_urls],
            created_by=str(seller_id),
        )
        self._save(item)
        logger.info(f"Item {item.id} created in shop {shop.id} by seller {seller_id}")
        return item

    def update_item(self, seller_id: UUID, item_id: UUID, data: ItemUpdate) -> Item:
        """Apply the fields the seller sent; unset fields keep their value."""
        item = self._get_item(item_id)
        shop = self._require_shop(seller_id)
        if item.shop_id != shop.id:
            raise Unauthorized("Unauthorized: this item does not belong to your shop")

        updates = data.model_dump(exclude_unset=True)
        for field in REQUIRED_ITEM_FIELDS:
            if field in updates and updates[field] is None:
                raise ValidationError(f"{field} cannot be empty")
        _check_price_and_stock(updates.get("price"), updates.get("stock"))
        if updates.get("category_id") is not None and not self.guard.category_owned_by(updates["category_id"], shop.id):
            raise CategoryNotOwned()
        if "status" in updates and updates["status"] is None:
            del updates["status"]
        new_status = updates.get("status", item.status)
        new_category_id = updates.get("category_id", item.category_id)
        if new_status == ItemStatus.ACTIVE and new_category_id is None:
            raise ValidationError("A category is required to list an item")

        old_status = item.status
        for field, value in updates.items():
            setattr(item, field, value)
        item.updated_by = str(seller_id)
        self._save(item)
        logger.info(f"Item {item_id} updated by seller {seller_id}: {sorted(updates)}")
        if item.status != old_status:
            self.log_sink.record_status_change(item.id, RelatedType.ITEM, old_status, item.status, seller_id)
        return item

    def delete_item(self, seller_id: UUID, item_id: UUID) -> Item:
        """Soft delete: the item stays in the catalog as inactive."""
        item = self._get_item(item_id)
        shop = self.guard.shop_for(seller_id)
        if shop is None or item.shop_id != shop.id:
            raise Unauthorized("Unauthorized: this item does not belong to your shop")

        return self._deactivate(item, seller_id, note="deleted by seller")

    def publish_draft_item(self, seller_id: UUID, role: UserRole, item_id: UUID, category_id: UUID) -> Item:
        """Complete a draft derived from an offer: assign a category and list it."""
        if role != UserRole.SELLER:
            raise RoleDenied("Access denied: only seller can publish items")
        shop = self._require_shop(seller_id)

        item = self._get_item(item_id)
        if item.shop_id != shop.id:
            raise Unauthorized("Unauthorized: item does not belong to your shop")
        if item.status != ItemStatus.DRAFT:
            raise StateConflict("Only draft items can be published")
        if not self.guard.category_owned_by(category_id, shop.id):
            raise CategoryNotOwned()

        item.category_id = category_id
        item.status = ItemStatus.ACTIVE
        item.updated_by = str(seller_id)
        self._save(item)
        logger.info(f"Draft item {item_id} published by seller {seller_id}")
        self.log_sink.record_status_change(item.id, RelatedType.ITEM, ItemStatus.DRAFT, ItemStatus.ACTIVE, seller_id)
        return item

    def moderate_item(self, actor_id: UUID, role: UserRole, item_id: UUID) -> Item:
        """Admin takedown: the item is kept but forced inactive."""
        if role != UserRole.ADMIN:
            raise RoleDenied("Unauthorized: admin access required")

        item = self._get_item(item_id)
        return self._deactivate(item, actor_id, note="moderated by admin")

    def _get_item(self, item_id: UUID) -> Item:
        item = self.db.query(Item).filter(Item.id == item_id).first()
        if item is None:
            raise ItemNotFound("Item not found")
        return item

    def _require_shop(self, seller_id: UUID) -> Shop:
        shop = self.guard.shop_for(seller_id)
        if shop is None:
            raise NoShopOwned()
        return shop

    def _deactivate(self, item: Item, actor_id: UUID, note: str) -> Item:
        old_status = item.status
        item.status = ItemStatus.INACTIVE
        item.updated_by = str(actor_id)
        self._save(item)
        logger.info(f"Item {item.id} set inactive ({note}) by {actor_id}")
        if old_status != ItemStatus.INACTIVE:
            self.log_sink.record_status_change(
                item.id, RelatedType.ITEM, old_status, ItemStatus.INACTIVE, actor_id, note=note,
            )
        return item
