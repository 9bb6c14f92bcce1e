"""
Order engine: stock reservation, status transitions, shipment and tracking.

Order creation is split in two steps. ``prepare_order`` reads and validates
the requested lines; ``place_order`` writes the order, its lines and the stock
decrements in one transaction. Each decrement is guarded
(``stock >= quantity``), so a racing order that drained the stock in between
aborts the whole transaction instead of driving stock negative.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from ..core.logging import get_logger
from ..enums.item import ItemStatus
from ..enums.log import NotificationType, RelatedType
from ..enums.order import OrderStatus, TERMINAL_ORDER_STATUSES
from ..enums.user import UserRole
from ..models.item import Item
from ..models.log import HistoryStatus
from ..models.order import Order, OrderItem
from ..schemas.order import OrderCreate
from .base import BaseService
from .exceptions import (
    InsufficientStock,
    InvalidItem,
    MultiShopUnsupported,
    OrderNotFound,
    OrderStatusConflict,
    StoreUnavailable,
    Unauthorized,
    ValidationError,
)

logger = get_logger(__name__)


@dataclass
class OrderLine:
    item_id: UUID
    quantity: int
    price: float  # Unit price read during validation


@dataclass
class OrderDraft:
    buyer_id: UUID
    shop_id: UUID
    lines: List[OrderLine]
    shipping_address: str
    shipping_courier: Optional[str] = None

    @property
    def total_price(self) -> float:
        return sum(line.price * line.quantity for line in self.lines)


@dataclass
class OrderTracking:
    order: Order
    order_items: List[OrderItem]
    history: List[HistoryStatus] = field(default_factory=list)


class OrderService(BaseService):

    def create_order(self, buyer_id: UUID, data: OrderCreate) -> Order:
        draft = self.prepare_order(buyer_id, data)
        order = self.place_order(draft)
        self._notify_shop_owner(order)
        return order

    def prepare_order(self, buyer_id: UUID, data: OrderCreate) -> OrderDraft:
        if not data.items:
            raise ValidationError("Order must contain at least one item")
        if not data.shipping_address or not data.shipping_address.strip():
            raise ValidationError("Shipping address is required")

        # Lines naming the same item are reserved as one
        quantities: Dict[UUID, int] = {}
        for line in data.items:
            if line.quantity < 1:
                raise ValidationError("Quantity must be at least 1")
            quantities[line.item_id] = quantities.get(line.item_id, 0) + line.quantity

        shop_lines: Dict[UUID, List[OrderLine]] = defaultdict(list)
        for item_id, quantity in quantities.items():
            item = self.db.query(Item).filter(Item.id == item_id).first()
            if item is None or item.status != ItemStatus.ACTIVE or item.stock < quantity:
                raise InvalidItem(f"Invalid item {item_id}: missing, inactive, or insufficient stock")
            shop_lines[item.shop_id].append(OrderLine(item_id=item.id, quantity=quantity, price=item.price))

        if len(shop_lines) != 1:
            raise MultiShopUnsupported()

        shop_id, lines = next(iter(shop_lines.items()))
        return OrderDraft(
            buyer_id=buyer_id,
            shop_id=shop_id,
            lines=lines,
            shipping_address=data.shipping_address,
            shipping_courier=data.shipping_courier,
        )

    def place_order(self, draft: OrderDraft) -> Order:
        """Persist order, lines and guarded stock decrements atomically."""
        order = Order(
            buyer_id=draft.buyer_id,
            shop_id=draft.shop_id,
            total_price=draft.total_price,
            status=OrderStatus.PENDING,
            shipping_address=draft.shipping_address,
            shipping_courier=draft.shipping_courier,
            created_by=str(draft.buyer_id),
        )
        try:
            self.db.add(order)
            self.db.flush()
            for line in draft.lines:
                result = self.db.execute(
                    update(Item)
                    .where(
                        Item.id == line.item_id,
                        Item.status == ItemStatus.ACTIVE,
                        Item.stock >= line.quantity,
                    )
                    .values(stock=Item.stock - line.quantity)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise InsufficientStock(f"Insufficient stock for item {line.item_id}")
                self.db.add(OrderItem(
                    order_id=order.id,
                    item_id=line.item_id,
                    quantity=line.quantity,
                    price=line.price,
                    created_by=str(draft.buyer_id),
                ))
            self.db.commit()
        except InsufficientStock:
            self.db.rollback()
            logger.warning(f"Order for buyer {draft.buyer_id} aborted: stock changed during checkout")
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order transaction for buyer {draft.buyer_id} rolled back: {e}", exc_info=True)
            raise StoreUnavailable() from e

        self.db.refresh(order)
        logger.info(
            f"Order {order.id} placed by buyer {draft.buyer_id} (shop={draft.shop_id}, total={order.total_price:.2f})",
            extra={"event": "order_placed", "order_id": str(order.id), "shop_id": str(draft.shop_id)},
        )
        return order

    def update_order_status(self, actor_id: UUID, role: UserRole, order_id: UUID, new_status: str) -> Order:
        """
        Set any enumerated status on a non-terminal order. Completed and
        cancelled orders accept no further transitions.
        """
        try:
            status = OrderStatus(new_status)
        except ValueError:
            raise ValidationError("Invalid status value")

        order = self._get_order(order_id)
        self._authorize_shop_actor(actor_id, role, order)

        old_status = order.status
        self._set_status(order, actor_id, status)

        self.log_sink.record_status_change(order.id, RelatedType.ORDER, old_status, status, actor_id)
        self.log_sink.record_notification(
            order.buyer_id,
            "Order Status Changed",
            f"Your order #{str(order.id)[:8]} has been updated to {status.value}.",
            NotificationType.ORDER_STATUS,
            order.id,
        )
        return order

    def input_shipping_receipt(
        self, actor_id: UUID, role: UserRole, order_id: UUID, courier: str, receipt: str
    ) -> Order:
        """Record courier and receipt and force the order to shipped, whatever its prior status."""
        if not courier or not courier.strip() or not receipt or not receipt.strip():
            raise ValidationError("Shipping courier and receipt are required")

        order = self._get_order(order_id)
        self._authorize_shop_actor(actor_id, role, order)

        old_status = order.status
        self._set_status(
            order, actor_id, OrderStatus.SHIPPED, force=True,
            shipping_courier=courier, shipping_receipt=receipt,
        )

        self.log_sink.record_status_change(
            order.id, RelatedType.ORDER, old_status, OrderStatus.SHIPPED, actor_id,
            note=f"{courier} {receipt}",
        )
        self.log_sink.record_notification(
            order.buyer_id,
            "Your Order Has Shipped",
            f"Your order #{str(order.id)[:8]} has been shipped with receipt {receipt}.",
            NotificationType.ORDER_STATUS,
            order.id,
        )
        return order

    def get_order_tracking(self, actor_id: UUID, role: UserRole, order_id: UUID) -> OrderTracking:
        order = self._get_order(order_id)
        if order.buyer_id != actor_id and role != UserRole.ADMIN:
            raise Unauthorized("Unauthorized: access denied")
        return OrderTracking(
            order=order,
            order_items=list(order.items),
            history=self.log_sink.history_for(order.id),
        )

    def _get_order(self, order_id: UUID) -> Order:
        order = self.db.query(Order).filter(Order.id == order_id).first()
        if order is None:
            raise OrderNotFound()
        return order

    def _authorize_shop_actor(self, actor_id: UUID, role: UserRole, order: Order) -> None:
        if role == UserRole.ADMIN:
            return
        if not self.guard.owns_shop(actor_id, order.shop_id):
            raise Unauthorized("Unauthorized: you are not the shop owner or admin")

    def _set_status(
        self, order: Order, actor_id: UUID, status: OrderStatus, force: bool = False, **values
    ) -> None:
        """
        Conditional write on the status read; a concurrent change is a conflict.
        Terminal statuses are a conflict too unless ``force`` is set.
        """
        old_status = order.status
        if not force and old_status in TERMINAL_ORDER_STATUSES:
            raise OrderStatusConflict(f"Order is already {old_status.value}")

        stmt = (
            update(Order)
            .where(Order.id == order.id, Order.status == old_status)
            .values(status=status, updated_by=str(actor_id), **values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                raise OrderStatusConflict("Order status was changed by another request")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update order {order.id}: {e}", exc_info=True)
            raise StoreUnavailable() from e
        self.db.refresh(order)
        logger.info(f"Order {order.id} moved {old_status.value} -> {status.value} by {actor_id}")

    def _notify_shop_owner(self, order: Order) -> None:
        try:
            owner_id = self.guard.shop_owner_id(order.shop_id)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to retrieve shop owner for order {order.id}: {e}")
            return
        if owner_id is None:
            return
        self.log_sink.record_notification(
            owner_id,
            "New Order Received",
            f"You received new order #{str(order.id)[:8]} with a total of {order.total_price:.2f}.",
            NotificationType.NEW_ORDER,
            order.id,
        )
