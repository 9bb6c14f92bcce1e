"""
Order routes: checkout, seller/admin status updates, shipping and tracking
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_active_user
from ..auth.guard import AuthorizationGuard, Principal
from ..database import get_db, get_log_sink
from ..enums.user import UserRole
from ..schemas.order import (
    HistoryStatusResponse,
    OrderCreate,
    OrderItemResponse,
    OrderMessageResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderTrackingResponse,
    ShippingReceiptInput,
)
from ..services.exceptions import RoleDenied
from ..services.log_sink import LogSink
from ..services.order_service import OrderService

router = APIRouter()


def get_order_service(
    db: Session = Depends(get_db),
    log_sink: LogSink = Depends(get_log_sink),
) -> OrderService:
    return OrderService(db, AuthorizationGuard(db), log_sink)


@router.post("", response_model=OrderMessageResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    current_user: Principal = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service),
):
    """Create a single-shop order, reserving stock atomically (buyer only)"""
    if current_user.role != UserRole.BUYER:
        raise RoleDenied("Forbidden: only buyer can create orders")
    order = service.create_order(current_user.user_id, order_data)
    return OrderMessageResponse(
        message="Order created successfully.",
        order=OrderResponse.model_validate(order),
    )


@router.patch("/{order_id}/status", response_model=OrderMessageResponse)
def update_order_status(
    order_id: UUID,
    status_data: OrderStatusUpdate,
    current_user: Principal = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service),
):
    """Update order status (shop owner or admin)"""
    order = service.update_order_status(current_user.user_id, current_user.role, order_id, status_data.status)
    return OrderMessageResponse(
        message=f"Order status updated to {order.status.value}.",
        order=OrderResponse.model_validate(order),
    )


@router.post("/{order_id}/shipping", response_model=OrderMessageResponse)
def input_shipping_receipt(
    order_id: UUID,
    shipping_data: ShippingReceiptInput,
    current_user: Principal = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service),
):
    """Record courier and receipt number; the order becomes shipped (shop owner or admin)"""
    order = service.input_shipping_receipt(
        current_user.user_id,
        current_user.role,
        order_id,
        shipping_data.shipping_courier,
        shipping_data.shipping_receipt,
    )
    return OrderMessageResponse(
        message="Shipping receipt recorded. Order marked as shipped.",
        order=OrderResponse.model_validate(order),
    )


@router.get("/{order_id}/tracking", response_model=OrderTrackingResponse)
def get_order_tracking(
    order_id: UUID,
    current_user: Principal = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service),
):
    """Order, line items and status history (buyer or admin)"""
    tracking = service.get_order_tracking(current_user.user_id, current_user.role, order_id)
    return OrderTrackingResponse(
        order=OrderResponse.model_validate(tracking.order),
        order_items=[OrderItemResponse.model_validate(line) for line in tracking.order_items],
        history=[HistoryStatusResponse.model_validate(entry) for entry in tracking.history],
    )
