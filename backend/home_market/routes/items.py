"""
Item routes: public marketplace browsing, the seller's own listings,
draft publication and moderation
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_active_user, require_admin
from ..auth.guard import AuthorizationGuard, Principal
from ..database import get_db, get_log_sink
from ..schemas.item import ItemCreate, ItemFilter, ItemMessageResponse, ItemPublish, ItemResponse, ItemUpdate
from ..services.item_service import ItemService
from ..services.log_sink import LogSink

market_router = APIRouter()
router = APIRouter()
admin_router = APIRouter()


def get_item_service(
    db: Session = Depends(get_db),
    log_sink: LogSink = Depends(get_log_sink),
) -> ItemService:
    return ItemService(db, AuthorizationGuard(db), log_sink)


@market_router.get("/items", response_model=List[ItemResponse])
def get_marketplace_items(
    keyword: Optional[str] = None,
    category_id: Optional[UUID] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: ItemService = Depends(get_item_service),
):
    """
    Get active marketplace items with filtering (public endpoint)
    """
    item_filter = ItemFilter(
        keyword=keyword,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        limit=limit,
        offset=offset,
    )
    return [ItemResponse.model_validate(item) for item in service.list_market_items(item_filter)]


@market_router.get("/items/{item_id}", response_model=ItemResponse)
def get_item_detail(item_id: UUID, service: ItemService = Depends(get_item_service)):
    """
    Get an active item by ID (public endpoint)
    """
    return ItemResponse.model_validate(service.get_item_detail(item_id))


@router.post("", response_model=ItemMessageResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    item_data: ItemCreate,
    current_user: Principal = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service),
):
    """
    Create an active item in the seller's shop (seller only)
    """
    item = service.create_item(current_user.user_id, current_user.role, item_data)
    return ItemMessageResponse(message="Item created successfully", item=ItemResponse.model_validate(item))


@router.put("/{item_id}", response_model=ItemMessageResponse)
def update_item(
    item_id: UUID,
    item_update: ItemUpdate,
    current_user: Principal = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service),
):
    """
    Update an item (owning seller only); omitted fields are left unchanged
    """
    item = service.update_item(current_user.user_id, item_id, item_update)
    return ItemMessageResponse(message="Item updated successfully", item=ItemResponse.model_validate(item))


@router.delete("/{item_id}", response_model=ItemMessageResponse)
def delete_item(
    item_id: UUID,
    current_user: Principal = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service),
):
    """
    Remove an item from the marketplace (owning seller only); the row is kept as inactive
    """
    item = service.delete_item(current_user.user_id, item_id)
    return ItemMessageResponse(message="Item deleted: status set to inactive", item=ItemResponse.model_validate(item))


@router.post("/{item_id}/publish", response_model=ItemMessageResponse)
def publish_draft_item(
    item_id: UUID,
    publish_data: ItemPublish,
    current_user: Principal = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service),
):
    """
    Assign a category to a draft item and list it (owning seller only)
    """
    item = service.publish_draft_item(current_user.user_id, current_user.role, item_id, publish_data.category_id)
    return ItemMessageResponse(message="Item published successfully", item=ItemResponse.model_validate(item))


# Admin-only routes
@admin_router.patch("/items/{item_id}/moderate", response_model=ItemMessageResponse)
def moderate_item(
    item_id: UUID,
    admin_user: Principal = Depends(require_admin),
    service: ItemService = Depends(get_item_service),
):
    """
    Force an item inactive (admin only)
    """
    item = service.moderate_item(admin_user.user_id, admin_user.role, item_id)
    return ItemMessageResponse(message="Item moderated: status set to inactive", item=ItemResponse.model_validate(item))
