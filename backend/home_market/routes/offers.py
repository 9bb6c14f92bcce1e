"""
Offer routes: giver proposals and seller decisions
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_active_user
from ..auth.guard import AuthorizationGuard, Principal
from ..database import get_db, get_log_sink
from ..schemas.item import ItemResponse
from ..schemas.offer import (
    OfferAccept,
    OfferAcceptResponse,
    OfferCreate,
    OfferListResponse,
    OfferMessageResponse,
    OfferResponse,
)
from ..services.log_sink import LogSink
from ..services.offer_service import OfferService

router = APIRouter()


def get_offer_service(
    db: Session = Depends(get_db),
    log_sink: LogSink = Depends(get_log_sink),
) -> OfferService:
    return OfferService(db, AuthorizationGuard(db), log_sink)


@router.post("", response_model=OfferMessageResponse, status_code=status.HTTP_201_CREATED)
def create_offer(
    offer_data: OfferCreate,
    current_user: Principal = Depends(get_current_active_user),
    service: OfferService = Depends(get_offer_service),
):
    """Create an offer (giver only); omit seller_id for an open offer"""
    offer = service.create_offer(current_user.user_id, current_user.role, offer_data)
    return OfferMessageResponse(
        message="Offer created successfully. Waiting for seller response.",
        offer=OfferResponse.model_validate(offer),
    )


@router.get("/my", response_model=OfferListResponse)
def get_my_offers(
    current_user: Principal = Depends(get_current_active_user),
    service: OfferService = Depends(get_offer_service),
):
    """Offers authored by the current giver, any status"""
    offers = service.get_my_offers(current_user.user_id, current_user.role)
    return OfferListResponse(offers=[OfferResponse.model_validate(offer) for offer in offers])


@router.get("/inbox", response_model=OfferListResponse)
def get_offer_inbox(
    current_user: Principal = Depends(get_current_active_user),
    service: OfferService = Depends(get_offer_service),
):
    """Offers addressed to the current seller plus pending open offers"""
    offers = service.get_offers_to_seller(current_user.user_id, current_user.role)
    return OfferListResponse(offers=[OfferResponse.model_validate(offer) for offer in offers])


@router.post("/{offer_id}/accept", response_model=OfferAcceptResponse)
def accept_offer(
    offer_id: UUID,
    accept_data: OfferAccept,
    current_user: Principal = Depends(get_current_active_user),
    service: OfferService = Depends(get_offer_service),
):
    """
    Accept a pending offer and create a draft item in the seller's shop.
    A draft failure does not undo the accept; it is reported in ``warning``.
    """
    result = service.accept_offer(current_user.user_id, offer_id, accept_data.agreed_price)
    if result.draft_item is not None:
        message = "Offer accepted successfully. Draft item created."
        draft_item = ItemResponse.model_validate(result.draft_item)
    else:
        message = "Offer accepted successfully. Draft item was not created."
        draft_item = None
    return OfferAcceptResponse(
        message=message,
        offer=OfferResponse.model_validate(result.offer),
        draft_item=draft_item,
        warning=result.warning,
    )


@router.post("/{offer_id}/reject", response_model=OfferMessageResponse)
def reject_offer(
    offer_id: UUID,
    current_user: Principal = Depends(get_current_active_user),
    service: OfferService = Depends(get_offer_service),
):
    """Reject a pending offer"""
    offer = service.reject_offer(current_user.user_id, offer_id)
    return OfferMessageResponse(
        message="Offer rejected successfully.",
        offer=OfferResponse.model_validate(offer),
    )
