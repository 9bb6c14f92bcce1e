"""
Error taxonomy shared by the offer and order engines.

Each error carries the HTTP status class it maps to; routes never translate
them by hand, the handler registered in ``main`` does.
"""

from fastapi import status


class MarketError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    default_message = "Internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# 400
class ValidationError(MarketError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid input"


class InvalidItem(ValidationError):
    code = "invalid_item"
    default_message = "Invalid item, insufficient stock, or item inactive"


class MultiShopUnsupported(ValidationError):
    code = "multi_shop_unsupported"
    default_message = "Multi-shop orders are not supported in a single order"


# 403
class Forbidden(MarketError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Access denied"


class RoleDenied(Forbidden):
    code = "role_denied"


class Unauthorized(Forbidden):
    code = "unauthorized"
    default_message = "Unauthorized: you are not allowed to act on this resource"


class NotSellerOrOwner(Forbidden):
    code = "not_seller_or_owner"
    default_message = "Unauthorized: access denied or you are not the owner"


class NoShopOwned(Forbidden):
    code = "no_shop_owned"
    default_message = "You do not own a shop"


class CategoryNotOwned(Forbidden):
    code = "category_not_owned"
    default_message = "Category does not belong to seller's shop"


# 404
class NotFound(MarketError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class OfferNotFound(NotFound):
    code = "offer_not_found"
    default_message = "Offer not found"


class OrderNotFound(NotFound):
    code = "order_not_found"
    default_message = "Order not found"


class ItemNotFound(NotFound):
    code = "item_not_found"
    default_message = "Item not found or inactive"


# 409
class StateConflict(MarketError):
    status_code = status.HTTP_409_CONFLICT
    code = "state_conflict"
    default_message = "Resource is not in a state that allows this change"


class OfferStatusConflict(StateConflict):
    code = "offer_status_conflict"
    default_message = "Offer is not in pending status"


class OrderStatusConflict(StateConflict):
    code = "order_status_conflict"
    default_message = "Order is already in a terminal status"


class InsufficientStock(StateConflict):
    code = "insufficient_stock"
    default_message = "Insufficient stock to place the order"


# 500
class StoreUnavailable(MarketError):
    code = "store_unavailable"
    default_message = "Primary store is unavailable"
