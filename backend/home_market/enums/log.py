"""
Log store enumerations
"""

import enum


class RelatedType(str, enum.Enum):
    ORDER = "order"
    OFFER = "offer"
    ITEM = "item"


class NotificationType(str, enum.Enum):
    OFFER = "offer"
    NEW_ORDER = "new_order"
    ORDER_STATUS = "order_status"
