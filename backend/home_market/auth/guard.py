"""
Role and ownership lookups consumed by the offer and order engines
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..enums.user import UserRole
from ..models.shop import Category, Shop
from ..models.user import User


@dataclass
class Principal:
    user_id: UUID
    role: UserRole
    is_active: bool = True
    shop: Optional[Shop] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class AuthorizationGuard:
    def __init__(self, db: Session):
        self.db = db

    def resolve(self, actor_id: UUID) -> Optional[Principal]:
        """Role and owned shop (if any) of an actor; None for unknown users."""
        user = self.db.query(User).filter(User.id == actor_id).first()
        if not user:
            return None
        return Principal(
            user_id=user.id,
            role=user.role_name,
            is_active=user.is_active,
            shop=self.shop_for(user.id),
        )

    def shop_for(self, user_id: UUID) -> Optional[Shop]:
        return self.db.query(Shop).filter(Shop.user_id == user_id).first()

    def shop_owner_id(self, shop_id: UUID) -> Optional[UUID]:
        shop = self.db.query(Shop).filter(Shop.id == shop_id).first()
        return shop.user_id if shop else None

    def owns_shop(self, user_id: UUID, shop_id: UUID) -> bool:
        shop = self.shop_for(user_id)
        return shop is not None and shop.id == shop_id

    def category_owned_by(self, category_id: UUID, shop_id: UUID) -> bool:
        return self.db.query(Category).filter(
            Category.id == category_id,
            Category.shop_id == shop_id,
        ).first() is not None
