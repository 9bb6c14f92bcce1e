"""
User, role and permission models
"""

from sqlalchemy import Column, ForeignKey, String, Boolean, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel, value_enum
from ..enums.user import UserRole


class Role(BaseModel):
    __tablename__ = "roles"

    name = Column(value_enum(UserRole), unique=True, nullable=False)

    permissions = relationship("Permission", secondary="role_permissions", back_populates="roles")


class Permission(BaseModel):
    __tablename__ = "permissions"

    code = Column(String(100), unique=True, nullable=False)  # e.g. "offer:accept"
    description = Column(Text, nullable=True)

    roles = relationship("Role", secondary="role_permissions", back_populates="permissions")


class RolePermission(BaseModel):
    __tablename__ = "role_permissions"
    __table_args__ = (UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),)

    role_id = Column(Uuid, ForeignKey("roles.id"), nullable=False, index=True)
    permission_id = Column(Uuid, ForeignKey("permissions.id"), nullable=False, index=True)


class User(BaseModel):
    __tablename__ = "users"

    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(200), nullable=False)
    role_id = Column(Uuid, ForeignKey("roles.id"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    role = relationship("Role", lazy="joined")
    shop = relationship("Shop", back_populates="owner", uselist=False)

    @property
    def role_name(self) -> UserRole:
        return self.role.name
