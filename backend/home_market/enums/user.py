"""
User role enumeration
"""

import enum


class UserRole(str, enum.Enum):
    BUYER = "buyer"
    SELLER = "seller"
    GIVER = "giver"
    ADMIN = "admin"
