import enum


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    SELLER = "SELLER"
    USER = "USER"


class StoreStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    BANNED = "BANNED"
    DISABLED = "DISABLED"


class ShippingFeeMethod(str, enum.Enum):
    ITEM = "ITEM"      # fee for the first unit plus a fee per additional unit
    WEIGHT = "WEIGHT"  # fee per kg
    FIXED = "FIXED"    # flat fee regardless of quantity
