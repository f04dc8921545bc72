from sqlalchemy import Column, Integer, String, DateTime, Text, Float, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.database import Base
from storefront.models.enums import StoreStatus
from storefront.models.user import store_followers


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)  # owning seller
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, default="")
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(50), unique=True, nullable=False)
    url = Column(String(100), unique=True, nullable=False, index=True)  # 'my-store'
    logo = Column(Text, default="")
    cover = Column(Text, default="")
    status = Column(Enum(StoreStatus), default=StoreStatus.PENDING, nullable=False)
    rating = Column(Float, default=0)
    featured = Column(Boolean, default=False)
    return_policy = Column(Text, default="Return in 30 days.")

    # Default shipping, used wherever a country has no shipping rate override
    default_shipping_service = Column(String(100), default="International Delivery")
    default_shipping_fee_per_item = Column(Float, default=0)
    default_shipping_fee_additional_item = Column(Float, default=0)
    default_shipping_fee_per_kg = Column(Float, default=0)
    default_shipping_fee_fixed = Column(Float, default=0)
    default_delivery_time_min = Column(Integer, default=7)  # days
    default_delivery_time_max = Column(Integer, default=31)  # days

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("User", back_populates="stores")
    products = relationship("Product", back_populates="store", cascade="all, delete-orphan")
    shipping_rates = relationship("ShippingRate", back_populates="store", cascade="all, delete-orphan")
    followers = relationship("User", secondary=store_followers, back_populates="following")
