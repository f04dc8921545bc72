"""
Models for shipping configuration: countries, per-country store rates,
and per-product free shipping.
"""
from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from storefront.database import Base


class Country(Base):
    """Canonical country reference, looked up by (name, code)."""
    __tablename__ = "countries"
    __table_args__ = (UniqueConstraint("name", "code", name="uq_country_name_code"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)  # 'United States'
    code = Column(String(2), nullable=False, index=True)  # 'US'

    # Relationships
    shipping_rates = relationship("ShippingRate", back_populates="country", cascade="all, delete-orphan")


class ShippingRate(Base):
    """Per-country override of a store's default shipping fields.

    Every override column is nullable; a null column falls back to the
    store default for that field alone.
    """
    __tablename__ = "shipping_rates"
    __table_args__ = (UniqueConstraint("store_id", "country_id", name="uq_shipping_rate_store_country"),)

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    country_id = Column(Integer, ForeignKey("countries.id"), nullable=False, index=True)

    shipping_service = Column(String(100))
    shipping_fee_per_item = Column(Float)
    shipping_fee_additional_item = Column(Float)
    shipping_fee_per_kg = Column(Float)
    shipping_fee_fixed = Column(Float)
    delivery_time_min = Column(Integer)
    delivery_time_max = Column(Integer)
    return_policy = Column(Text)

    # Relationships
    store = relationship("Store", back_populates="shipping_rates")
    country = relationship("Country", back_populates="shipping_rates")


class FreeShipping(Base):
    """Free shipping offer for a product, limited to eligible countries."""
    __tablename__ = "free_shipping"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), unique=True, nullable=False)

    # Relationships
    product = relationship("Product", back_populates="free_shipping")
    eligible_countries = relationship(
        "FreeShippingCountry", back_populates="free_shipping", cascade="all, delete-orphan"
    )


class FreeShippingCountry(Base):
    __tablename__ = "free_shipping_countries"
    __table_args__ = (
        UniqueConstraint("free_shipping_id", "country_id", name="uq_free_shipping_country"),
    )

    id = Column(Integer, primary_key=True, index=True)
    free_shipping_id = Column(Integer, ForeignKey("free_shipping.id"), nullable=False)
    country_id = Column(Integer, ForeignKey("countries.id"), nullable=False)

    # Relationships
    free_shipping = relationship("FreeShipping", back_populates="eligible_countries")
    country = relationship("Country")
