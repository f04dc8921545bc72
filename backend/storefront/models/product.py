"""
Models for products and their sellable variants.
"""
from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.database import Base
from storefront.models.enums import ShippingFeeMethod


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id"), nullable=False, index=True)
    offer_tag_id = Column(Integer, ForeignKey("offer_tags.id"), nullable=True, index=True)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, default="")
    slug = Column(String(255), unique=True, nullable=False, index=True)
    brand = Column(String(100), default="")
    rating = Column(Float, default=0)
    sales = Column(Integer, default=0)
    num_reviews = Column(Integer, default=0)
    views = Column(Integer, default=0)
    shipping_fee_method = Column(Enum(ShippingFeeMethod), default=ShippingFeeMethod.ITEM, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    store = relationship("Store", back_populates="products")
    category = relationship("Category", back_populates="products")
    sub_category = relationship("SubCategory", back_populates="products")
    offer_tag = relationship("OfferTag", back_populates="products")
    variants = relationship(
        "ProductVariant", back_populates="product", cascade="all, delete-orphan",
        order_by="ProductVariant.id"
    )
    specs = relationship("Spec", back_populates="product", cascade="all, delete-orphan")
    questions = relationship("Question", back_populates="product", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="product", cascade="all, delete-orphan")
    free_shipping = relationship(
        "FreeShipping", back_populates="product", uselist=False, cascade="all, delete-orphan"
    )


class ProductVariant(Base):
    """A sellable configuration of a product (own images, colors, sizes, sku)."""
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    variant_name = Column(String(255), nullable=False)
    variant_description = Column(Text, default="")
    variant_image = Column(Text, default="")
    slug = Column(String(255), unique=True, nullable=False, index=True)
    is_sale = Column(Boolean, default=False)
    sale_end_date = Column(String(50), default="")
    sku = Column(String(100), default="")
    keywords = Column(Text, default="")  # comma separated
    weight = Column(Float, default=0)  # kg

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    product = relationship("Product", back_populates="variants")
    images = relationship("ProductVariantImage", back_populates="variant", cascade="all, delete-orphan")
    colors = relationship("Color", back_populates="variant", cascade="all, delete-orphan")
    sizes = relationship("Size", back_populates="variant", cascade="all, delete-orphan", order_by="Size.id")
    specs = relationship("Spec", back_populates="variant", cascade="all, delete-orphan")


class ProductVariantImage(Base):
    __tablename__ = "product_variant_images"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False, index=True)
    url = Column(Text, nullable=False)
    alt = Column(String(255), default="")

    variant = relationship("ProductVariant", back_populates="images")


class Color(Base):
    __tablename__ = "colors"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False, index=True)
    name = Column(String(50), nullable=False)  # '#FF0000' or 'Red'

    variant = relationship("ProductVariant", back_populates="colors")


class Size(Base):
    __tablename__ = "sizes"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False, index=True)
    size = Column(String(50), nullable=False)  # 'M', '42', 'One size'
    quantity = Column(Integer, default=0)  # stock
    price = Column(Float, nullable=False)
    discount = Column(Float, default=0)  # percent

    variant = relationship("ProductVariant", back_populates="sizes")


class Spec(Base):
    """Name/value specification row, attached to a product or to one variant."""
    __tablename__ = "specs"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    value = Column(String(255), nullable=False)

    product = relationship("Product", back_populates="specs")
    variant = relationship("ProductVariant", back_populates="specs")


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, default="")

    product = relationship("Product", back_populates="questions")
