from sqlalchemy import Column, Integer, String, DateTime, Text, Enum, ForeignKey, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.database import Base
from storefront.models.enums import Role


# Shoppers following stores
store_followers = Table(
    "store_followers",
    Base.metadata,
    Column("user_id", String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("store_id", Integer, ForeignKey("stores.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Mirror of an identity-provider user, kept in sync by the webhook."""
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, index=True)  # identity provider user id
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    picture = Column(Text)
    role = Column(Enum(Role), default=Role.USER, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    stores = relationship("Store", back_populates="owner", cascade="all, delete-orphan")
    following = relationship("Store", secondary=store_followers, back_populates="followers")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
