"""Shared pytest fixtures for storefront tests."""
import base64
import os

# Settings are read once and cached, so the environment must be in place
# before anything from storefront is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IDENTITY_WEBHOOK_SECRET"] = "whsec_" + base64.b64encode(b"storefront-webhook-secret").decode()
os.environ["IDENTITY_SECRET_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.database import Base, get_db
from storefront.main import app
from storefront.models import (
    User,
    Role,
    Store,
    Country,
    Category,
    SubCategory,
    OfferTag,
    Review,
    ReviewImage,
)
from storefront.schemas.product import ProductWithVariant
from storefront.seed import seed_countries
from storefront.services.auth import RequestContext, create_session_token
from storefront.services.products import upsert_product


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Database session with the country table seeded."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    seed_countries(session)
    yield session
    session.close()


@pytest.fixture
def client(db):
    """Test client whose requests use the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, user_id, email, role=Role.USER, name="Test User"):
    user = User(id=user_id, email=email, name=name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    """Bearer header carrying a session token for `user`."""
    return {"Authorization": f"Bearer {create_session_token(user.id)}"}


def country(db, code):
    return db.query(Country).filter(Country.code == code).one()


def product_form(category, sub_category, **overrides):
    """A valid product-with-variant submission."""
    data = {
        "name": "Trail Runner",
        "description": "Lightweight trail running shoe",
        "variant_name": "Trail Runner Blue",
        "variant_description": "Blue colourway",
        "variant_image": "https://cdn.example.com/trail-blue.jpg",
        "images": [{"url": "https://cdn.example.com/trail-blue-1.jpg"}],
        "category_id": category.id,
        "sub_category_id": sub_category.id,
        "brand": "Stride",
        "sku": "TR-BLUE",
        "weight": 0.8,
        "colors": [{"color": "Blue"}],
        "sizes": [
            {"size": "42", "quantity": 10, "price": 120.0, "discount": 10},
            {"size": "43", "quantity": 5, "price": 120.0},
        ],
        "product_specs": [{"name": "Material", "value": "Mesh"}],
        "variant_specs": [{"name": "Colour", "value": "Blue"}],
        "keywords": ["shoe", "trail"],
        "questions": [{"question": "Is it waterproof?", "answer": "No"}],
    }
    data.update(overrides)
    return ProductWithVariant(**data)


@pytest.fixture
def shopper(db):
    """Create a shopper."""
    return make_user(db, "user_shopper", "shopper@example.com", name="Sam Shopper")


@pytest.fixture
def seller(db):
    """Create a seller."""
    return make_user(db, "user_seller", "seller@example.com", Role.SELLER, name="Sally Seller")


@pytest.fixture
def other_seller(db):
    """Create a second seller who owns nothing of the first one's."""
    return make_user(db, "user_other_seller", "other@example.com", Role.SELLER, name="Oscar Other")


@pytest.fixture
def admin(db):
    """Create an admin."""
    return make_user(db, "user_admin", "admin@example.com", Role.ADMIN, name="Ada Admin")


@pytest.fixture
def store(db, seller):
    """Create a store with non-zero default shipping."""
    store = Store(
        user_id=seller.id,
        name="Stride Outfitters",
        description="Running gear",
        email="shop@example.com",
        phone="+15550100",
        url="stride-outfitters",
        default_shipping_service="Standard Post",
        default_shipping_fee_per_item=5.0,
        default_shipping_fee_additional_item=2.0,
        default_shipping_fee_per_kg=3.0,
        default_shipping_fee_fixed=10.0,
        default_delivery_time_min=3,
        default_delivery_time_max=10,
        return_policy="Return in 14 days.",
    )
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


@pytest.fixture
def category(db):
    category = Category(name="Shoes", url="shoes")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def sub_category(db, category):
    sub_category = SubCategory(name="Running Shoes", url="running-shoes", category_id=category.id)
    db.add(sub_category)
    db.commit()
    db.refresh(sub_category)
    return sub_category


@pytest.fixture
def offer_tag(db):
    offer_tag = OfferTag(name="Clearance", url="clearance")
    db.add(offer_tag)
    db.commit()
    db.refresh(offer_tag)
    return offer_tag


@pytest.fixture
def seller_ctx(seller):
    return RequestContext(user=seller)


@pytest.fixture
def product(db, seller_ctx, store, category, sub_category):
    """Create a product with one two-size variant through the product service."""
    return upsert_product(db, seller_ctx, product_form(category, sub_category), store.url)


@pytest.fixture
def add_review(db, shopper):
    """Factory adding a review by the shopper."""
    def _add_review(product_id, rating, images=0, text="Nice"):
        review = Review(user_id=shopper.id, product_id=product_id, rating=rating, review=text)
        review.images = [ReviewImage(url=f"https://cdn.example.com/review-{i}.jpg") for i in range(images)]
        db.add(review)
        db.commit()
        db.refresh(review)
        return review
    return _add_review
