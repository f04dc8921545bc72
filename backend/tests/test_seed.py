"""Tests for database seeding."""
import json

from storefront.models import Country, Category, SubCategory, OfferTag
from storefront.seed import COUNTRIES, seed_countries, seed_catalogue


def write_catalogue(path, data):
    path.write_text(json.dumps(data))
    return path


def test_countries_seeded_once(db):
    assert db.query(Country).count() == len(COUNTRIES)
    assert seed_countries(db) == 0


def test_seed_catalogue(db, tmp_path):
    catalogue_file = write_catalogue(tmp_path / "catalogue.json", {
        "categories": [
            {
                "name": "Shoes",
                "url": "shoes",
                "sub_categories": [
                    {"name": "Running Shoes", "url": "running-shoes"},
                    {"name": "Boots", "url": "boots"},
                ],
            },
        ],
        "offer_tags": [{"name": "Clearance", "url": "clearance"}],
    })

    assert seed_catalogue(db, catalogue_file) == 4

    shoes = db.query(Category).filter(Category.url == "shoes").one()
    assert sorted(s.url for s in shoes.sub_categories) == ["boots", "running-shoes"]
    assert db.query(OfferTag).filter(OfferTag.url == "clearance").count() == 1


def test_seed_catalogue_skips_existing(db, tmp_path, category, sub_category):
    catalogue_file = write_catalogue(tmp_path / "catalogue.json", {
        "categories": [
            {
                "name": "Shoes",
                "url": category.url,
                "sub_categories": [
                    {"name": "Running Shoes", "url": sub_category.url},
                    {"name": "Sandals", "url": "sandals"},
                ],
            },
        ],
    })

    assert seed_catalogue(db, catalogue_file) == 1
    assert db.query(Category).count() == 1
    assert db.query(SubCategory).filter(SubCategory.category_id == category.id).count() == 2


def test_seed_catalogue_missing_file(db, tmp_path):
    assert seed_catalogue(db, tmp_path / "missing.json") == 0
