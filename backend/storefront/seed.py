"""Database seeding script - Run after database is initialized."""
import json
import logging
from pathlib import Path
from sqlalchemy.orm import Session
from storefront.models import Country, Category, SubCategory, OfferTag

logger = logging.getLogger(__name__)

DATA_DIR = Path("/data/seed")

# Canonical (name, code) pairs; shoppers' countries are matched against these exactly
COUNTRIES = [
    ("Argentina", "AR"),
    ("Australia", "AU"),
    ("Austria", "AT"),
    ("Belgium", "BE"),
    ("Brazil", "BR"),
    ("Canada", "CA"),
    ("Chile", "CL"),
    ("China", "CN"),
    ("Colombia", "CO"),
    ("Czech Republic", "CZ"),
    ("Denmark", "DK"),
    ("Egypt", "EG"),
    ("Finland", "FI"),
    ("France", "FR"),
    ("Germany", "DE"),
    ("Greece", "GR"),
    ("Hong Kong", "HK"),
    ("India", "IN"),
    ("Indonesia", "ID"),
    ("Ireland", "IE"),
    ("Israel", "IL"),
    ("Italy", "IT"),
    ("Japan", "JP"),
    ("Malaysia", "MY"),
    ("Mexico", "MX"),
    ("Morocco", "MA"),
    ("Netherlands", "NL"),
    ("New Zealand", "NZ"),
    ("Nigeria", "NG"),
    ("Norway", "NO"),
    ("Pakistan", "PK"),
    ("Philippines", "PH"),
    ("Poland", "PL"),
    ("Portugal", "PT"),
    ("Romania", "RO"),
    ("Saudi Arabia", "SA"),
    ("Singapore", "SG"),
    ("South Africa", "ZA"),
    ("South Korea", "KR"),
    ("Spain", "ES"),
    ("Sweden", "SE"),
    ("Switzerland", "CH"),
    ("Thailand", "TH"),
    ("Turkey", "TR"),
    ("Ukraine", "UA"),
    ("United Arab Emirates", "AE"),
    ("United Kingdom", "GB"),
    ("United States", "US"),
    ("Vietnam", "VN"),
]


def seed_countries(db: Session) -> int:
    """Seed the countries table if it is empty. Returns rows created."""
    if db.query(Country).count() > 0:
        return 0

    for name, code in COUNTRIES:
        db.add(Country(name=name, code=code))
    db.commit()
    return len(COUNTRIES)


def seed_catalogue(db: Session, catalogue_file: Path = DATA_DIR / "catalogue.json") -> int:
    """Seed categories, subcategories and offer tags from a catalogue JSON file.

    Entries whose url already exists are skipped. Returns rows created.
    """
    if not catalogue_file.exists():
        logger.warning(f"Catalogue file not found: {catalogue_file}")
        return 0

    created = 0

    with open(catalogue_file) as f:
        catalogue = json.load(f)

    for cat_data in catalogue.get("categories", []):
        category = db.query(Category).filter(Category.url == cat_data["url"]).first()
        if not category:
            category = Category(name=cat_data["name"], url=cat_data["url"], image=cat_data.get("image", ""))
            db.add(category)
            db.flush()
            created += 1
            logger.info(f"Added category: {cat_data['name']}")

        for sub_data in cat_data.get("sub_categories", []):
            existing = db.query(SubCategory).filter(SubCategory.url == sub_data["url"]).first()
            if not existing:
                db.add(SubCategory(
                    name=sub_data["name"],
                    url=sub_data["url"],
                    image=sub_data.get("image", ""),
                    category_id=category.id,
                ))
                created += 1
                logger.info(f"Added subcategory: {sub_data['name']}")

    for tag_data in catalogue.get("offer_tags", []):
        existing = db.query(OfferTag).filter(OfferTag.url == tag_data["url"]).first()
        if not existing:
            db.add(OfferTag(name=tag_data["name"], url=tag_data["url"]))
            created += 1
            logger.info(f"Added offer tag: {tag_data['name']}")

    db.commit()
    return created


def seed_all():
    """Run all seeding functions."""
    from storefront.database import SessionLocal, init_db

    logging.basicConfig(level=logging.INFO)
    logger.info("Initializing database...")
    init_db()

    db = SessionLocal()
    try:
        logger.info("Seeding catalogue...")
        seed_catalogue(db)
        logger.info("Seeding complete!")
    finally:
        db.close()


if __name__ == "__main__":
    seed_all()
