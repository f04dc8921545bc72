from sqlalchemy.orm import Session
from slugify import slugify


def generate_unique_slug(db: Session, base: str, model, field: str = "slug") -> str:
    """Slugify `base` and append -1, -2, ... until no `model` row uses it."""
    slug = slugify(base) or "item"
    column = getattr(model, field)
    unique_slug = slug
    counter = 1

    while db.query(model.id).filter(column == unique_slug).first() is not None:
        unique_slug = f"{slug}-{counter}"
        counter += 1

    return unique_slug
