"""
Unique-index backed saves.

Uniqueness (store name/url/email/phone, category name/url, ...) is enforced
by the database's unique indexes. Callers write first; a violation comes
back as IntegrityError and is reported as a Conflict naming the field.
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.services.errors import Conflict


def save_unique(db: Session, instance, entity: str, unique_fields: dict[str, str] | None = None):
    """Add and commit `instance`, turning a unique violation into Conflict.

    `unique_fields` maps attribute name to the label used in the message,
    in the order they are reported.
    """
    unique_fields = unique_fields or {}
    model = type(instance)
    instance_id = instance.id
    values = {attr: getattr(instance, attr) for attr in unique_fields}

    try:
        db.add(instance)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        for attr, label in unique_fields.items():
            if values[attr] is None:
                continue
            query = db.query(model).filter(getattr(model, attr) == values[attr])
            if instance_id is not None:
                query = query.filter(model.id != instance_id)
            if query.first() is not None:
                raise Conflict(
                    f"A {entity} with the same {label} already exists",
                    field=attr,
                ) from e
        raise Conflict(f"The {entity} conflicts with an existing record") from e

    db.refresh(instance)
    return instance
