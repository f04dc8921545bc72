"""
Category Service

Admin-managed catalogue taxonomy: categories and their subcategories.
"""
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from storefront.models import Category, SubCategory, Role
from storefront.schemas.category import CategoryUpsert, SubCategoryUpsert
from storefront.services.auth import RequestContext
from storefront.services.errors import NotFound, Conflict, ValidationFailed, operation
from storefront.services.uniqueness import save_unique

NAME_URL_FIELDS = {"name": "name", "url": "URL"}


def _apply(instance, data, exclude=("id",)):
    for key, value in data.model_dump(exclude=set(exclude)).items():
        setattr(instance, key, value)
    return instance


def _delete(db: Session, instance, entity: str):
    try:
        db.delete(instance)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict(f"The {entity} is still used by products", id=instance.id) from e


# ============== Categories ==============

@operation("upsert category")
def upsert_category(db: Session, ctx: RequestContext, data: CategoryUpsert) -> Category:
    ctx.require_role(Role.ADMIN)

    category = None
    if data.id is not None:
        category = db.query(Category).filter(Category.id == data.id).first()
    if category is None:
        category = Category(id=data.id)

    return save_unique(db, _apply(category, data), "category", NAME_URL_FIELDS)


def get_all_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.updated_at.desc(), Category.id.desc()).all()


@operation("fetch category")
def get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFound(f'Category with ID "{category_id}" not found.', category_id=category_id)
    return category


@operation("delete category")
def delete_category(db: Session, ctx: RequestContext, category_id: int) -> Category:
    ctx.require_role(Role.ADMIN)
    category = get_category(db, category_id)
    _delete(db, category, "category")
    return category


@operation("fetch subCategories for category")
def get_all_sub_categories_for_category(db: Session, category_id: int) -> list[SubCategory]:
    get_category(db, category_id)
    return db.query(SubCategory).filter(
        SubCategory.category_id == category_id
    ).order_by(SubCategory.updated_at.desc(), SubCategory.id.desc()).all()


# ============== SubCategories ==============

@operation("upsert subCategory")
def upsert_sub_category(db: Session, ctx: RequestContext, data: SubCategoryUpsert) -> SubCategory:
    ctx.require_role(Role.ADMIN)

    if not db.query(Category.id).filter(Category.id == data.category_id).first():
        raise NotFound(f'Category with ID "{data.category_id}" not found.', category_id=data.category_id)

    sub_category = None
    if data.id is not None:
        sub_category = db.query(SubCategory).filter(SubCategory.id == data.id).first()
    if sub_category is None:
        sub_category = SubCategory(id=data.id)

    return save_unique(db, _apply(sub_category, data), "subCategory", NAME_URL_FIELDS)


def get_all_sub_categories(db: Session) -> list[SubCategory]:
    return db.query(SubCategory).options(joinedload(SubCategory.category)).order_by(
        SubCategory.updated_at.desc(), SubCategory.id.desc()
    ).all()


@operation("fetch subCategory")
def get_sub_category(db: Session, sub_category_id: int) -> SubCategory:
    sub_category = db.query(SubCategory).filter(SubCategory.id == sub_category_id).first()
    if not sub_category:
        raise NotFound(f'SubCategory with ID "{sub_category_id}" not found.', sub_category_id=sub_category_id)
    return sub_category


@operation("delete subCategory")
def delete_sub_category(db: Session, ctx: RequestContext, sub_category_id: int) -> SubCategory:
    ctx.require_role(Role.ADMIN)
    sub_category = get_sub_category(db, sub_category_id)
    _delete(db, sub_category, "subCategory")
    return sub_category


@operation("fetch subcategories")
def get_subcategories(db: Session, limit: int = 10, random: bool = False) -> list[SubCategory]:
    """Up to `limit` subcategories, most recently updated first or in random order."""
    if limit < 1:
        raise ValidationFailed("Limit must be positive", limit=limit)

    query = db.query(SubCategory)
    if random:
        query = query.order_by(func.random())
    else:
        query = query.order_by(SubCategory.updated_at.desc(), SubCategory.id.desc())
    return query.limit(limit).all()
