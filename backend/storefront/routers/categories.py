from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.routers.auth import get_request_context
from storefront.schemas.category import (
    Category as CategorySchema,
    CategoryUpsert,
    SubCategory as SubCategorySchema,
    SubCategoryUpsert,
    SubCategoryWithCategory,
    OfferTag as OfferTagSchema,
    OfferTagUpsert,
    OfferTagWithProducts,
)
from storefront.services.auth import RequestContext
from storefront.services import categories as category_service
from storefront.services import offer_tags as offer_tag_service

router = APIRouter(tags=["categories"])


# ============== Categories ==============

@router.get("/categories", response_model=list[CategorySchema])
def list_categories(db: Session = Depends(get_db)):
    """All categories, most recently updated first."""
    return category_service.get_all_categories(db)


@router.post("/categories", response_model=CategorySchema)
def upsert_category(
    data: CategoryUpsert,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Create or update a category (admin only)."""
    return category_service.upsert_category(db, ctx, data)


@router.get("/categories/{category_id}", response_model=CategorySchema)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return category_service.get_category(db, category_id)


@router.delete("/categories/{category_id}", response_model=CategorySchema)
def delete_category(
    category_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Delete a category and its subcategories (admin only)."""
    return category_service.delete_category(db, ctx, category_id)


@router.get("/categories/{category_id}/subcategories", response_model=list[SubCategorySchema])
def list_category_subcategories(category_id: int, db: Session = Depends(get_db)):
    return category_service.get_all_sub_categories_for_category(db, category_id)


# ============== SubCategories ==============

@router.get("/subcategories", response_model=list[SubCategoryWithCategory])
def list_subcategories(db: Session = Depends(get_db)):
    """All subcategories with their parent category."""
    return category_service.get_all_sub_categories(db)


@router.get("/subcategories/sample", response_model=list[SubCategorySchema])
def sample_subcategories(
    limit: int = Query(10, ge=1, le=100),
    random: bool = False,
    db: Session = Depends(get_db)
):
    """Up to `limit` subcategories, latest first or in random order."""
    return category_service.get_subcategories(db, limit, random)


@router.post("/subcategories", response_model=SubCategorySchema)
def upsert_subcategory(
    data: SubCategoryUpsert,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Create or update a subcategory (admin only)."""
    return category_service.upsert_sub_category(db, ctx, data)


@router.get("/subcategories/{sub_category_id}", response_model=SubCategorySchema)
def get_subcategory(sub_category_id: int, db: Session = Depends(get_db)):
    return category_service.get_sub_category(db, sub_category_id)


@router.delete("/subcategories/{sub_category_id}", response_model=SubCategorySchema)
def delete_subcategory(
    sub_category_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return category_service.delete_sub_category(db, ctx, sub_category_id)


# ============== Offer tags ==============

@router.get("/offer-tags", response_model=list[OfferTagWithProducts])
def list_offer_tags(db: Session = Depends(get_db)):
    """Offer tags, most used first."""
    return offer_tag_service.get_all_offer_tags(db)


@router.post("/offer-tags", response_model=OfferTagSchema)
def upsert_offer_tag(
    data: OfferTagUpsert,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Create or update an offer tag (admin only)."""
    return offer_tag_service.upsert_offer_tag(db, ctx, data)


@router.get("/offer-tags/{offer_tag_id}", response_model=OfferTagSchema)
def get_offer_tag(offer_tag_id: int, db: Session = Depends(get_db)):
    return offer_tag_service.get_offer_tag(db, offer_tag_id)


@router.delete("/offer-tags/{offer_tag_id}")
def delete_offer_tag(
    offer_tag_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return {"message": offer_tag_service.delete_offer_tag(db, ctx, offer_tag_id)}
