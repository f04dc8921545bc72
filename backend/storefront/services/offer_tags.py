"""
Offer Tag Service
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.models import OfferTag, Product, Role
from storefront.schemas.category import OfferTagUpsert, OfferTagWithProducts
from storefront.services.auth import RequestContext
from storefront.services.errors import NotFound, operation
from storefront.services.uniqueness import save_unique


def get_all_offer_tags(db: Session) -> list[OfferTagWithProducts]:
    """Offer tags with their product ids, most used first."""
    product_count = func.count(Product.id)
    rows = db.query(OfferTag, product_count).outerjoin(
        Product, Product.offer_tag_id == OfferTag.id
    ).group_by(OfferTag.id).order_by(product_count.desc(), OfferTag.id.asc()).all()

    return [
        OfferTagWithProducts(
            id=tag.id,
            name=tag.name,
            url=tag.url,
            created_at=tag.created_at,
            updated_at=tag.updated_at,
            product_ids=[product.id for product in tag.products],
        )
        for tag, _ in rows
    ]


@operation("upsert offer tag")
def upsert_offer_tag(db: Session, ctx: RequestContext, data: OfferTagUpsert) -> OfferTag:
    ctx.require_role(Role.ADMIN)

    offer_tag = None
    if data.id is not None:
        offer_tag = db.query(OfferTag).filter(OfferTag.id == data.id).first()
    if offer_tag is None:
        offer_tag = OfferTag(id=data.id)

    offer_tag.name = data.name
    offer_tag.url = data.url
    return save_unique(db, offer_tag, "offer tag", {"name": "name", "url": "URL"})


@operation("retrieve offer tag")
def get_offer_tag(db: Session, offer_tag_id: int) -> OfferTag:
    offer_tag = db.query(OfferTag).filter(OfferTag.id == offer_tag_id).first()
    if not offer_tag:
        raise NotFound(f"Offer tag with ID {offer_tag_id} not found.", offer_tag_id=offer_tag_id)
    return offer_tag


@operation("delete offer tag")
def delete_offer_tag(db: Session, ctx: RequestContext, offer_tag_id: int) -> str:
    """Delete an offer tag; tagged products keep existing, untagged."""
    ctx.require_role(Role.ADMIN)
    offer_tag = get_offer_tag(db, offer_tag_id)
    db.delete(offer_tag)
    db.commit()
    return f"Offer tag with ID {offer_tag_id} deleted successfully."
