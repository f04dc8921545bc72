"""
Review Service

Rating histograms and filtered review listings for product pages.
"""
import math
from typing import Iterable, Optional

from sqlalchemy import func, desc, asc
from sqlalchemy.orm import Session, selectinload

from storefront.models import Review
from storefront.schemas.review import RatingBucket, RatingStatistics
from storefront.services.errors import ValidationFailed

RATING_BUCKETS = 5


def fold_rating_counts(counts: Iterable[tuple[float, int]]) -> list[int]:
    """Fold (rating, count) pairs into five star buckets by floor(rating).

    1.5 lands in the 1-star bucket, 5.0 in the 5-star bucket. Ratings that
    floor outside 1..5 are dropped.
    """
    buckets = [0] * RATING_BUCKETS
    for rating, count in counts:
        star = math.floor(rating)
        if 1 <= star <= RATING_BUCKETS:
            buckets[star - 1] += count
    return buckets


def build_rating_statistics(
    counts: list[tuple[float, int]],
    reviews_with_images_count: int,
) -> RatingStatistics:
    total_reviews = sum(count for _, count in counts)
    buckets = fold_rating_counts(counts)
    return RatingStatistics(
        rating_statistics=[
            RatingBucket(
                rating=index + 1,
                num_reviews=count,
                percentage=(count / total_reviews) * 100 if total_reviews > 0 else 0,
            )
            for index, count in enumerate(buckets)
        ],
        reviews_with_images_count=reviews_with_images_count,
        total_reviews=total_reviews,
    )


def get_rating_statistics(db: Session, product_id: int) -> RatingStatistics:
    """Five-bucket rating histogram for a product."""
    rows = db.query(Review.rating, func.count(Review.id)).filter(
        Review.product_id == product_id
    ).group_by(Review.rating).all()

    with_images = db.query(Review).filter(
        Review.product_id == product_id,
        Review.images.any(),
    ).count()

    return build_rating_statistics([(rating, count) for rating, count in rows], with_images)


def get_product_filtered_reviews(
    db: Session,
    product_id: int,
    rating: Optional[float] = None,
    has_images: bool = False,
    order_by: Optional[str] = None,
    page: int = 1,
    page_size: int = 4,
) -> list[Review]:
    """Reviews for a product, filtered and paginated.

    A `rating` of 4 matches 4 and 4.5. `order_by` is latest, oldest, or
    anything else for highest rating first.
    """
    if page < 1 or page_size < 1:
        raise ValidationFailed("Page and page size must be positive", page=page, page_size=page_size)

    query = db.query(Review).filter(Review.product_id == product_id)

    if rating:
        query = query.filter(Review.rating.in_([rating, rating + 0.5]))

    if has_images:
        query = query.filter(Review.images.any())

    if order_by == "latest":
        query = query.order_by(desc(Review.created_at), desc(Review.id))
    elif order_by == "oldest":
        query = query.order_by(asc(Review.created_at), asc(Review.id))
    else:
        query = query.order_by(desc(Review.rating), desc(Review.id))

    return query.options(
        selectinload(Review.images),
        selectinload(Review.user),
    ).offset((page - 1) * page_size).limit(page_size).all()
