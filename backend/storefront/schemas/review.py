from pydantic import BaseModel
from datetime import datetime
from typing import Literal


class ReviewImage(BaseModel):
    id: int
    url: str
    alt: str | None = ""

    class Config:
        from_attributes = True


class ReviewUser(BaseModel):
    id: str
    name: str
    picture: str | None = None

    class Config:
        from_attributes = True


class Review(BaseModel):
    id: int
    product_id: int
    variant: str | None = ""
    review: str | None = ""
    rating: float
    color: str | None = ""
    size: str | None = ""
    quantity: str | None = ""
    likes: int = 0
    images: list[ReviewImage] = []
    user: ReviewUser
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class RatingBucket(BaseModel):
    rating: int
    num_reviews: int
    percentage: float


class RatingStatistics(BaseModel):
    rating_statistics: list[RatingBucket]
    reviews_with_images_count: int
    total_reviews: int


ReviewsOrderBy = Literal["latest", "oldest", "highest"]
