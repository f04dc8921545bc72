from pydantic import BaseModel, Field
from datetime import datetime


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    image: str = ""
    url: str = Field(..., min_length=2, max_length=100)
    featured: bool = False


class CategoryUpsert(CategoryBase):
    id: int | None = None


class Category(CategoryBase):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class SubCategoryUpsert(CategoryUpsert):
    category_id: int


class SubCategory(Category):
    category_id: int


class SubCategoryWithCategory(SubCategory):
    category: Category


class OfferTagUpsert(BaseModel):
    id: int | None = None
    name: str = Field(..., min_length=2, max_length=100)
    url: str = Field(..., min_length=2, max_length=100)


class OfferTag(BaseModel):
    id: int
    name: str
    url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class OfferTagWithProducts(OfferTag):
    product_ids: list[int] = []
