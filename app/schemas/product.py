from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.product import ProductCategory


class ProductImage(BaseModel):
    public_id: str
    url: str
    cdn_url: str | None = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: float
    category: ProductCategory
    is_featured: bool = Field(serialization_alias="isFeatured")
    image: ProductImage
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    category: ProductCategory
    is_featured: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value
