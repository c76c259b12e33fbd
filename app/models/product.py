import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, Integer, String, Text

from app.database import Base


class ProductCategory(str, enum.Enum):
    JAGGERY = "jaggery"
    HONEY = "honey"
    SPICES = "spices"
    OTHER = "other"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(
        Enum(
            ProductCategory,
            name="product_category",
            values_callable=lambda choices: [choice.value for choice in choices],
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
    )
    is_featured = Column(Boolean, default=False, nullable=False)
    image_public_id = Column(String, nullable=False)
    image_url = Column(String, nullable=False)
    # Advisory only; responses always re-derive it from image_public_id.
    image_cdn_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
