import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.product import Product
from app.schemas.product import ProductCreate
from app.services.media_service import UploadedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ProductValidation:
    product: Optional[ProductCreate] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.product is not None and not self.errors


class ProductValidationError(Exception):
    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        summary = ", ".join(f"{error.field}: {error.message}" for error in errors)
        super().__init__(f"Product validation failed: {summary}")


def parse_featured_flag(value: Optional[str]) -> bool:
    return value == "true"


def validate_product(fields: Dict[str, Optional[str]]) -> ProductValidation:
    """Check submitted form fields without touching storage."""
    payload = {key: value for key, value in fields.items() if key != "isFeatured" and value is not None}
    payload["is_featured"] = parse_featured_flag(fields.get("isFeatured"))
    try:
        product = ProductCreate.model_validate(payload)
    except ValidationError as exc:
        errors = [
            FieldError(field=".".join(str(part) for part in error["loc"]) or "__root__", message=error["msg"])
            for error in exc.errors()
        ]
        return ProductValidation(errors=errors)
    return ProductValidation(product=product)


def create_product(
    db: Session,
    data: ProductCreate,
    image: UploadedImage,
    cdn_url: Optional[str] = None,
) -> Product:
    product = Product(
        name=data.name,
        description=data.description,
        price=data.price,
        category=data.category,
        is_featured=data.is_featured,
        image_public_id=image.public_id,
        image_url=image.url,
        image_cdn_url=cdn_url,
    )
    db.add(product)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.error("Product write failed; remote asset %s left orphaned", image.public_id)
        raise
    db.refresh(product)
    logger.info("Product created id=%s public_id=%s", product.id, image.public_id)
    return product


def list_products(db: Session) -> List[Product]:
    return db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
