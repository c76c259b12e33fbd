import logging

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.product import Product
from app.schemas.product import ProductImage, ProductResponse
from app.services import product_service
from app.services.media_service import ImagePayload, MediaService, get_media_service, read_image_upload
from app.utils.response import create_response, handle_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])


def _product_payload(product: Product, media: MediaService) -> dict:
    response = ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        category=product.category,
        is_featured=product.is_featured,
        image=ProductImage(
            public_id=product.image_public_id,
            url=product.image_url,
            cdn_url=media.cdn_url(product.image_public_id),
        ),
        created_at=product.created_at,
        updated_at=product.updated_at,
    )
    return response.model_dump(mode="json", by_alias=True)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    name: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    category: str | None = Form(None),
    is_featured: str | None = Form(None, alias="isFeatured"),
    image: ImagePayload | None = Depends(read_image_upload),
    db: Session = Depends(get_db),
    media: MediaService = Depends(get_media_service),
):
    try:
        if image is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product image is required")

        validation = product_service.validate_product(
            {
                "name": name,
                "description": description,
                "price": price,
                "category": category,
                "isFeatured": is_featured,
            }
        )
        if not validation.ok:
            logger.warning("Rejected product: %s", validation.errors)
            raise product_service.ProductValidationError(validation.errors)

        uploaded = await run_in_threadpool(media.upload, image)
        product = product_service.create_product(
            db,
            validation.product,
            uploaded,
            cdn_url=media.cdn_url(uploaded.public_id),
        )
        return create_response(_product_payload(product, media), status.HTTP_201_CREATED)
    except Exception as exc:
        return handle_exception(exc)


@router.get("")
def list_products(
    db: Session = Depends(get_db),
    media: MediaService = Depends(get_media_service),
):
    try:
        products = product_service.list_products(db)
        return create_response([_product_payload(product, media) for product in products])
    except Exception as exc:
        return handle_exception(exc)
