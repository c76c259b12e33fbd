"""Image upload adapter backed by Cloudinary.

Incoming product images are checked (MIME type and size) before anything is
sent to Cloudinary. Accepted images are uploaded into a fixed folder with a
transformation profile that converts them to WebP and bounds them to
800x800 without upscaling. Delivery URLs are never trusted from storage: they
are rebuilt from the public id with automatic format and quality.
"""
import io
import logging
from dataclasses import dataclass

import cloudinary.uploader
import cloudinary.utils
from fastapi import File, HTTPException, Request, UploadFile, status
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.config import settings

logger = logging.getLogger(__name__)

UPLOAD_FORMAT = "webp"
UPLOAD_TRANSFORMATION = [
    {
        "width": 800,
        "height": 800,
        "crop": "limit",
        "quality": "auto:best",
        "fetch_format": "auto",
    }
]
DELIVERY_OPTIONS = {"fetch_format": "auto", "quality": "auto"}


class UnsupportedImageTypeError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image files are allowed!")


class ImageTooLargeError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="File is too large")


@dataclass(frozen=True)
class ImagePayload:
    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class UploadedImage:
    public_id: str
    url: str


def derive_cdn_url(public_id: str, cloud_name: str, secure: bool = True) -> str:
    """Build the CDN delivery URL for a stored asset. Pure, no network access."""
    url, _ = cloudinary.utils.cloudinary_url(
        public_id,
        cloud_name=cloud_name,
        secure=secure,
        **DELIVERY_OPTIONS,
    )
    return url


class MediaService:
    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str,
        upload_timeout: int = 60,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.upload_timeout = upload_timeout

    @classmethod
    def from_settings(cls, config=settings) -> "MediaService":
        if not config.CLOUDINARY_CLOUD_NAME:
            logger.warning("CLOUDINARY_CLOUD_NAME not configured. Image uploads will fail.")
        return cls(
            cloud_name=config.CLOUDINARY_CLOUD_NAME,
            api_key=config.CLOUDINARY_API_KEY,
            api_secret=config.CLOUDINARY_API_SECRET,
            folder=config.CLOUDINARY_FOLDER,
            upload_timeout=config.CLOUDINARY_UPLOAD_TIMEOUT,
        )

    def upload(self, payload: ImagePayload) -> UploadedImage:
        """Upload raw image bytes. Blocking; call from a worker thread inside async code."""
        logger.info(
            "Uploading %s (%s, %s bytes) to folder=%s",
            payload.filename,
            payload.content_type,
            len(payload.data),
            self.folder,
        )
        stream = io.BytesIO(payload.data)
        stream.name = payload.filename
        result = cloudinary.uploader.upload(
            stream,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            folder=self.folder,
            format=UPLOAD_FORMAT,
            transformation=UPLOAD_TRANSFORMATION,
            resource_type="image",
            timeout=self.upload_timeout,
        )
        uploaded = UploadedImage(
            public_id=result["public_id"],
            url=result.get("secure_url") or result["url"],
        )
        logger.info("Upload stored public_id=%s", uploaded.public_id)
        return uploaded

    def cdn_url(self, public_id: str) -> str:
        return derive_cdn_url(public_id, self.cloud_name)


def get_media_service(request: Request) -> MediaService:
    return request.app.state.media_service


async def read_image_upload(image: UploadFile | str | None = File(None)) -> ImagePayload | None:
    """Read the ``image`` form field, rejecting non-images and oversized files.

    A plain text ``image`` field counts as no file.
    """
    if not isinstance(image, StarletteUploadFile) or not image.filename:
        return None

    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise UnsupportedImageTypeError()

    limit = settings.max_image_size
    try:
        data = await image.read(limit + 1)
    finally:
        await image.close()
    if len(data) > limit:
        logger.info("Rejected %s: exceeds %s bytes", image.filename, limit)
        raise ImageTooLargeError()

    return ImagePayload(filename=image.filename, content_type=content_type, data=data)
