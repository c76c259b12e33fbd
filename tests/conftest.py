import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]
TEST_DB_PATH = BASE_DIR / "test.db"

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-secret")

import app.main as main  # noqa: E402  (import after env vars are set)
from app.database import Base, engine  # noqa: E402
from app.services.media_service import MediaService, UploadedImage, get_media_service  # noqa: E402


class FakeMediaService(MediaService):
    """Records uploads in memory instead of calling Cloudinary."""

    def __init__(self):
        super().__init__(cloud_name="demo", api_key="test-key", api_secret="test-secret", folder="jaggery-products")
        self.uploads = []

    def upload(self, payload):
        self.uploads.append(payload)
        public_id = f"{self.folder}/image_{len(self.uploads)}"
        return UploadedImage(
            public_id=public_id,
            url=f"https://res.cloudinary.com/demo/image/upload/v1/{public_id}.webp",
        )


@pytest.fixture()
def media_service():
    return FakeMediaService()


@pytest.fixture()
def client(media_service):
    """Provide a TestClient backed by fresh tables and the fake media service."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    main.app.dependency_overrides[get_media_service] = lambda: media_service

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.pop(get_media_service, None)
