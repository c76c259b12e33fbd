import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings, setup_logging
from app.database import Base, engine, verify_connection
from app.routers import products
from app.services.media_service import MediaService
from app.utils.response import create_response, error_response

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    # Auto create tables
    Base.metadata.create_all(bind=engine)
    app.state.media_service = MediaService.from_settings(settings)
    logger.info("Media client ready for cloud=%s", settings.CLOUDINARY_CLOUD_NAME)


@app.on_event("shutdown")
async def shutdown_event():
    engine.dispose()


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(detail, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Malformed request to %s: %s", request.url.path, exc.errors())
    return error_response("Invalid request", status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


app.include_router(products.router)


@app.get("/")
def home():
    return create_response({"message": "Product API running"})


def run() -> None:
    setup_logging()
    try:
        verify_connection()
    except SQLAlchemyError:
        logger.exception("Database connection error")
        sys.exit(1)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
