# src/wasi_listings/api/app.py
import logging
from contextlib import asynccontextmanager
from typing import List, Literal, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator

from .. import __version__
from ..config.settings import settings
from ..exceptions import ExtractionError, FetchError, ScraperError, UnsupportedURLError
from ..main import process_listing
from ..utils.image_quality import apply_preset, improve_image_quality
from ..utils.images import remove_duplicate_images
from ..utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

Preset = Literal["high", "medium", "thumbnail"]

ERROR_STATUS = {
    FetchError: 502,
    UnsupportedURLError: 400,
    ExtractionError: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(
        level=settings.logging.level,
        log_dir=settings.logging.log_dir,
        context={"version": __version__, "service": "api"},
    )
    yield


app = FastAPI(
    title=settings.api.title,
    description=settings.api.description,
    version=__version__,
    lifespan=lifespan,
)


class ScrapeRequest(BaseModel):
    url: str = Field(..., min_length=1)


class ImageQualityRequest(BaseModel):
    url: str = Field(..., min_length=1)
    preset: Optional[Preset] = None
    max_width: Optional[int] = Field(None, gt=0)
    max_height: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_target(self):
        has_box = self.max_width is not None and self.max_height is not None
        if self.preset is None and not has_box:
            raise ValueError("Provide a preset or both max_width and max_height")
        if self.preset is not None and (self.max_width or self.max_height):
            raise ValueError("Use either a preset or max_width/max_height, not both")
        return self


class ImagesRequest(BaseModel):
    url: str = Field(..., min_length=1)
    preset: Preset = "high"


class ImagesResponse(BaseModel):
    source_url: str
    preset: Preset
    images: List[str]


@app.exception_handler(ScraperError)
async def scraper_error_handler(request: Request, exc: ScraperError):
    status_code = next((code for error_type, code in ERROR_STATUS.items()
                        if isinstance(exc, error_type)), 500)
    logger.error(f"{request.url.path} failed with {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.user_message,
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.post("/scrape")
async def scrape_endpoint(request: ScrapeRequest):
    return await process_listing(request.url, settings.scraper)


@app.post("/image-quality")
async def image_quality_endpoint(request: ImageQualityRequest):
    if request.preset is not None:
        url = apply_preset(request.url, request.preset)
    else:
        url = improve_image_quality(request.url, request.max_width, request.max_height)
    return {"url": url, "changed": url != request.url}


@app.post("/images", response_model=ImagesResponse)
async def images_endpoint(request: ImagesRequest):
    record = await process_listing(request.url, settings.scraper)
    images = [apply_preset(image, request.preset)
              for image in remove_duplicate_images(record.get("images") or [])]
    return ImagesResponse(source_url=request.url, preset=request.preset, images=images)
