# backend/app.py

import logging

import uvicorn
from fastapi import Depends, FastAPI, HTTPException

from config.settings import settings, setup_logging
from .imagen_client import ImagenClient
from .model import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    AspectRatioList,
    GenerateRequest,
    GenerateResponse,
)
from .utils import GenerationError, short_prompt

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Imagen Prompt Service")


def get_imagen_client() -> ImagenClient:
    return ImagenClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.IMAGEN_MODEL,
        base_url=settings.GEMINI_API_URL,
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/aspect-ratios", response_model=AspectRatioList)
async def aspect_ratios():
    return AspectRatioList(aspect_ratios=list(ASPECT_RATIOS), default=DEFAULT_ASPECT_RATIO)


@app.post("/generate", response_model=GenerateResponse)
async def generate(req: GenerateRequest, client: ImagenClient = Depends(get_imagen_client)):
    if not req.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must not be empty")

    logger.info(
        "[Generate] aspect_ratio=%s prompt=%s", req.aspect_ratio, short_prompt(req.prompt)
    )

    try:
        image_url = await client.generate(req.prompt, req.aspect_ratio)
    except GenerationError as e:
        logger.warning("[Generate] Generation failed: %s", e.message)
        raise HTTPException(status_code=502, detail=e.message)

    return GenerateResponse(image_url=image_url, aspect_ratio=req.aspect_ratio)


def main() -> None:
    uvicorn.run("backend.app:app", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT)


if __name__ == "__main__":
    main()
