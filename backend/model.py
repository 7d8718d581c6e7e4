# backend/model.py
from typing import Literal, Tuple, get_args

from pydantic import BaseModel

AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4"]

ASPECT_RATIOS: Tuple[str, ...] = get_args(AspectRatio)
DEFAULT_ASPECT_RATIO: AspectRatio = "1:1"


class GenerateRequest(BaseModel):
    prompt: str
    aspect_ratio: AspectRatio = DEFAULT_ASPECT_RATIO


class GenerateResponse(BaseModel):
    image_url: str
    aspect_ratio: AspectRatio


class AspectRatioList(BaseModel):
    aspect_ratios: list[AspectRatio]
    default: AspectRatio
