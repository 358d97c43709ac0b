# rezepte/app/schemas/videos.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from rezepte.app.domain.models import ImportResult, VideoInfo
from rezepte.app.schemas.recipes import RecipeResponse


class VideoProcessRequest(BaseModel):
    url: str = Field(..., min_length=1)
    # checked by the pipeline so an unknown platform gets its own message
    platform: str = Field(..., min_length=1)


class VideoInfoResponse(BaseModel):
    platform: str
    url: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[float] = None
    thumbnailUrl: Optional[str] = None
    filename: Optional[str] = None

    @classmethod
    def from_domain(cls, info: VideoInfo) -> "VideoInfoResponse":
        return cls(
            platform=info.platform,
            url=info.url,
            title=info.title,
            author=info.author,
            description=info.description,
            duration=info.duration_sec,
            thumbnailUrl=info.thumbnail_url,
            filename=info.filename,
        )


class VideoProcessResponse(BaseModel):
    message: str = "Video processed successfully"
    videoInfo: VideoInfoResponse
    transcript: str
    recipe: RecipeResponse

    @classmethod
    def from_result(cls, result: ImportResult) -> "VideoProcessResponse":
        return cls(
            videoInfo=VideoInfoResponse.from_domain(result.video_info),
            transcript=result.transcript,
            recipe=RecipeResponse.from_domain(result.recipe),
        )
