# rezepte/app/routers/videos.py
from __future__ import annotations

import logging
import os

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from rezepte.app.config import settings
from rezepte.app.deps import get_video_import_pipeline
from rezepte.app.schemas.videos import VideoProcessRequest, VideoProcessResponse
from rezepte.services.video_import import VideoImportPipeline

log = logging.getLogger("videos")
router = APIRouter(prefix="/videos", tags=["videos"])


def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


@router.post("/process", response_model=VideoProcessResponse)
async def process_video(
    body: VideoProcessRequest,
    pipeline: VideoImportPipeline = Depends(get_video_import_pipeline),
) -> VideoProcessResponse:
    # blocking chain of downloads and model calls, kept off the event loop
    result = await run_in_threadpool(pipeline.import_from_url, body.url.strip(), body.platform.strip())
    return VideoProcessResponse.from_result(result)


@router.post("/upload", response_model=VideoProcessResponse)
async def upload_video(
    file: UploadFile = File(...),
    pipeline: VideoImportPipeline = Depends(get_video_import_pipeline),
) -> VideoProcessResponse:
    if not file.filename:
        raise HTTPException(status_code=400, detail="A video file is required")

    max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
    size = await run_in_threadpool(_upload_size, file)
    if size > max_bytes:
        log.warning("upload rejected: file=%s size=%d limit=%d", file.filename, size, max_bytes)
        raise HTTPException(
            status_code=413,
            detail=f"File is larger than {settings.MAX_UPLOAD_MB} MB",
        )

    try:
        result = await run_in_threadpool(pipeline.import_from_upload, file.file, file.filename)
    finally:
        await file.close()
    return VideoProcessResponse.from_result(result)
