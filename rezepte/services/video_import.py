# rezepte/services/video_import.py
"""
Video-to-recipe import.

Sequential chain of external calls:
download -> extract audio -> transcribe -> extract recipe (LLM) -> persist.
Every import works in its own temp directory, which is removed whether the
chain succeeds or fails.
"""
from __future__ import annotations

import logging
import shutil
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Optional

from rezepte.app.config import settings
from rezepte.app.domain.errors import RepositoryError
from rezepte.app.domain.models import ImportResult, Platform, Recipe, RecipeSource, VideoInfo
from rezepte.app.infra.db.base import RecipeRepository
from rezepte.services.downloader import VideoDownloader
from rezepte.services.errors import (
    FailureCategory,
    InvalidUploadError,
    RateLimitedError,
    ServiceError,
    VideoImportError,
)
from rezepte.services.ids import validate_video_url
from rezepte.services.normalize import is_placeholder_title, normalize_recipe_fields
from rezepte.services.recipe_agent import RecipeExtractor
from rezepte.services.transcode import AudioTranscoder
from rezepte.services.transcribe import Transcriber
from rezepte.services.types import DownloadedVideo

log = logging.getLogger("video_import")

DEFAULT_TITLE = "Untitled recipe"
ALLOWED_UPLOAD_SUFFIXES = {".mp4", ".mov", ".m4v", ".webm", ".mkv", ".avi", ".mp3", ".m4a", ".wav"}


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class VideoImportPipeline:
    """
    Orchestrates the external tools of a video import and stores the result.

    Validation problems (bad URL, unsupported platform) are raised as-is before
    anything is downloaded. Failures inside the chain surface as a single
    VideoImportError with a FailureCategory, except storage failures, which
    propagate as RepositoryError.
    """

    def __init__(
        self,
        recipes: RecipeRepository,
        downloader: Optional[VideoDownloader] = None,
        transcoder: Optional[AudioTranscoder] = None,
        transcriber: Optional[Transcriber] = None,
        extractor: Optional[RecipeExtractor] = None,
        temp_root: str = settings.IMPORT_TEMP_DIR,
    ):
        self.recipes = recipes
        self.downloader = downloader or VideoDownloader()
        self.transcoder = transcoder or AudioTranscoder()
        self.transcriber = transcriber or Transcriber()
        self.extractor = extractor or RecipeExtractor()
        self.temp_root = Path(temp_root)

    def import_from_url(self, url: str, platform: str) -> ImportResult:
        platform_value = validate_video_url(url, platform)

        t0 = time.time()
        log.info("video_import.start url=%s platform=%s", url, platform_value.value)
        work_dir = self._create_work_dir()
        try:
            video = self.downloader.download(url, work_dir)
            result = self._process(video, platform_value, url)
        except RepositoryError as error:
            log.warning("video_import.fail url=%s category=storage error=%s dt=%.2fs", url, error, time.time() - t0)
            raise
        except Exception as error:
            raise self._as_import_error(error, url, time.time() - t0) from error
        finally:
            self._cleanup_work_dir(work_dir)

        log.info("video_import.ok url=%s recipe=%s dt=%.2fs", url, result.recipe.id, time.time() - t0)
        return result

    def import_from_upload(self, stream: BinaryIO, filename: str) -> ImportResult:
        suffix = Path(filename or "").suffix.lower()
        if suffix not in ALLOWED_UPLOAD_SUFFIXES:
            raise InvalidUploadError(f"Unsupported file type: {suffix or 'none'}")

        t0 = time.time()
        log.info("video_import.start upload=%s", filename)
        work_dir = self._create_work_dir()
        try:
            video_path = work_dir / f"upload{suffix}"
            with video_path.open("wb") as target:
                shutil.copyfileobj(stream, target)

            video = DownloadedVideo(
                path=video_path,
                title=Path(filename).stem or None,
                author=None,
                description=None,
                duration_sec=None,
                thumbnail_url=None,
            )
            result = self._process(video, Platform.UPLOAD, None)
        except RepositoryError as error:
            log.warning(
                "video_import.fail upload=%s category=storage error=%s dt=%.2fs", filename, error, time.time() - t0
            )
            raise
        except Exception as error:
            raise self._as_import_error(error, filename, time.time() - t0) from error
        finally:
            self._cleanup_work_dir(work_dir)

        log.info("video_import.ok upload=%s recipe=%s dt=%.2fs", filename, result.recipe.id, time.time() - t0)
        return result

    def _process(self, video: DownloadedVideo, platform: Platform, url: Optional[str]) -> ImportResult:
        audio_path = self.transcoder.extract_audio(video.path)
        duration = video.duration_sec or self.transcoder.probe_duration(video.path)

        transcript = self.transcriber.transcribe(audio_path)
        extracted = self.extractor.extract(transcript, video)

        recipe = self._save_recipe(extracted, video, platform, url)
        video_info = VideoInfo(
            platform=platform.value,
            url=url,
            title=video.title,
            author=video.author,
            description=video.description,
            duration_sec=duration,
            thumbnail_url=video.thumbnail_url,
            filename=video.path.name,
        )
        return ImportResult(video_info=video_info, transcript=transcript, recipe=recipe)

    def _save_recipe(
        self,
        extracted: dict,
        video: DownloadedVideo,
        platform: Platform,
        url: Optional[str],
    ) -> Recipe:
        fields = normalize_recipe_fields(extracted)

        if is_placeholder_title(fields["title"]):
            log.info("video_import.title_fallback extracted=%r video=%r", fields["title"], video.title)
            fields["title"] = video.title or DEFAULT_TITLE

        if not fields["description"] and video.description:
            fields["description"] = video.description

        fields["image_url"] = video.thumbnail_url
        fields["video_url"] = url
        fields["source"] = RecipeSource(platform=platform.value, url=url, processed_at=_now_utc())

        return self.recipes.create(fields)

    def _as_import_error(self, error: Exception, target: Optional[str], elapsed: float) -> VideoImportError:
        if isinstance(error, VideoImportError):
            return error
        if isinstance(error, ServiceError):
            log.warning(
                "video_import.fail target=%s category=%s error=%s dt=%.2fs",
                target,
                error.category.value,
                error,
                elapsed,
            )
            return VideoImportError(
                error.category,
                str(error),
                rate_limited=isinstance(error, RateLimitedError),
            )

        log.exception("video_import.fail target=%s category=generic dt=%.2fs", target, elapsed)
        return VideoImportError(FailureCategory.GENERIC, str(error) or type(error).__name__)

    def _create_work_dir(self) -> Path:
        self.temp_root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix="import-", dir=self.temp_root))

    def _cleanup_work_dir(self, work_dir: Path) -> None:
        if not work_dir.exists():
            return

        try:
            shutil.rmtree(work_dir)
            log.debug("Cleaned up temp dir: %s", work_dir)
        except OSError as os_error:
            log.warning("Failed to cleanup temp dir %s: %s", work_dir, os_error)
