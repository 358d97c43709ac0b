from __future__ import annotations

import logging
from pathlib import Path

import yt_dlp

from .errors import DownloadFailedError, PrivateOrUnavailableError
from .types import DownloadedVideo

logger = logging.getLogger(__name__)


def _clean_string(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _best_thumbnail(info: dict) -> str | None:
    direct = _clean_string(info.get("thumbnail"))
    if direct:
        return direct

    candidates = [
        entry
        for entry in info.get("thumbnails") or []
        if isinstance(entry, dict) and _clean_string(entry.get("url"))
    ]
    if not candidates:
        return None

    best = max(
        candidates,
        key=lambda entry: (entry.get("preference") or 0, entry.get("width") or 0, entry.get("height") or 0),
    )
    return _clean_string(best["url"])


def _create_ydl_options(target_dir: Path) -> dict:
    return {
        "quiet": True,
        "noprogress": True,
        "noplaylist": True,
        "check_formats": False,
        "format": "mp4/best",
        "outtmpl": str(target_dir / "%(id)s.%(ext)s"),
    }


def _check_video_availability(info: dict | None) -> None:
    if not info:
        raise PrivateOrUnavailableError("Video is private or unavailable.")
    if info.get("is_private") or info.get("availability") in {"private", "needs_auth"}:
        raise PrivateOrUnavailableError("Video is private or requires login.")


def _extract_filepath(info: dict) -> str | None:
    requested = info.get("requested_downloads")
    if requested:
        first = requested[0]
        return first.get("filepath") or first.get("filename")
    return info.get("filepath") or info.get("_filename")


class VideoDownloader:
    """Downloads TikTok / Instagram videos with yt-dlp."""

    def download(self, url: str, target_dir: Path) -> DownloadedVideo:
        target_dir.mkdir(parents=True, exist_ok=True)

        try:
            with yt_dlp.YoutubeDL(_create_ydl_options(target_dir)) as ydl:
                info = ydl.extract_info(url, download=True)
                _check_video_availability(info)
                filepath = _extract_filepath(info) or ydl.prepare_filename(info)
        except PrivateOrUnavailableError:
            raise
        except yt_dlp.utils.DownloadError as error:
            raise DownloadFailedError(f"Error downloading video: {error}") from error
        except (ConnectionError, TimeoutError) as error:
            raise DownloadFailedError(f"Network error downloading video: {error}") from error

        path = Path(filepath)
        if not path.exists():
            raise DownloadFailedError(f"Downloader reported {path} but no file was written")

        logger.info("Video downloaded: url=%s, path=%s", url, path)
        return DownloadedVideo(
            path=path,
            title=_clean_string(info.get("title")),
            author=_clean_string(info.get("uploader")) or _clean_string(info.get("channel")),
            description=_clean_string(info.get("description")),
            duration_sec=info.get("duration") if isinstance(info.get("duration"), (int, float)) else None,
            thumbnail_url=_best_thumbnail(info),
        )
