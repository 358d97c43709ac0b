from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from rezepte.app.config import settings

from .errors import TranscodeError

logger = logging.getLogger(__name__)

FFPROBE_TIMEOUT_SECONDS = 10


class AudioTranscoder:
    """Extracts an mp3 audio track from a video file with ffmpeg."""

    def __init__(
        self,
        ffmpeg_binary: str = settings.FFMPEG_BINARY,
        ffprobe_binary: str = settings.FFPROBE_BINARY,
        timeout_seconds: int = settings.TRANSCODE_TIMEOUT_SECONDS,
    ):
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.timeout_seconds = timeout_seconds

    def extract_audio(self, video_path: Path) -> Path:
        if not video_path.exists():
            raise TranscodeError(f"Video file not found: {video_path}")

        audio_path = video_path.with_suffix(".mp3")
        if audio_path == video_path:
            audio_path = video_path.with_name(f"{video_path.stem}.audio.mp3")

        command = [
            self.ffmpeg_binary,
            "-y",
            "-loglevel",
            "error",
            "-i",
            str(video_path),
            "-vn",
            "-acodec",
            "libmp3lame",
            str(audio_path),
        ]

        try:
            subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as error:
            raise TranscodeError(f"ffmpeg binary not found: {self.ffmpeg_binary}") from error
        except subprocess.TimeoutExpired as error:
            raise TranscodeError(f"ffmpeg timed out after {self.timeout_seconds}s") from error
        except subprocess.CalledProcessError as error:
            stderr = (error.stderr or "").strip().splitlines()
            reason = stderr[-1] if stderr else f"exit code {error.returncode}"
            raise TranscodeError(f"ffmpeg failed: {reason}") from error

        logger.info("Audio extracted: %s -> %s", video_path.name, audio_path.name)
        return audio_path

    def probe_duration(self, media_path: Path) -> float | None:
        try:
            result = subprocess.run(
                [
                    self.ffprobe_binary,
                    "-v",
                    "error",
                    "-show_entries",
                    "format=duration",
                    "-of",
                    "default=noprint_wrappers=1:nokey=1",
                    str(media_path),
                ],
                capture_output=True,
                text=True,
                check=True,
                timeout=FFPROBE_TIMEOUT_SECONDS,
            )
        except (FileNotFoundError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as error:
            logger.warning("ffprobe not available for duration check: %s", error)
            return None

        try:
            return float(result.stdout.strip())
        except ValueError:
            return None
