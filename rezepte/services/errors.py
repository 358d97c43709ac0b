from __future__ import annotations

from enum import Enum


class FailureCategory(str, Enum):
    DOWNLOAD = "download"
    TRANSCODE = "transcode"
    AI_SERVICE = "ai_service"
    GENERIC = "generic"


class ServiceError(Exception):
    category = FailureCategory.GENERIC


class InvalidURLError(ServiceError):
    pass


class UnsupportedPlatformError(ServiceError):
    pass


class InvalidUploadError(ServiceError):
    pass


class PrivateOrUnavailableError(ServiceError):
    category = FailureCategory.DOWNLOAD


class DownloadFailedError(ServiceError):
    category = FailureCategory.DOWNLOAD


class NetworkTimeoutError(DownloadFailedError):
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds


class TranscodeError(ServiceError):
    category = FailureCategory.TRANSCODE


class TranscriptionServiceError(ServiceError):
    category = FailureCategory.AI_SERVICE


class AIServiceError(ServiceError):
    category = FailureCategory.AI_SERVICE


class RateLimitedError(AIServiceError):
    pass


class VideoImportError(ServiceError):
    """A video import failed somewhere in the chain."""

    _MESSAGES = {
        FailureCategory.DOWNLOAD: "Failed to download video",
        FailureCategory.TRANSCODE: "Failed to extract audio from video",
        FailureCategory.AI_SERVICE: "AI service failed to process the video",
        FailureCategory.GENERIC: "Video processing failed",
    }

    def __init__(self, category: FailureCategory, hint: str, rate_limited: bool = False):
        super().__init__(f"{self._MESSAGES[category]}: {hint}")
        self.category = category
        self.hint = hint
        self.rate_limited = rate_limited

    @property
    def summary(self) -> str:
        return self._MESSAGES[self.category]
