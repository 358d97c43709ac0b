from __future__ import annotations

import pytest

from rezepte.app.domain.models import Platform
from rezepte.services.errors import InvalidURLError, UnsupportedPlatformError
from rezepte.services.ids import parse_platform, validate_video_url


class TestParsePlatform:
    @pytest.mark.parametrize(("raw", "expected"), [("tiktok", Platform.TIKTOK), ("instagram", Platform.INSTAGRAM)])
    def test_supported(self, raw: str, expected: Platform) -> None:
        assert parse_platform(raw) is expected

    @pytest.mark.parametrize("raw", ["youtube", "upload", "TikTok", ""])
    def test_unsupported(self, raw: str) -> None:
        with pytest.raises(UnsupportedPlatformError, match='either "tiktok" or "instagram"'):
            parse_platform(raw)


class TestValidateVideoUrl:
    @pytest.mark.parametrize(
        ("url", "platform"),
        [
            ("https://www.tiktok.com/@chef/video/7234567890123456789", "tiktok"),
            ("https://vm.tiktok.com/ZMabc123/", "tiktok"),
            ("https://www.instagram.com/reel/Cx1AbCdEfG/", "instagram"),
            ("http://instagr.am/p/Cx1AbCdEfG", "instagram"),
        ],
    )
    def test_accepts_platform_links(self, url: str, platform: str) -> None:
        assert validate_video_url(url, platform).value == platform

    @pytest.mark.parametrize(
        "url",
        [
            "not a url",
            "ftp://tiktok.com/video/1",
            "/relative/path",
            "https://",
            "https://[tiktok.com/video/1",
        ],
    )
    def test_rejects_malformed_urls(self, url: str) -> None:
        with pytest.raises(InvalidURLError, match="Invalid URL format"):
            validate_video_url(url, "tiktok")

    def test_rejects_host_of_other_platform(self) -> None:
        with pytest.raises(InvalidURLError):
            validate_video_url("https://www.instagram.com/reel/Cx1AbCdEfG/", "tiktok")

    def test_rejects_lookalike_host(self) -> None:
        with pytest.raises(InvalidURLError):
            validate_video_url("https://nottiktok.com/@chef/video/7234567890123456789", "tiktok")

    def test_url_checked_before_platform(self) -> None:
        with pytest.raises(InvalidURLError):
            validate_video_url("garbage", "youtube")

    def test_unsupported_platform(self) -> None:
        with pytest.raises(UnsupportedPlatformError):
            validate_video_url("https://www.youtube.com/watch?v=abc", "youtube")
