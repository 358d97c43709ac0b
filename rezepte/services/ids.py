# rezepte/services/ids.py
from urllib.parse import urlparse

from rezepte.app.domain.models import Platform
from rezepte.services.errors import InvalidURLError, UnsupportedPlatformError

SUPPORTED_PLATFORMS = (Platform.TIKTOK, Platform.INSTAGRAM)

_PLATFORM_DOMAINS = {
    Platform.TIKTOK: ("tiktok.com",),
    Platform.INSTAGRAM: ("instagram.com", "instagr.am"),
}


def parse_platform(platform: str) -> Platform:
    try:
        value = Platform(platform)
    except ValueError:
        value = None
    if value not in SUPPORTED_PLATFORMS:
        raise UnsupportedPlatformError('Platform must be either "tiktok" or "instagram"')
    return value


def _host_matches(host: str, domains: tuple[str, ...]) -> bool:
    return any(host == d or host.endswith("." + d) for d in domains)


def validate_video_url(url: str, platform: str) -> Platform:
    """Check that ``url`` is an absolute http(s) link hosted by ``platform``."""
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname
    except ValueError as exc:
        raise InvalidURLError("Invalid URL format") from exc
    if parsed.scheme not in ("http", "https") or not host:
        raise InvalidURLError("Invalid URL format")

    value = parse_platform(platform)
    if not _host_matches(host.lower(), _PLATFORM_DOMAINS[value]):
        raise InvalidURLError(f"URL is not a {value.value} link: {url}")
    return value
