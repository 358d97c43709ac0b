from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class DownloadedVideo:
    path: Path
    title: Optional[str]
    author: Optional[str]
    description: Optional[str]
    duration_sec: Optional[float]
    thumbnail_url: Optional[str]
