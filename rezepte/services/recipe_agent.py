from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

from google.genai.errors import APIError, ClientError

from rezepte.app.config import settings
from rezepte.services.errors import AIServiceError, RateLimitedError
from rezepte.services.gemini_client import GeminiClient
from rezepte.services.types import DownloadedVideo

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = Path(__file__).parent / "prompts" / "recipe_extraction.txt"

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_recipe_json(text: str) -> Dict[str, Any]:
    """Parse the model answer, tolerating a surrounding markdown code fence."""
    cleaned = _CODE_FENCE_RE.sub("", (text or "").strip())
    if not cleaned:
        raise AIServiceError("Model response did not include text content.")

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as error:
        raise AIServiceError(f"Model returned invalid JSON: {error}") from error

    if not isinstance(data, dict):
        raise AIServiceError("Model returned JSON that is not an object.")
    return data


def build_agent_payload(transcript: str, video: Optional[DownloadedVideo]) -> Dict[str, Any]:
    return {
        "videoTitle": video.title if video else None,
        "videoAuthor": video.author if video else None,
        "caption": video.description if video else None,
        "transcript": transcript,
    }


class RecipeExtractor:
    """Turns a video transcript into recipe fields with Gemini."""

    def __init__(
        self,
        api_key: str | None = settings.GEMINI_API_KEY,
        model_name: str = settings.GEMINI_MODEL,
        client: GeminiClient | None = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self._client = client

    def _get_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient(api_key=self.api_key, model_name=self.model_name)
        return self._client

    def extract(self, transcript: str, video: Optional[DownloadedVideo] = None) -> Dict[str, Any]:
        if not transcript or not transcript.strip():
            if not (video and video.description):
                raise AIServiceError("Transcript is empty, nothing to extract a recipe from.")

        payload = build_agent_payload(transcript, video)

        try:
            response = self._get_client().generate_content(
                user_prompt=payload,
                system_prompt_path=SYSTEM_PROMPT,
            )
        except ClientError as err:
            status_code = getattr(err, "code", None) or getattr(err, "status_code", None)
            message = str(err)
            if status_code == 429 or "RESOURCE_EXHAUSTED" in message:
                raise RateLimitedError(
                    "Gemini API rate limit reached. Try again in a few moments."
                ) from err
            raise AIServiceError(f"Gemini rejected the request: {message}") from err
        except APIError as err:
            raise AIServiceError(f"Gemini API error: {err}") from err

        recipe = parse_recipe_json(response)
        logger.info(
            "Recipe extracted: title=%s, ingredients=%d",
            recipe.get("title"),
            len(recipe.get("ingredients") or []),
        )
        return recipe
