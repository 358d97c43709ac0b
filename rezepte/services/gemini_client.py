from __future__ import annotations

import json
from pathlib import Path

from google import genai
from google.genai import types

from rezepte.services.errors import AIServiceError


class GeminiConfigurationError(AIServiceError):
    pass


class GeminiPromptError(AIServiceError):
    pass


class GeminiClient:
    def __init__(self, api_key: str | None, model_name: str = "gemini-2.5-flash") -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._client = self._configure_api()

    def _configure_api(self) -> genai.Client:
        if not self.api_key:
            raise GeminiConfigurationError("Missing Gemini API key (GEMINI_API_KEY).")
        return genai.Client(api_key=self.api_key)

    def _load_system_prompt(self, file_path: Path) -> str:
        try:
            return file_path.read_text(encoding="utf-8")
        except FileNotFoundError as not_found_error:
            raise GeminiPromptError(f"Prompt file not found: {file_path}") from not_found_error
        except OSError as io_error:
            raise GeminiPromptError(f"Unable to read prompt file: {io_error}") from io_error

    def _serialize_prompt(self, user_prompt: str | dict[str, str | int | float | list | dict | None]) -> str:
        if isinstance(user_prompt, str):
            return user_prompt
        try:
            return json.dumps(user_prompt, indent=2, ensure_ascii=False)
        except TypeError:
            return str(user_prompt)

    def generate_content(
        self,
        user_prompt: str | dict[str, str | int | float | list | dict | None],
        system_prompt_path: Path,
        temperature: float = 0.3,
    ) -> str:
        config = types.GenerateContentConfig(
            system_instruction=self._load_system_prompt(system_prompt_path),
            response_mime_type="application/json",
            temperature=temperature,
        )
        response = self._client.models.generate_content(
            model=self.model_name,
            contents=self._serialize_prompt(user_prompt),
            config=config,
        )
        return response.text or ""
