"""
Generation Client - request learning activities from a generative model.

GeminiGenerationClient wraps google-generativeai. The response is untrusted:
the client only guarantees a list of dicts, never their contents.
"""

from __future__ import annotations

import json
import re
from typing import Any, Protocol

from loguru import logger

from config import get_settings

from ..exceptions import GenerationError
from .prompts import build_batch_prompt, get_system_prompt


class GenerationClient(Protocol):
    """Anything that turns a batch of section contexts into raw activities."""

    def generate(self, system_context: str, batch: list[dict]) -> list[dict]:
        ...


def parse_activities(text: str) -> list[dict]:
    """
    Parse a model response into raw activity dicts.

    Accepts {"activities": [...]}, a bare array, or either of those inside a
    fenced code block.

    Raises:
        GenerationError: No JSON activity list could be extracted
    """
    candidates = [text.strip()]
    code_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if code_match:
        candidates.append(code_match.group(1).strip())
    array_match = re.search(r"\[[\s\S]*\]", text)
    if array_match:
        candidates.append(array_match.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            data = data.get("activities")
        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]

    raise GenerationError("Response did not contain an activity list")


class GeminiGenerationClient:
    """
    Generate activities with Gemini.

    The model is built lazily from settings unless one is injected.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        model: Any = None,
        activities_per_section: int | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.model_name = model_name or settings.ai_model
        self.temperature = settings.generation_temperature
        self.max_output_tokens = settings.generation_max_output_tokens
        self.activities_per_section = activities_per_section or settings.activities_per_section
        self._client = model

    @property
    def client(self):
        """Lazy-load Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise GenerationError("GEMINI_API_KEY is not configured")
            import google.generativeai as genai
            genai.configure(api_key=self.api_key)
            self._client = genai.GenerativeModel(
                model_name=self.model_name,
                system_instruction=get_system_prompt(),
            )
        return self._client

    def generate(self, system_context: str, batch: list[dict]) -> list[dict]:
        """
        Request activities for one batch of section contexts.

        Args:
            system_context: Document-level context prepended to the prompt
            batch: Section contexts ({id, heading, excerpt})

        Returns:
            Raw activity dicts, in the order the model produced them

        Raises:
            GenerationError: Transport failure or unparseable response
        """
        prompt = build_batch_prompt(batch, self.activities_per_section)
        if system_context:
            prompt = f"=== CONTEXT ===\n{system_context}\n\n{prompt}"

        try:
            response = self.client.generate_content(
                prompt,
                generation_config={
                    "temperature": self.temperature,
                    "max_output_tokens": self.max_output_tokens,
                    "response_mime_type": "application/json",
                },
            )
            text = response.text
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Generation request failed: {e}") from e

        if not text:
            raise GenerationError("Empty response from model")

        activities = parse_activities(text)
        logger.debug(f"Model returned {len(activities)} activities for {len(batch)} sections")
        return activities
