# backend/h2owise/core/openrouter_qg.py

import json, logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from h2owise.config import Settings

logger = logging.getLogger("h2owise.ai")

DEFAULT_TOPIC = "water conservation"
APP_TITLE_HEADER = "H2OWISE Water Quiz"

# ------------------------------------------------------------
# Prompt template
# ------------------------------------------------------------
QG_PROMPT_TEMPLATE = (
    "Create a multiple-choice quiz question about {topic}. "
    "Respond in JSON format with keys: text, options (list of 4), and correct_index (0-3)."
)


def build_prompt(topic: Optional[str] = None) -> str:
    return QG_PROMPT_TEMPLATE.format(topic=topic or DEFAULT_TOPIC)


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _parse_json_object(text: str) -> Dict[str, Any]:
    """Single parse attempt; no repair of model output."""
    if not text:
        raise ValueError("Empty response from model")
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object from model, got {type(data).__name__}")
    return data


# ------------------------------------------------------------
# Generator
# ------------------------------------------------------------
class QuestionGenerator:
    """Asks an OpenRouter chat model for one quiz question."""

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self._settings = settings
        self._client = client

    @property
    def model(self) -> str:
        return self._settings.openrouter_model

    def _configure(self) -> AsyncOpenAI:
        if self._client is None:
            key = self._settings.openrouter_api_key
            if not key:
                raise RuntimeError("OPENROUTER_API_KEY missing. Provide it via env or .env file.")
            self._client = AsyncOpenAI(
                api_key=key,
                base_url=self._settings.openrouter_base_url,
                default_headers={"X-Title": APP_TITLE_HEADER},
                timeout=self._settings.http_timeout,
                max_retries=0,
            )
            logger.info(f"OpenRouter client configured (model={self.model}).")
        return self._client

    async def complete(self, topic: Optional[str] = None) -> str:
        client = self._configure()
        resp = await client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": build_prompt(topic)}],
        )
        return resp.choices[0].message.content or ""

    async def generate_question(self, topic: Optional[str] = None) -> Dict[str, Any]:
        raw = await self.complete(topic)
        logger.debug(f"Raw completion for topic={topic or DEFAULT_TOPIC!r}: {raw[:500]}")
        return _parse_json_object(raw)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
