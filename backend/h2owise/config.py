# backend/h2owise/config.py
"""
Process-wide settings for the H2OWISE quiz service.

Built once at process entry with `Settings.from_env()` and handed to the
app factory, the data store and the question generator.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_MODEL = "mistral/mistral-7b-instruct"


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


class Settings(BaseModel):
    app_title: str = "H2OWISE Water Quiz"

    # Supabase project (PostgREST lives under <url>/rest/v1)
    supabase_url: str = ""
    supabase_key: str = ""

    # OpenRouter chat completions
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = OPENROUTER_MODEL
    openrouter_base_url: str = OPENROUTER_BASE_URL

    port: int = 3000
    api_prefix: str = "/api"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    http_timeout: float = 30.0

    @property
    def store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment, loading `.env` first."""
        load_dotenv()
        return cls(
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_key=os.getenv("SUPABASE_KEY", ""),
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or None,
            openrouter_model=os.getenv("OPENROUTER_MODEL", OPENROUTER_MODEL),
            openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", OPENROUTER_BASE_URL),
            port=int(os.getenv("PORT", "3000")),
            api_prefix=os.getenv("API_PREFIX", "/api"),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
        )
