from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from utils import mask_secret


class Configuration(BaseModel):
    # Gemini
    gemini_api_key: Optional[str] = Field(default=None)
    gemini_model_id: str = Field(default="gemini-2.5-flash")
    gemini_timeout: int = Field(default=60)

    # Defaults
    lang_default: str = Field(default="en")

    # Favorites persistence
    favorites_path: str = Field(default="favorites.json")
    favorites_key: str = Field(default="dinnerAppFavorites")

    # Sessions
    session_ttl_sec: int = Field(default=3600)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            # API_KEY is the name the browser build used
            "gemini_api_key": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            "gemini_model_id": os.getenv("GEMINI_MODEL_ID"),
            "gemini_timeout": os.getenv("GEMINI_TIMEOUT"),
            "lang_default": os.getenv("LANG_DEFAULT"),
            "favorites_path": os.getenv("FAVORITES_PATH"),
            "favorites_key": os.getenv("FAVORITES_KEY"),
            "session_ttl_sec": os.getenv("SESSION_TTL_SEC"),
        }

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def require_gemini(self) -> None:
        if not self.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required")

    def log_summary(self) -> str:
        return (
            "gemini=%s model=%s timeout=%s lang_default=%s favorites=%s api_key=%s"
            % (
                bool(self.gemini_api_key),
                self.gemini_model_id,
                self.gemini_timeout,
                self.lang_default,
                self.favorites_path,
                mask_secret(self.gemini_api_key),
            )
        )
