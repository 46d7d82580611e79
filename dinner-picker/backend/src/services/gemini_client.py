from __future__ import annotations

from typing import Any, List, Optional, Protocol

from google import genai
from google.genai import types
from loguru import logger

from config import Configuration
from errors import ProviderError, ProviderUnavailable
from models import GeoPoint, GroundingReference, ProviderReply


class RecommendationProvider(Protocol):
    def generate(self, location: GeoPoint, prompt: str) -> ProviderReply: ...

    def generate_plain(self, prompt: str) -> str: ...


def _grounding_references(response: Any) -> List[GroundingReference]:
    """Collect Maps grounding chunks ({title, uri}) from the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    refs: List[GroundingReference] = []
    for chunk in chunks:
        maps = getattr(chunk, "maps", None)
        if maps is None:
            continue
        title = getattr(maps, "title", None) or ""
        uri = getattr(maps, "uri", None) or ""
        if uri:
            refs.append(GroundingReference(title=title, uri=uri))
    return refs


class GeminiProvider:
    """Stateless wrapper around the Gemini ``generate_content`` call."""

    def __init__(self, cfg: Configuration, client: Optional[genai.Client] = None) -> None:
        self.cfg = cfg
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            try:
                self.cfg.require_gemini()
            except ValueError as exc:
                raise ProviderError(str(exc)) from exc
            self._client = genai.Client(
                api_key=self.cfg.gemini_api_key,
                http_options=types.HttpOptions(timeout=self.cfg.gemini_timeout * 1000),
            )
            logger.debug("Gemini client ready model={}", self.cfg.gemini_model_id)
        return self._client

    def generate(self, location: GeoPoint, prompt: str) -> ProviderReply:
        config = types.GenerateContentConfig(
            # Maps for the listing links, Search for real photo URLs
            tools=[
                types.Tool(google_maps=types.GoogleMaps()),
                types.Tool(google_search=types.GoogleSearch()),
            ],
            tool_config=types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=location.latitude,
                        longitude=location.longitude,
                    )
                )
            ),
        )
        client = self.client
        try:
            response = client.models.generate_content(
                model=self.cfg.gemini_model_id,
                contents=prompt,
                config=config,
            )
        except Exception as exc:
            raise ProviderError(f"Gemini request failed: {exc}") from exc

        text = response.text
        if not text:
            raise ProviderUnavailable("Gemini did not return any text")
        refs = _grounding_references(response)
        logger.debug("Gemini reply chars={} grounding_refs={}", len(text), len(refs))
        return ProviderReply(text=text, grounding_references=refs)

    def generate_plain(self, prompt: str) -> str:
        client = self.client
        try:
            response = client.models.generate_content(
                model=self.cfg.gemini_model_id,
                contents=prompt,
            )
        except Exception as exc:
            raise ProviderError(f"Gemini request failed: {exc}") from exc
        return (response.text or "").strip()
