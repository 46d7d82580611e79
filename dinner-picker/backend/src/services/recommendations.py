from __future__ import annotations

import random
import re
from typing import List, Optional

from loguru import logger

from errors import RecommendationFailed
from models import GeoPoint, RecommendationRecord
from services.gemini_client import RecommendationProvider
from services.parser import parse_recommendations
from services.prompts import cuisine_labels_prompt, cuisine_prompt, locale_text, random_prompt

_LABEL_SEPARATOR = re.compile(r"[,，、]")


def split_cuisine_labels(text: str) -> List[str]:
    """Split a comma-separated answer into unique, trimmed labels."""
    labels = [part.strip() for part in _LABEL_SEPARATOR.split(text or "")]
    return list(dict.fromkeys(label for label in labels if label))


class RecommendationService:
    """Builds prompts, calls the provider once and parses the reply."""

    def __init__(
        self,
        provider: RecommendationProvider,
        lang: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.provider = provider
        self.lang = lang
        self.rng = rng or random.Random()
        self.text = locale_text(lang)

    def fetch_by_cuisine(self, location: GeoPoint, cuisine: str) -> List[RecommendationRecord]:
        return self._recommend(location, cuisine_prompt(cuisine, self.lang), label=cuisine)

    def fetch_random(self, location: GeoPoint) -> List[RecommendationRecord]:
        return self._recommend(location, random_prompt(self.lang), label="random")

    def fetch_nearby_cuisine_labels(self, location: GeoPoint) -> List[str]:
        """Cuisine labels popular around ``location``; [] on any failure."""
        try:
            text = self.provider.generate_plain(cuisine_labels_prompt(location, self.lang))
        except Exception as exc:
            logger.warning("cuisine discovery failed, caller falls back to static list: {}", exc)
            return []
        labels = split_cuisine_labels(text)
        logger.debug("cuisine discovery labels={}", len(labels))
        return labels

    def _recommend(self, location: GeoPoint, prompt: str, label: str) -> List[RecommendationRecord]:
        try:
            reply = self.provider.generate(location, prompt)
        except Exception as exc:
            logger.exception("recommendation fetch failed cuisine={}: {}", label, exc)
            raise RecommendationFailed(self.text.fetch_failed) from exc

        records = parse_recommendations(
            reply.text,
            reply.grounding_references,
            lang=self.lang,
            rng=self.rng,
        )
        logger.info(
            "recommendation cuisine={} records={} with_map={}",
            label,
            len(records),
            sum(1 for r in records if r.map_url),
        )
        return records
