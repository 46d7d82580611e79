from __future__ import annotations

import random
from typing import List, Optional

import pytest

from errors import ProviderError, ProviderUnavailable, RecommendationFailed
from models import GeoPoint, GroundingReference, ProviderReply
from services.parser import FALLBACK_IMAGES
from services.recommendations import RecommendationService, split_cuisine_labels

TAIPEI = GeoPoint(latitude=25.0330, longitude=121.5654)

REPLY_TEXT = "\n".join(
    [
        "* **Din Tai Fung:** [4.6 stars] - Famous soup dumplings. [https://img.example.com/dtf.jpg]",
        "* **Raohe Night Market:** [4.4 stars] - Pepper buns and herbal soup. []",
        "* **Shin Yeh:** [4.3 stars] - Classic Taiwanese home cooking.",
    ]
)


class FakeProvider:
    def __init__(
        self,
        reply: Optional[ProviderReply] = None,
        plain: str = "",
        error: Optional[Exception] = None,
    ) -> None:
        self.reply = reply
        self.plain = plain
        self.error = error
        self.prompts: List[str] = []
        self.locations: List[GeoPoint] = []

    def generate(self, location: GeoPoint, prompt: str) -> ProviderReply:
        self.locations.append(location)
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        assert self.reply is not None
        return self.reply

    def generate_plain(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.plain


def _service(provider: FakeProvider, lang: str = "en") -> RecommendationService:
    return RecommendationService(provider, lang=lang, rng=random.Random(7))


def test_fetch_by_cuisine_parses_reply_and_attaches_map_links() -> None:
    refs = [GroundingReference(title="Din Tai Fung", uri="https://maps.google.com/?cid=42")]
    provider = FakeProvider(reply=ProviderReply(text=REPLY_TEXT, grounding_references=refs))

    records = _service(provider).fetch_by_cuisine(TAIPEI, "Taiwanese")

    assert [r.name for r in records] == ["Din Tai Fung", "Raohe Night Market", "Shin Yeh"]
    assert records[0].map_url == "https://maps.google.com/?cid=42"
    assert records[1].map_url is None
    assert records[1].image_url in FALLBACK_IMAGES
    assert all(r.image_url for r in records)
    assert provider.locations == [TAIPEI]
    assert '"Taiwanese"' in provider.prompts[0]
    assert "exactly 3" in provider.prompts[0]


def test_any_cuisine_sentinel_drops_the_filter() -> None:
    provider = FakeProvider(reply=ProviderReply(text=REPLY_TEXT))
    _service(provider).fetch_by_cuisine(TAIPEI, "anything!")
    assert "anything!" not in provider.prompts[0]
    assert "exactly 3 dinner restaurants" in provider.prompts[0]


def test_zh_prompts_use_chinese_template() -> None:
    provider = FakeProvider(reply=ProviderReply(text=REPLY_TEXT))
    _service(provider, lang="zh-TW").fetch_by_cuisine(TAIPEI, "火鍋")
    assert "類型為「火鍋」的" in provider.prompts[0]

    provider = FakeProvider(reply=ProviderReply(text=REPLY_TEXT))
    _service(provider, lang="zh-TW").fetch_by_cuisine(TAIPEI, "隨便！")
    assert "推薦 3 間晚餐餐廳" in provider.prompts[0]


def test_fetch_random_asks_for_different_cuisines() -> None:
    provider = FakeProvider(reply=ProviderReply(text=REPLY_TEXT))
    records = _service(provider).fetch_random(TAIPEI)
    assert len(records) == 3
    assert "different cuisine" in provider.prompts[0]


@pytest.mark.parametrize(
    "error",
    [ProviderUnavailable("no text"), ProviderError("401 unauthorized"), RuntimeError("boom")],
)
def test_provider_failures_become_one_user_message(error: Exception) -> None:
    provider = FakeProvider(error=error)
    with pytest.raises(RecommendationFailed) as info:
        _service(provider).fetch_by_cuisine(TAIPEI, "Japanese")
    assert info.value.message == "Could not fetch restaurant recommendations, please try again later."
    assert info.value.__cause__ is error


def test_zh_failure_message() -> None:
    provider = FakeProvider(error=ProviderError("quota"))
    with pytest.raises(RecommendationFailed) as info:
        _service(provider, lang="zh-TW").fetch_random(TAIPEI)
    assert info.value.message == "無法獲取餐廳推薦，請稍後再試。"


def test_cuisine_labels_are_split_and_trimmed() -> None:
    provider = FakeProvider(plain=" Japanese, Italian ,, Hot Pot, Japanese ,")
    labels = _service(provider).fetch_nearby_cuisine_labels(TAIPEI)
    assert labels == ["Japanese", "Italian", "Hot Pot"]
    assert "25.033, 121.5654" in provider.prompts[0]


def test_cuisine_discovery_failure_returns_empty() -> None:
    provider = FakeProvider(error=ProviderError("network down"))
    assert _service(provider).fetch_nearby_cuisine_labels(TAIPEI) == []


def test_split_cuisine_labels_handles_full_width_commas() -> None:
    assert split_cuisine_labels("日式料理，義式料理、火鍋") == ["日式料理", "義式料理", "火鍋"]
    assert split_cuisine_labels("") == []
