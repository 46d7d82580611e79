from __future__ import annotations

import pytest

from config import Configuration
from models import RecommendationRecord
from utils import content_id, leading_number, mask_secret


def test_from_env_reads_gemini_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_MODEL_ID", raising=False)
    monkeypatch.setenv("API_KEY", "legacy-key-1234")
    monkeypatch.setenv("GEMINI_TIMEOUT", "15")
    monkeypatch.setenv("LANG_DEFAULT", "zh-TW")

    cfg = Configuration.from_env(overrides={"favorites_path": "/tmp/favs.json"})

    assert cfg.gemini_api_key == "legacy-key-1234"
    assert cfg.gemini_timeout == 15
    assert cfg.lang_default == "zh-TW"
    assert cfg.favorites_path == "/tmp/favs.json"
    assert cfg.gemini_model_id == "gemini-2.5-flash"
    assert "legacy-key-1234" not in cfg.log_summary()


def test_require_gemini() -> None:
    with pytest.raises(ValueError):
        Configuration(gemini_api_key=None).require_gemini()


def test_mask_secret() -> None:
    assert mask_secret(None) == "unset"
    assert mask_secret("abcd") == "****"
    assert mask_secret("abcdefghijkl") == "abcd...ijkl"


@pytest.mark.parametrize(
    "text,expected",
    [("4.5 stars", 4.5), ("4顆星", 4.0), (".5", 0.5), ("five", 0.0), ("", 0.0), (None, 0.0)],
)
def test_leading_number(text, expected) -> None:
    assert leading_number(text) == expected


def test_content_id_is_stable() -> None:
    assert content_id("Joe's Pizza- Great thin crust.") == content_id("Joe's Pizza- Great thin crust.")
    assert content_id("a") != content_id("b")
    assert len(content_id("你好")) == 20


def test_record_from_dict_accepts_browser_format() -> None:
    rec = RecommendationRecord.from_dict(
        {"id": "abc", "name": "Cafe", "description": "d", "rating": None, "imageUrl": "https://i/x.jpg"}
    )
    assert rec.image_url == "https://i/x.jpg"
    assert rec.rating is None
    assert rec.map_url is None
    assert rec.to_dict()["imageUrl"] == "https://i/x.jpg"
    assert "mapUrl" not in rec.to_dict()
