"""Turn the model's Markdown bullet list into recommendation records.

Each bullet line is expected to look like::

    * **Name:** [4.5 stars] - One or two sentences. [https://host/photo.jpg]

Extraction runs as a fixed sequence over the line text: bold name, then the
first bracketed URL as the image, then the first remaining bracket as the
rating; what is left is the description. Every step tolerates a miss, so a
malformed line still yields a record.
"""

from __future__ import annotations

import random
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from models import GroundingReference, RecommendationRecord
from services.prompts import locale_text
from utils import content_id

FALLBACK_IMAGES: Tuple[str, ...] = (
    "https://images.unsplash.com/photo-1517248135467-4c7edcad34c4?w=800&q=80",  # interior
    "https://images.unsplash.com/photo-1552566626-52f8b828add9?w=800&q=80",  # plating
    "https://images.unsplash.com/photo-1559339352-11d035aa65de?w=800&q=80",  # outdoor seating
    "https://images.unsplash.com/photo-1414235077428-338989a2e8c0?w=800&q=80",  # fine dining
    "https://images.unsplash.com/photo-1550966871-3ed3c47e2ce2?w=800&q=80",  # cozy
    "https://images.unsplash.com/photo-1504674900247-0877df9cc836?w=800&q=80",  # food spread
    "https://images.unsplash.com/photo-1543353071-873f17a7a088?w=800&q=80",  # italian
)

# Hosts the model sometimes invents that no longer serve images
DEPRECATED_IMAGE_HOSTS = frozenset({"source.unsplash.com"})

_BULLET = re.compile(r"^\s*\*\s*")
# **Name:** or **Name**: (ASCII or full-width colon)
_NAME = re.compile(r"\*\s*\*\*(?P<name>[^*]+?)\s*(?:[:：]\s*\*\*|\*\*\s*[:：])")
_IMAGE = re.compile(r"\[(https?://[^\]]+)\]")
_EMPTY_TRAILING_BRACKET = re.compile(r"\[\s*\]\s*$")
_BRACKET = re.compile(r"\[(.*?)\]")


def _cut(text: str, match: re.Match) -> str:
    return (text[: match.start()] + text[match.end() :]).strip()


def _bullet_lines(markdown: str) -> List[str]:
    return [line for line in markdown.splitlines() if line.strip().startswith("*")]


def _take_name(line: str) -> Tuple[Optional[str], str]:
    match = _NAME.search(line)
    if not match:
        return None, _BULLET.sub("", line, count=1).strip()
    name = match.group("name").strip()
    return (name or None), _cut(line, match)


def _is_deprecated(url: str) -> bool:
    # substring match also catches the host wrapped in proxy or query URLs
    lowered = url.lower()
    return any(host in lowered for host in DEPRECATED_IMAGE_HOSTS)


def _take_image(text: str) -> Tuple[Optional[str], str]:
    match = _IMAGE.search(text)
    if not match:
        # the prompt tells the model to leave the image slot empty when it has nothing
        return None, _EMPTY_TRAILING_BRACKET.sub("", text).strip()
    url = match.group(1).strip()
    rest = _cut(text, match)
    if _is_deprecated(url):
        return None, rest
    return url, rest


def _take_rating(text: str) -> Tuple[Optional[str], str]:
    match = _BRACKET.search(text)
    if not match:
        return None, text
    rating = match.group(1).strip()
    if not rating:
        return None, text
    return rating, _cut(text, match)


def match_map_url(
    line: str, name: str, references: Iterable[GroundingReference]
) -> Optional[str]:
    """First grounding reference whose title occurs in the line or the name.

    Short or generic titles can attach the wrong link; callers treat the
    result as a hint.
    """
    for ref in references:
        title = ref.title or ""
        if not title:
            continue
        if title in line or title in name:
            return ref.uri or None
    return None


def parse_line(
    line: str,
    references: Sequence[GroundingReference] = (),
    *,
    placeholder_name: str,
    rng: random.Random,
) -> RecommendationRecord:
    name, rest = _take_name(line)
    name = name or placeholder_name

    image_url, rest = _take_image(rest)
    if not image_url:
        image_url = rng.choice(FALLBACK_IMAGES)

    rating, rest = _take_rating(rest)
    description = rest.strip()

    return RecommendationRecord(
        id=content_id(name + description),
        name=name,
        description=description,
        image_url=image_url,
        rating=rating,
        map_url=match_map_url(line, name, references),
    )


def parse_recommendations(
    markdown: str,
    references: Optional[Sequence[GroundingReference]] = None,
    *,
    lang: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[RecommendationRecord]:
    """Parse every bullet line of ``markdown`` into a record, in order."""
    if not markdown:
        return []
    rng = rng or random.Random()
    placeholder = locale_text(lang).placeholder_name
    refs = list(references or [])
    return [
        parse_line(line, refs, placeholder_name=placeholder, rng=rng)
        for line in _bullet_lines(markdown)
    ]
