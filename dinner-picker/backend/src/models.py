"""Data models for the dinner picker backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from utils import leading_number


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GroundingReference:
    title: str
    uri: str


@dataclass
class ProviderReply:
    text: str
    grounding_references: list[GroundingReference] = field(default_factory=list)


@dataclass(frozen=True)
class RecommendationRecord:
    id: str
    name: str
    description: str
    image_url: str
    rating: Optional[str] = None
    map_url: Optional[str] = None

    @property
    def rating_value(self) -> float:
        """Numeric reading of the rating text; 0.0 when absent or non-numeric."""
        return leading_number(self.rating)

    def to_dict(self) -> dict[str, Any]:
        # camelCase keys match the format the browser build kept in localStorage
        out: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "rating": self.rating,
            "imageUrl": self.image_url,
        }
        if self.map_url:
            out["mapUrl"] = self.map_url
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecommendationRecord":
        rating = data.get("rating")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            image_url=str(data.get("imageUrl") or data.get("image_url") or ""),
            rating=str(rating) if rating is not None else None,
            map_url=data.get("mapUrl") or data.get("map_url") or None,
        )


class AppStatus(str, Enum):
    IDLE = "idle"
    LOADING_LOCATION = "loading_location"
    LOADING_RESTAURANTS = "loading_restaurants"
    SUCCESS = "success"
    ERROR = "error"
