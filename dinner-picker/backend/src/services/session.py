from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger

from errors import ActionUnavailable, LocationUnavailable, RecommendationFailed
from models import AppStatus, GeoPoint, RecommendationRecord
from services.recommendations import RecommendationService

BUSY_STATES = {AppStatus.LOADING_LOCATION, AppStatus.LOADING_RESTAURANTS}


@dataclass
class DinnerSession:
    """Per-diner state: Idle -> LoadingLocation -> Idle|Error, then
    Idle -> LoadingRestaurants -> Success|Error for every request."""

    status: AppStatus = AppStatus.IDLE
    error: Optional[str] = None
    location: Optional[GeoPoint] = None
    cuisine_options: List[str] = field(default_factory=list)
    selected_cuisine: str = ""
    restaurants: List[RecommendationRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def actions_disabled(self) -> bool:
        return self.status in BUSY_STATES or self.location is None

    def start_locating(self) -> None:
        with self._lock:
            self._refuse_while_fetching()
            self.status = AppStatus.LOADING_LOCATION
            self.error = None

    def location_acquired(self, point: GeoPoint, service: RecommendationService) -> None:
        with self._lock:
            self._refuse_while_fetching()
            self.location = point
            self.status = AppStatus.IDLE
            self.error = None
        labels = service.fetch_nearby_cuisine_labels(point)
        self._set_cuisines(labels or list(service.text.fallback_cuisines))

    def location_failed(self, service: RecommendationService, reason: Optional[str] = None) -> None:
        logger.warning("location unavailable: {}", reason or "no position")
        with self._lock:
            self._refuse_while_fetching()
            self.status = AppStatus.ERROR
            self.error = service.text.location_failed
        self._set_cuisines(list(service.text.fallback_cuisines))

    def select_cuisine(self, cuisine: str) -> None:
        self.selected_cuisine = cuisine

    def find_dinner(self, service: RecommendationService) -> List[RecommendationRecord]:
        if not self.selected_cuisine:
            raise ActionUnavailable("no cuisine selected")
        location = self._begin(service)
        return self._run(service.fetch_by_cuisine, location, self.selected_cuisine)

    def surprise_me(self, service: RecommendationService) -> List[RecommendationRecord]:
        location = self._begin(service)
        return self._run(service.fetch_random, location)

    def _begin(self, service: RecommendationService) -> GeoPoint:
        with self._lock:
            if self.location is None:
                raise LocationUnavailable(service.text.location_missing)
            if self.status in BUSY_STATES:
                raise ActionUnavailable(f"request already in progress ({self.status.value})")
            self.status = AppStatus.LOADING_RESTAURANTS
            self.error = None
            self.restaurants = []
            return self.location

    def _refuse_while_fetching(self) -> None:
        if self.status is AppStatus.LOADING_RESTAURANTS:
            raise ActionUnavailable("restaurant request in progress")

    def _run(self, fetch: Any, *args: Any) -> List[RecommendationRecord]:
        try:
            results = fetch(*args)
        except RecommendationFailed as exc:
            self.error = exc.message
            self.status = AppStatus.ERROR
            self.restaurants = []
            return []
        self.restaurants = results
        self.status = AppStatus.SUCCESS
        return results

    def _set_cuisines(self, options: List[str]) -> None:
        self.cuisine_options = list(dict.fromkeys(options))
        if self.cuisine_options:
            self.selected_cuisine = self.cuisine_options[0]


class SessionManager:
    """Simple in-memory session manager."""

    def __init__(self, ttl_sec: int = 3600) -> None:
        self._sessions: Dict[str, DinnerSession] = {}
        self._last_access: Dict[str, float] = {}
        self.ttl_sec = ttl_sec

    def get(self, session_id: str) -> DinnerSession:
        """Return the session, creating a fresh one if unknown or expired."""
        self._cleanup()
        self._last_access[session_id] = time.time()
        session = self._sessions.get(session_id)
        if session is None:
            session = self._sessions[session_id] = DinnerSession()
        return session

    def reset(self, session_id: str) -> None:
        if not session_id:
            return
        self._sessions.pop(session_id, None)
        self._last_access.pop(session_id, None)

    def _cleanup(self) -> None:
        """Remove expired sessions."""
        now = time.time()
        expired = [
            sid for sid, last in self._last_access.items()
            if now - last > self.ttl_sec
        ]
        for sid in expired:
            self._sessions.pop(sid, None)
            del self._last_access[sid]
