from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from errors import ActionUnavailable, LocationUnavailable
from models import GeoPoint, RecommendationRecord
from services.favorites import FavoritesService, FavoritesStore
from services.gemini_client import GeminiProvider
from services.recommendations import RecommendationService
from services.session import DinnerSession, SessionManager

load_dotenv()

app = FastAPI(title="Dinner Picker")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_config() -> Configuration:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return cfg


@lru_cache(maxsize=1)
def get_service() -> RecommendationService:
    cfg = get_config()
    return RecommendationService(GeminiProvider(cfg), lang=cfg.lang_default)


@lru_cache(maxsize=1)
def get_favorites() -> FavoritesService:
    cfg = get_config()
    return FavoritesService(FavoritesStore(cfg.favorites_path, cfg.favorites_key))


@lru_cache(maxsize=1)
def get_sessions() -> SessionManager:
    return SessionManager(ttl_sec=get_config().session_ttl_sec)


class LocationRequest(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(None, ge=-180.0, le=180.0)
    error: Optional[str] = Field(None, description="Set when the browser could not provide a position")


class CuisineRequest(BaseModel):
    cuisine: str = Field(..., min_length=1)


class RecordPayload(BaseModel):
    id: str
    name: str
    description: str = ""
    rating: Optional[str] = None
    mapUrl: Optional[str] = None
    imageUrl: str
    ratingValue: float = 0.0
    isFavorite: bool = False


class SessionPayload(BaseModel):
    status: str
    error: Optional[str] = None
    location: Optional[Dict[str, float]] = None
    actionsDisabled: bool
    cuisineOptions: List[str] = []
    selectedCuisine: str = ""
    restaurants: List[RecordPayload] = []
    favorites: List[RecordPayload] = []


def _record_payload(record: RecommendationRecord, favorite_ids: set[str]) -> RecordPayload:
    data: Dict[str, Any] = record.to_dict()
    return RecordPayload(
        **data,
        ratingValue=record.rating_value,
        isFavorite=record.id in favorite_ids,
    )


def _session_payload(session: DinnerSession, favorites: FavoritesService) -> SessionPayload:
    ids = favorites.ids()
    loc = session.location
    return SessionPayload(
        status=session.status.value,
        error=session.error,
        location={"latitude": loc.latitude, "longitude": loc.longitude} if loc else None,
        actionsDisabled=session.actions_disabled,
        cuisineOptions=session.cuisine_options,
        selectedCuisine=session.selected_cuisine,
        restaurants=[_record_payload(r, ids) for r in session.restaurants],
        favorites=[_record_payload(r, ids) for r in favorites.list()],
    )


@app.get("/healthz")
def healthz(cfg: Configuration = Depends(get_config)) -> dict:
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok"}


@app.get("/favicon.ico")
def favicon() -> Response:
    # Avoid noisy 404 in logs if browser asks for favicon
    return Response(status_code=204)


@app.get("/sessions/{session_id}", response_model=SessionPayload)
def get_session(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions),
    favorites: FavoritesService = Depends(get_favorites),
) -> SessionPayload:
    return _session_payload(sessions.get(session_id), favorites)


@app.post("/sessions/{session_id}/location", response_model=SessionPayload)
async def set_location(
    session_id: str,
    req: LocationRequest,
    sessions: SessionManager = Depends(get_sessions),
    service: RecommendationService = Depends(get_service),
    favorites: FavoritesService = Depends(get_favorites),
) -> SessionPayload:
    session = sessions.get(session_id)
    try:
        session.start_locating()
        if req.error or req.latitude is None or req.longitude is None:
            session.location_failed(service, req.error)
        else:
            point = GeoPoint(latitude=req.latitude, longitude=req.longitude)
            await asyncio.to_thread(session.location_acquired, point, service)
    except ActionUnavailable as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _session_payload(session, favorites)


@app.post("/sessions/{session_id}/cuisine", response_model=SessionPayload)
def select_cuisine(
    session_id: str,
    req: CuisineRequest,
    sessions: SessionManager = Depends(get_sessions),
    favorites: FavoritesService = Depends(get_favorites),
) -> SessionPayload:
    session = sessions.get(session_id)
    session.select_cuisine(req.cuisine.strip())
    return _session_payload(session, favorites)


async def _run_action(action: Any, service: RecommendationService) -> None:
    try:
        await asyncio.to_thread(action, service)
    except (LocationUnavailable, ActionUnavailable) as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@app.post("/sessions/{session_id}/find-dinner", response_model=SessionPayload)
async def find_dinner(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions),
    service: RecommendationService = Depends(get_service),
    favorites: FavoritesService = Depends(get_favorites),
) -> SessionPayload:
    session = sessions.get(session_id)
    await _run_action(session.find_dinner, service)
    return _session_payload(session, favorites)


@app.post("/sessions/{session_id}/surprise", response_model=SessionPayload)
async def surprise_me(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions),
    service: RecommendationService = Depends(get_service),
    favorites: FavoritesService = Depends(get_favorites),
) -> SessionPayload:
    session = sessions.get(session_id)
    await _run_action(session.surprise_me, service)
    return _session_payload(session, favorites)


@app.get("/favorites", response_model=List[RecordPayload])
def list_favorites(favorites: FavoritesService = Depends(get_favorites)) -> List[RecordPayload]:
    ids = favorites.ids()
    return [_record_payload(r, ids) for r in favorites.list()]


@app.post("/favorites/toggle", response_model=RecordPayload)
def toggle_favorite(
    req: RecordPayload,
    favorites: FavoritesService = Depends(get_favorites),
) -> RecordPayload:
    record = RecommendationRecord.from_dict(req.model_dump())
    if not record.name or not record.image_url:
        raise HTTPException(status_code=400, detail="name and imageUrl are required")
    favorites.toggle(record)
    return _record_payload(record, favorites.ids())


@app.delete("/favorites/{record_id}")
def delete_favorite(
    record_id: str,
    favorites: FavoritesService = Depends(get_favorites),
) -> dict:
    if not favorites.remove(record_id):
        raise HTTPException(status_code=404, detail="not a favorite")
    return {"removed": record_id}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
