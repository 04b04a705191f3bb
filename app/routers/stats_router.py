from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.stats import StatsResponse
from app.services.stats_service import StatsService

stats_router = APIRouter(prefix="/api/stats", tags=["Stats"])


@stats_router.get("", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)) -> StatsResponse:
    """Aggregated note and chat creation counts."""
    return StatsService(db).get_stats()
