import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.commands.sweep_expired_command import SweepExpiredCommand
from app.config import get_settings
from app.db import get_db
from app.schemas.maintenance import SweepResult

router = APIRouter(
    tags=["system"],
    responses={404: {"description": "Not found"}},
)


@router.get("/health")
def health() -> dict:
    """Liveness probe."""
    s = get_settings()
    return {"status": "ok", "app": s.app_name, "environment": s.environment}


def verify_sweep_secret(
    x_sweep_secret: Optional[str] = Header(None, alias="X-Sweep-Secret"),
) -> None:
    """The sweep address only exists when SWEEP_SECRET is configured."""
    expected = get_settings().sweep_secret
    if not expected:
        raise HTTPException(status_code=404, detail="Not Found")
    if not x_sweep_secret or not hmac.compare_digest(x_sweep_secret, expected):
        raise HTTPException(status_code=403, detail="Invalid sweep secret")


@router.post(
    "/api/maintenance/sweep",
    response_model=SweepResult,
    dependencies=[Depends(verify_sweep_secret)],
)
def sweep_expired(db: Session = Depends(get_db)) -> SweepResult:
    """Purge every expired note and chat now instead of waiting for the beat schedule."""
    return SweepExpiredCommand(db).execute()
