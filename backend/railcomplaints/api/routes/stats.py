from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from railcomplaints.api.dependencies import get_current_identity, get_settings
from railcomplaints.core.config import Settings
from railcomplaints.core.database import get_db
from railcomplaints.core.errors import RailComplaintsError, as_http_exception
from railcomplaints.schemas.stats import StatsResponse
from railcomplaints.services import complaint_repository
from railcomplaints.services.session_issuer import Identity

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
def get_stats(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Complaint counts for the current user"""
    try:
        stats = complaint_repository.stats_for_owner(
            db, identity.user_id, settings.get_timezone())
    except RailComplaintsError as exc:
        raise as_http_exception(exc)

    return {
        "total_complaints": stats.total,
        "high_severity": stats.high,
        "medium_severity": stats.medium,
        "low_severity": stats.low,
        "today_complaints": stats.today,
    }
