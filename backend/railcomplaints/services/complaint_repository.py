"""
Owner-scoped persistence for complaints.

Every function takes the owner id from the authenticated identity. A
complaint owned by someone else is reported exactly like a missing one.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional
from sqlalchemy import and_, case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from railcomplaints.core.errors import NotFoundError, StorageError
from railcomplaints.models.complaint import Complaint
from railcomplaints.schemas.complaint import ComplaintCreate, Severity

logger = logging.getLogger(__name__)

COMPLAINT_NOT_FOUND_MESSAGE = "Complaint not found"


@dataclass(frozen=True)
class ComplaintStats:
    total: int
    high: int
    medium: int
    low: int
    today: int


def to_utc_naive(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC; naive input is taken to be UTC already"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value)


def _load_json(value: Optional[str], complaint_id: str, field: str) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError:
        logger.warning("Stored %s for complaint %s is not valid JSON", field, complaint_id)
        return None


def _rehydrate(row: Complaint) -> Dict[str, Any]:
    """Turn a stored row back into structured data"""
    return {
        "id": row.id,
        "user_id": row.owner_id,
        "text": row.text,
        "category": row.category,
        "final_category": row.final_category,
        "severity": row.severity,
        "priority_flag": row.priority_flag,
        "confidence": row.confidence,
        "confidence_category": row.confidence_category,
        "confidence_severity": row.confidence_severity,
        "location": row.location,
        "coordinates": _load_json(row.coordinates, row.id, "coordinates"),
        "zone": row.zone,
        "train_no": row.train_no,
        "timestamp": row.timestamp,
        "ai_analysis": _load_json(row.ai_analysis, row.id, "aiAnalysis"),
    }


def create(db: Session, owner_id: int, complaint: ComplaintCreate) -> Dict[str, Any]:
    """Persist a complaint for owner_id; raises StorageError on duplicate id or I/O failure"""
    coordinates = complaint.coordinates.model_dump() if complaint.coordinates else None
    # ComplaintCreate has already normalized the timestamp to naive UTC
    timestamp = complaint.timestamp or _utcnow()

    db_complaint = Complaint(
        id=complaint.id,
        owner_id=owner_id,
        text=complaint.text,
        category=complaint.category,
        final_category=complaint.final_category,
        severity=complaint.severity.value,
        priority_flag=complaint.priority_flag,
        confidence=complaint.confidence,
        confidence_category=complaint.confidence_category,
        confidence_severity=complaint.confidence_severity,
        location=complaint.location,
        coordinates=_dump_json(coordinates),
        zone=complaint.zone,
        train_no=complaint.train_no,
        timestamp=timestamp,
        ai_analysis=_dump_json(complaint.ai_analysis),
    )
    try:
        db.add(db_complaint)
        db.commit()
    except SQLAlchemyError:
        # Duplicate ids land here too (IntegrityError)
        db.rollback()
        logger.exception("Failed to save complaint %s for user %s", complaint.id, owner_id)
        raise StorageError("Error saving complaint")

    db.refresh(db_complaint)
    logger.info("Saved complaint %s for user %s", db_complaint.id, owner_id)
    return _rehydrate(db_complaint)


def list_by_owner(db: Session, owner_id: int) -> List[Dict[str, Any]]:
    """All complaints of owner_id, most recent first"""
    try:
        rows = (
            db.query(Complaint)
            .filter(Complaint.owner_id == owner_id)
            .order_by(Complaint.timestamp.desc(), Complaint.id.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to list complaints for user %s", owner_id)
        raise StorageError()
    return [_rehydrate(row) for row in rows]


def get_by_id_for_owner(db: Session, owner_id: int, complaint_id: str) -> Dict[str, Any]:
    """Fetch one complaint; raises NotFoundError if it is missing or owned by another user"""
    try:
        # Filtering on both columns keeps "not yours" identical to "does not exist"
        row = db.query(Complaint).filter(
            Complaint.id == complaint_id,
            Complaint.owner_id == owner_id
        ).first()
    except SQLAlchemyError:
        logger.exception("Failed to load complaint %s", complaint_id)
        raise StorageError()

    if row is None:
        raise NotFoundError(COMPLAINT_NOT_FOUND_MESSAGE)
    return _rehydrate(row)


def today_bounds_utc(tz: tzinfo, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """[start, end) of the current calendar day in tz, as naive UTC"""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    local_today = now.astimezone(tz).date()
    start = datetime.combine(local_today, time.min, tzinfo=tz)
    end = datetime.combine(local_today + timedelta(days=1), time.min, tzinfo=tz)
    return to_utc_naive(start), to_utc_naive(end)


def stats_for_owner(db: Session, owner_id: int, tz: tzinfo, now: Optional[datetime] = None) -> ComplaintStats:
    """Severity and same-day counts for owner_id, computed at query time"""
    start, end = today_bounds_utc(tz, now)

    def count_where(condition):
        return func.count(case((condition, 1)))

    try:
        total, high, medium, low, today = db.query(
            func.count(Complaint.id),
            count_where(Complaint.severity == Severity.HIGH.value),
            count_where(Complaint.severity == Severity.MEDIUM.value),
            count_where(Complaint.severity == Severity.LOW.value),
            count_where(and_(Complaint.timestamp >= start, Complaint.timestamp < end)),
        ).filter(Complaint.owner_id == owner_id).one()
    except SQLAlchemyError:
        logger.exception("Failed to compute stats for user %s", owner_id)
        raise StorageError()

    return ComplaintStats(total=total, high=high, medium=medium, low=low, today=today)
