from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from railcomplaints.api.dependencies import get_current_identity
from railcomplaints.core.database import get_db
from railcomplaints.core.errors import RailComplaintsError, as_http_exception
from railcomplaints.schemas.complaint import ComplaintCreate, ComplaintCreated, ComplaintOut
from railcomplaints.services import complaint_repository
from railcomplaints.services.session_issuer import Identity

router = APIRouter(prefix="/complaints", tags=["complaints"])


@router.get("", response_model=List[ComplaintOut])
def list_complaints(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """List all complaints for the current user, newest first"""
    try:
        return complaint_repository.list_by_owner(db, identity.user_id)
    except RailComplaintsError as exc:
        raise as_http_exception(exc)


@router.post("", response_model=ComplaintCreated, status_code=status.HTTP_201_CREATED)
def create_complaint(
    complaint: ComplaintCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Save a complaint for the current user"""
    try:
        saved = complaint_repository.create(db, identity.user_id, complaint)
    except RailComplaintsError as exc:
        raise as_http_exception(exc)

    return {"message": "Complaint saved successfully", "complaint_id": saved["id"]}


@router.get("/{complaint_id}", response_model=ComplaintOut)
def get_complaint(
    complaint_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Get a specific complaint"""
    try:
        return complaint_repository.get_by_id_for_owner(db, identity.user_id, complaint_id)
    except RailComplaintsError as exc:
        raise as_http_exception(exc)
