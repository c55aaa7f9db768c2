from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from railcomplaints.core.database import Base


class Complaint(Base):
    """
    Complaint submitted by a user, optionally enriched by the client with
    the output of the external classification service.

    The primary key is generated by the client (CMP-####). coordinates and
    ai_analysis hold serialized JSON; the repository rehydrates them on read.
    """
    __tablename__ = "complaints"
    __table_args__ = (
        Index("ix_complaints_owner_timestamp", "owner_id", "timestamp"),
    )

    id = Column(String(32), primary_key=True)
    # Owner is always the authenticated user - never taken from the request body
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    text = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    final_category = Column(String(100), nullable=True)
    severity = Column(String(10), nullable=False)
    priority_flag = Column(String(50), nullable=True)
    confidence = Column(Float, nullable=True)
    confidence_category = Column(Float, nullable=True)
    confidence_severity = Column(Float, nullable=True)
    location = Column(String(255), nullable=True)
    coordinates = Column(Text, nullable=True)
    zone = Column(String(50), nullable=True)
    train_no = Column(String(50), nullable=True)
    # Naive UTC
    timestamp = Column(DateTime, nullable=False)
    ai_analysis = Column(Text, nullable=True)
