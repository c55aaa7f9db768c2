from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

# Client-generated ids look like CMP-4821
COMPLAINT_ID_PATTERN = r"^CMP-\d+$"


class Severity(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ComplaintCreate(BaseModel):
    """
    Body of POST /complaints.

    Fields are read by either spelling: camelCase (finalCategory, trainNo)
    or the column names the dashboard submits (final_category, priority_flag).
    Unknown fields, including any owner id the client sends, are ignored.
    Timestamps are normalized to naive UTC here, so out-of-range values are
    a validation error rather than a storage failure.
    """
    id: str = Field(..., max_length=32, pattern=COMPLAINT_ID_PATTERN)
    text: str = Field(..., min_length=1, max_length=5000)
    category: str = Field(..., min_length=1, max_length=100)
    final_category: Optional[str] = Field(None, max_length=100)
    severity: Severity
    priority_flag: Optional[str] = Field(None, max_length=50)
    confidence: Optional[float] = Field(None, ge=0, le=1)
    confidence_category: Optional[float] = Field(None, ge=0, le=1)
    confidence_severity: Optional[float] = Field(None, ge=0, le=1)
    location: Optional[str] = Field(None, max_length=255)
    coordinates: Optional[Coordinates] = None
    zone: Optional[str] = Field(None, max_length=50)
    train_no: Optional[str] = Field(None, max_length=50)
    timestamp: Optional[datetime] = None
    ai_analysis: Optional[Any] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Stored as naive UTC; naive input is taken to be UTC already
        if value is None or value.tzinfo is None:
            return value
        try:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise ValueError("timestamp is out of range")


class ComplaintCreated(BaseModel):
    message: str
    complaint_id: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ComplaintOut(BaseModel):
    """
    A stored complaint as the dashboard reads it: column names for the
    classification fields, camelCase for trainNo and aiAnalysis.
    """
    id: str
    user_id: int
    text: str
    category: str
    final_category: Optional[str] = None
    severity: str
    priority_flag: Optional[str] = None
    confidence: Optional[float] = None
    confidence_category: Optional[float] = None
    confidence_severity: Optional[float] = None
    location: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    zone: Optional[str] = None
    train_no: Optional[str] = Field(None, serialization_alias="trainNo")
    timestamp: datetime
    ai_analysis: Optional[Any] = Field(None, serialization_alias="aiAnalysis")

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime, _info):
        # Stored as naive UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
