from sqlalchemy import Column, DateTime, String
from utils.time_utils import clinic_now


class TimestampMixin:
    """Mixin that provides created/updated timestamps and the staff who made them.

    Timestamps are timezone-aware and taken in the clinic timezone
    (CLINIC_TIMEZONE, see utils.time_utils).
    """
    created_at = Column(DateTime(timezone=True), default=clinic_now)
    updated_at = Column(DateTime(timezone=True), onupdate=clinic_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
