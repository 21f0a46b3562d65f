from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from database import Base
from utils.time_utils import clinic_now, clinic_today

class MedicationCompliance(Base):
    """One "dose taken" mark by a patient. Append-only."""
    __tablename__ = "medication_compliance"

    id = Column(Integer, primary_key=True, index=True)
    prescription_item_id = Column(
        String(50), ForeignKey("prescription_item.id", ondelete="CASCADE"), nullable=False, index=True
    )
    taken_date = Column(Date, default=clinic_today, nullable=False)
    taken_at = Column(DateTime(timezone=True), default=clinic_now, nullable=False)

    prescription_item = relationship("PrescriptionItem", back_populates="compliance_records")
