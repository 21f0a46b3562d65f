from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from utils.time_utils import clinic_now

ADDITION = "addition"
DEDUCTION = "deduction"

class MedicationAudit(Base):
    """Append-only record of one committed stock change. Written only by the stock audit hook."""
    __tablename__ = "medication_audit"

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False, index=True)
    old_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)
    change_type = Column(String, nullable=False)  # "addition" or "deduction"
    changed_at = Column(DateTime(timezone=True), default=clinic_now, nullable=False)
    staff_id = Column(String, nullable=False)

    medication = relationship("Medication", back_populates="audits")
