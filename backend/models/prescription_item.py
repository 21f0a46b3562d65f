from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from database import Base
from utils.time_utils import clinic_now

class PrescriptionItem(Base):
    """A dispensed quantity of one medication against a diagnosis. Never updated after insert."""
    __tablename__ = "prescription_item"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_prescription_item_quantity_positive"),
    )

    id = Column(String(50), primary_key=True, index=True)
    diagnosis_id = Column(String(50), ForeignKey("diagnosis.id", ondelete="CASCADE"), nullable=False, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    guide = Column(Text, nullable=True)
    duration = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=clinic_now)

    diagnosis = relationship("Diagnosis", back_populates="prescription_items")
    medication = relationship("Medication", back_populates="prescription_items")
    compliance_records = relationship(
        "MedicationCompliance",
        back_populates="prescription_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
