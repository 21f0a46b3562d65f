from sqlalchemy import Column, Date, DateTime, String, Text
from sqlalchemy.orm import relationship
from database import Base
from utils.time_utils import clinic_now

class Diagnosis(Base):
    __tablename__ = "diagnosis"

    id = Column(String(50), primary_key=True, index=True)
    doctor_id = Column(String(50), nullable=False, index=True)
    patient_id = Column(String(50), nullable=False, index=True)
    diagnosis = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), default=clinic_now)
    next_checkup = Column(Date, nullable=True)

    # Prescription items belong to their diagnosis and go with it
    prescription_items = relationship(
        "PrescriptionItem",
        back_populates="diagnosis",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
