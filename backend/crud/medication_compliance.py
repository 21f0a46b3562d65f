from datetime import date
from typing import Optional
from sqlalchemy.orm import Session
from exceptions import PrescriptionItemNotFound
from models.medication_compliance import MedicationCompliance
from models.prescription_item import PrescriptionItem
from utils.time_utils import clinic_now, clinic_today

def mark_medication_taken(db: Session, prescription_item_id: str, taken_date: Optional[date] = None):
    """Record that the patient took a dose of a prescribed medication."""
    exists = db.query(PrescriptionItem.id).filter(PrescriptionItem.id == prescription_item_id).first()
    if not exists:
        raise PrescriptionItemNotFound(prescription_item_id)

    record = MedicationCompliance(
        prescription_item_id=prescription_item_id,
        taken_date=taken_date or clinic_today(),
        taken_at=clinic_now(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record

def get_compliance_records(db: Session, prescription_item_id: str):
    return (
        db.query(MedicationCompliance)
        .filter(MedicationCompliance.prescription_item_id == prescription_item_id)
        .order_by(MedicationCompliance.taken_at.desc(), MedicationCompliance.id.desc())
        .all()
    )
