from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud.medication_compliance import mark_medication_taken, get_compliance_records
from exceptions import ClinicError
from schemas.medication_compliance import MedicationCompliance, MedicationComplianceCreate
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/compliance", tags=["medication compliance"])
logger = logging.getLogger(__name__)

@router.post("/{prescription_item_id}/taken", response_model=MedicationCompliance, status_code=201)
def mark_taken_endpoint(
    prescription_item_id: str,
    payload: Optional[MedicationComplianceCreate] = None,
    db: Session = Depends(get_db)
):
    """Marks a dose of a prescribed medication as taken."""
    taken_date = payload.taken_date if payload else None
    try:
        return mark_medication_taken(db, prescription_item_id, taken_date=taken_date)
    except ClinicError as e:
        logger.warning("Marking %s as taken failed: %s %s", prescription_item_id, e.code, e.message)
        raise to_http_exception(e)

@router.get("/{prescription_item_id}", response_model=List[MedicationCompliance])
def get_compliance_endpoint(prescription_item_id: str, db: Session = Depends(get_db)):
    return get_compliance_records(db, prescription_item_id)
