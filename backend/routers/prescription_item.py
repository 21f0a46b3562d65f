from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud.prescription_item import (
    get_prescription_item,
    get_prescription_items_for_diagnosis,
    issue_prescription_item,
)
from exceptions import ClinicError
from schemas.prescription_item import PrescriptionItem, PrescriptionItemCreate
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/prescription", tags=["prescription"])
logger = logging.getLogger(__name__)

@router.post("/issue", response_model=PrescriptionItem, status_code=201)
def issue_prescription_item_endpoint(
    item: PrescriptionItemCreate,
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None)
):
    """
    Dispenses a quantity of a medication against a diagnosis, decrementing stock.
    The doctor issuing it is taken from the X-User-ID header.
    """
    try:
        return issue_prescription_item(db, item, staff_id=x_user_id)
    except ClinicError as e:
        logger.warning("POST /prescription/issue %s by %s: %s %s", item.id, x_user_id, e.code, e.message)
        raise to_http_exception(e)

@router.get("/diagnosis/{diagnosis_id}", response_model=List[PrescriptionItem])
def get_prescription_items_endpoint(diagnosis_id: str, db: Session = Depends(get_db)):
    return get_prescription_items_for_diagnosis(db, diagnosis_id)

@router.get("/{prescription_item_id}", response_model=PrescriptionItem)
def get_prescription_item_endpoint(prescription_item_id: str, db: Session = Depends(get_db)):
    db_item = get_prescription_item(db, prescription_item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Prescription item not found")
    return db_item
