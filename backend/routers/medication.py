from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session
from database import get_db
import crud.medication as crud_medication
import logging
from typing import List, Optional
from exceptions import ClinicError
from schemas.medication import Medication, MedicationCreate, MedicationRestock, MedicationStockUpdate
from schemas.medication_audit import MedicationAudit
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/medication", tags=["medication"])
logger = logging.getLogger("medication")

@router.get("/all/", response_model=List[Medication])
def get_all_medications(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """Get all medications with pagination."""
    return crud_medication.get_all_medications(db, skip=skip, limit=limit)

@router.get("/{medication_id}", response_model=Medication)
def get_medication(medication_id: int, db: Session = Depends(get_db)):
    """Get a specific medication by ID."""
    db_medication = crud_medication.get_medication(db, medication_id=medication_id)
    if db_medication is None:
        raise HTTPException(status_code=404, detail="Medication not found")
    return db_medication

@router.post("/", response_model=Medication, status_code=201)
def create_medication(
    medication: MedicationCreate,
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None)
):
    """Create a new medication with its initial stock."""
    try:
        return crud_medication.create_medication(db=db, medication=medication, changed_by=x_user_id)
    except ClinicError as e:
        logger.warning("Creating medication %s failed: %s %s", medication.name, e.code, e.message)
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.patch("/{medication_id}/stock", response_model=Medication)
def update_medication_stock(
    medication_id: int,
    stock_data: MedicationStockUpdate,
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None)
):
    """Set the stock quantity and/or unit price of a medication. Requires X-User-ID."""
    try:
        return crud_medication.update_medication_stock(db, medication_id, stock_data, changed_by=x_user_id)
    except ClinicError as e:
        logger.warning("Stock change on medication %s by %s failed: %s %s", medication_id, x_user_id, e.code, e.message)
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/{medication_id}/restock", response_model=Medication)
def restock_medication(
    medication_id: int,
    restock: MedicationRestock,
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None)
):
    """Add units to the stock of a medication. Requires X-User-ID."""
    try:
        return crud_medication.restock_medication(db, medication_id, restock.quantity, changed_by=x_user_id)
    except ClinicError as e:
        logger.warning("Stock change on medication %s by %s failed: %s %s", medication_id, x_user_id, e.code, e.message)
        raise to_http_exception(e)

@router.get("/{medication_id}/audit/", response_model=List[MedicationAudit])
def get_medication_audit(
    medication_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    if crud_medication.get_medication(db, medication_id=medication_id) is None:
        raise HTTPException(status_code=404, detail="Medication not found")
    return crud_medication.get_medication_audits(db, medication_id, start_date=start_date, end_date=end_date)
