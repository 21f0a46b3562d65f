from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database import get_db
import crud.diagnosis as crud_diagnosis
import logging
from schemas.diagnosis import Diagnosis, DiagnosisCreate

router = APIRouter(prefix="/diagnosis", tags=["diagnosis"])
logger = logging.getLogger(__name__)

@router.post("/", response_model=Diagnosis, status_code=201)
def create_diagnosis(diagnosis: DiagnosisCreate, db: Session = Depends(get_db)):
    try:
        return crud_diagnosis.create_diagnosis(db, diagnosis)
    except ValueError as e:
        logger.warning("Creating diagnosis %s failed: %s", diagnosis.id, e)
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/{diagnosis_id}", response_model=Diagnosis)
def get_diagnosis(diagnosis_id: str, db: Session = Depends(get_db)):
    db_diagnosis = crud_diagnosis.get_diagnosis(db, diagnosis_id)
    if db_diagnosis is None:
        raise HTTPException(status_code=404, detail="Diagnosis not found")
    return db_diagnosis

@router.delete("/{diagnosis_id}")
def delete_diagnosis(diagnosis_id: str, db: Session = Depends(get_db)):
    """Delete a diagnosis and, with it, its prescription items."""
    if not crud_diagnosis.delete_diagnosis(db, diagnosis_id):
        raise HTTPException(status_code=404, detail="Diagnosis not found")
    logger.info("Diagnosis %s deleted with its prescription items", diagnosis_id)
    return {"message": "Diagnosis deleted successfully"}
