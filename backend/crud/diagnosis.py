import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.diagnosis import Diagnosis as DiagnosisModel
from schemas.diagnosis import DiagnosisCreate

logger = logging.getLogger(__name__)

def get_diagnosis(db: Session, diagnosis_id: str):
    return db.query(DiagnosisModel).filter(DiagnosisModel.id == diagnosis_id).first()

def create_diagnosis(db: Session, diagnosis: DiagnosisCreate):
    db_diagnosis = DiagnosisModel(**diagnosis.model_dump())
    db.add(db_diagnosis)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Diagnosis '{diagnosis.id}' already exists.")
    db.refresh(db_diagnosis)
    return db_diagnosis

def delete_diagnosis(db: Session, diagnosis_id: str) -> bool:
    """Delete a diagnosis together with its prescription items and their compliance records."""
    db_diagnosis = get_diagnosis(db, diagnosis_id)
    if not db_diagnosis:
        return False
    db.delete(db_diagnosis)
    db.commit()
    logger.info("Diagnosis %s deleted", diagnosis_id)
    return True
