from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional

class DiagnosisBase(BaseModel):
    id: str
    doctor_id: str
    patient_id: str
    diagnosis: Optional[str] = None
    next_checkup: Optional[date] = None

class DiagnosisCreate(DiagnosisBase):
    pass

class Diagnosis(DiagnosisBase):
    date: Optional[datetime] = None

    class Config:
        from_attributes = True
