from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional

class MedicationComplianceCreate(BaseModel):
    taken_date: Optional[date] = None

class MedicationCompliance(BaseModel):
    id: int
    prescription_item_id: str
    taken_date: date
    taken_at: datetime

    class Config:
        from_attributes = True
