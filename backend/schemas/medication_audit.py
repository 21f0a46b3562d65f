from pydantic import BaseModel
from datetime import datetime

class MedicationAudit(BaseModel):
    id: int
    medication_id: int
    old_quantity: int
    new_quantity: int
    change_type: str
    changed_at: datetime
    staff_id: str

    class Config:
        from_attributes = True
