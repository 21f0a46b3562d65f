from pydantic import BaseModel
from datetime import datetime
from typing import Any, Optional

class PrescriptionItemBase(BaseModel):
    id: str
    diagnosis_id: str
    medication_id: int
    guide: Optional[str] = None
    duration: Optional[str] = None

class PrescriptionItemCreate(PrescriptionItemBase):
    # Taken as sent (no coercion of true/"3"/2.0); the issuance transaction
    # accepts only a positive int and raises InvalidQuantity otherwise
    quantity: Any

class PrescriptionItem(PrescriptionItemBase):
    quantity: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
