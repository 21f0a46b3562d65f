from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

class MedicationBase(BaseModel):
    name: str
    description: Optional[str] = None
    unit_price: Decimal = Decimal("0")

# Quantities in request bodies are passed through uncoerced and checked in
# crud.medication, so a bool or a numeric string is an InvalidQuantity

class MedicationCreate(MedicationBase):
    stock_quantity: Any = 0

class MedicationStockUpdate(BaseModel):
    # Absolute values; omitted fields are left as they are
    stock_quantity: Any = None
    unit_price: Optional[Decimal] = None

class MedicationRestock(BaseModel):
    quantity: Any

class Medication(MedicationBase):
    id: int
    stock_quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True
