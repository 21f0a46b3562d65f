from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String, Text
from sqlalchemy.orm import column_property, relationship
from database import Base
from models.audit_mixin import TimestampMixin

class Medication(Base, TimestampMixin):
    __tablename__ = "medications"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_medications_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    # active_history loads the committed value before an overwrite so the audit hook
    # always sees old and new stock, even on an expired instance
    stock_quantity = column_property(
        Column(Integer, nullable=False, default=0),
        active_history=True,
    )
    unit_price = Column(Numeric(10, 2), nullable=False, default=0)

    audits = relationship("MedicationAudit", back_populates="medication", order_by="MedicationAudit.id")
    prescription_items = relationship("PrescriptionItem", back_populates="medication")
