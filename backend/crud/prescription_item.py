import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud.medication import is_positive_int, lock_medication
from exceptions import (
    DiagnosisNotFound,
    InsufficientStock,
    InvalidQuantity,
    IssuanceError,
    IssuanceFailed,
    MedicationNotFound,
    UnauthorizedStockUpdate,
)
from models.diagnosis import Diagnosis
from models.medication import Medication
from models.prescription_item import PrescriptionItem
from schemas.prescription_item import PrescriptionItemCreate
from utils.actor_context import acting_as

logger = logging.getLogger(__name__)


def issue_prescription_item(db: Session, item: PrescriptionItemCreate, staff_id: str = None) -> PrescriptionItem:
    """
    Dispense ``item.quantity`` units of a medication against a diagnosis.

    Either both effects commit together (stock decremented, prescription item
    inserted, audit row written by the stock audit hook) or nothing does.
    Checks, in order:

    1. the medication exists (MedicationNotFound)
    2. the quantity is a positive integer (InvalidQuantity), before any row lock
    3. the diagnosis exists (DiagnosisNotFound)
    4. the locked stock covers the quantity (InsufficientStock)

    The medication row is read with SELECT ... FOR UPDATE, so concurrent
    issuances of the same medication run one after another and each sees the
    stock left by the previous commit. Storage failures (lock timeout,
    deadlock, lost connection, duplicate item id) are logged and raised as
    IssuanceFailed. Nothing is retried here.
    """
    try:
        with acting_as(db, staff_id):
            exists = db.query(Medication.id).filter(Medication.id == item.medication_id).first()
            if not exists:
                raise MedicationNotFound(item.medication_id)

            if not is_positive_int(item.quantity):
                raise InvalidQuantity(item.quantity)

            diagnosis = db.query(Diagnosis.id).filter(Diagnosis.id == item.diagnosis_id).first()
            if not diagnosis:
                raise DiagnosisNotFound(item.diagnosis_id)

            medication = lock_medication(db, item.medication_id)
            # Deleted between the existence check and the lock
            if medication is None:
                raise MedicationNotFound(item.medication_id)

            current_stock = medication.stock_quantity
            if current_stock < item.quantity:
                raise InsufficientStock(item.medication_id, item.quantity, current_stock)

            prescription_item = PrescriptionItem(
                id=item.id,
                diagnosis_id=item.diagnosis_id,
                medication_id=item.medication_id,
                quantity=item.quantity,
                guide=item.guide,
                duration=item.duration,
            )
            db.add(prescription_item)
            medication.stock_quantity = current_stock - item.quantity
            medication.updated_by = staff_id

            db.commit()
    except IssuanceError as e:
        db.rollback()
        logger.info("Issuance of %s rejected: %s", item.id, e.message)
        raise
    except UnauthorizedStockUpdate:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Issuance of prescription item %s (medication %s, diagnosis %s) failed",
            item.id, item.medication_id, item.diagnosis_id,
        )
        raise IssuanceFailed() from None

    db.refresh(prescription_item)
    logger.info(
        "Issued %s units of medication %s for diagnosis %s as item %s by %s (stock %s -> %s)",
        item.quantity, item.medication_id, item.diagnosis_id, item.id, staff_id,
        current_stock, current_stock - item.quantity,
    )
    return prescription_item


def get_prescription_item(db: Session, prescription_item_id: str):
    return db.query(PrescriptionItem).filter(PrescriptionItem.id == prescription_item_id).first()


def get_prescription_items_for_diagnosis(db: Session, diagnosis_id: str):
    return (
        db.query(PrescriptionItem)
        .filter(PrescriptionItem.diagnosis_id == diagnosis_id)
        .order_by(PrescriptionItem.created_at, PrescriptionItem.id)
        .all()
    )
