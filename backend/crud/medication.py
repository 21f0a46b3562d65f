import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from exceptions import ClinicError, InvalidQuantity, MedicationNotFound, StockUpdateFailed
from models.medication import Medication as MedicationModel
from models.medication_audit import MedicationAudit
from schemas.medication import MedicationCreate, MedicationStockUpdate
from utils.actor_context import acting_as

logger = logging.getLogger(__name__)


def is_positive_int(value) -> bool:
    # bool is an int subclass; True must not count as a quantity of one
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_non_negative_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def get_medication(db: Session, medication_id: int):
    return db.query(MedicationModel).filter(MedicationModel.id == medication_id).first()

def get_all_medications(db: Session, skip: int = 0, limit: int = 100):
    return db.query(MedicationModel).order_by(MedicationModel.id).offset(skip).limit(limit).all()

def lock_medication(db: Session, medication_id: int) -> Optional[MedicationModel]:
    """
    Read a medication row and hold an exclusive lock on it until the transaction ends.

    populate_existing makes sure the stock value comes from the locked read and not
    from an instance the session loaded earlier.
    """
    return db.execute(
        select(MedicationModel)
        .where(MedicationModel.id == medication_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()

def create_medication(db: Session, medication: MedicationCreate, changed_by: str = None):
    if not is_non_negative_int(medication.stock_quantity):
        raise InvalidQuantity(medication.stock_quantity)
    if medication.unit_price < 0:
        raise ValueError("Unit price cannot be negative.")

    db_medication = MedicationModel(
        name=medication.name,
        description=medication.description,
        stock_quantity=medication.stock_quantity,
        unit_price=medication.unit_price,
        created_by=changed_by,
        updated_by=changed_by,
    )
    db.add(db_medication)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Medication '{medication.name}' already exists.")
    db.refresh(db_medication)
    logger.info("Medication %s (%s) created with stock %s by %s",
                db_medication.id, db_medication.name, db_medication.stock_quantity, changed_by)
    return db_medication

def _commit_stock_change(db: Session, medication_id: int, changed_by: Optional[str], apply):
    """
    Lock the medication, let ``apply`` change it, and commit as ``changed_by``.

    The audit hook writes the MedicationAudit row in the same commit, or rejects
    the change when no staff member is given. Every failure rolls back.
    """
    try:
        with acting_as(db, changed_by):
            db_medication = lock_medication(db, medication_id)
            if db_medication is None:
                raise MedicationNotFound(medication_id)
            apply(db_medication)
            db_medication.updated_by = changed_by
            db.commit()
    except ClinicError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Stock update of medication %s failed", medication_id)
        raise StockUpdateFailed() from None

    db.refresh(db_medication)
    return db_medication

def restock_medication(db: Session, medication_id: int, quantity: int, changed_by: str = None):
    """Add ``quantity`` units to the stock of a medication."""
    if not is_positive_int(quantity):
        raise InvalidQuantity(quantity)

    def _add(db_medication):
        db_medication.stock_quantity = db_medication.stock_quantity + quantity

    db_medication = _commit_stock_change(db, medication_id, changed_by, _add)
    logger.info("Medication %s restocked by %s units by %s", medication_id, quantity, changed_by)
    return db_medication

def update_medication_stock(db: Session, medication_id: int, stock_data: MedicationStockUpdate, changed_by: str = None):
    """Set stock quantity and/or unit price to absolute values."""
    if stock_data.stock_quantity is not None and not is_non_negative_int(stock_data.stock_quantity):
        raise InvalidQuantity(stock_data.stock_quantity)
    if stock_data.unit_price is not None and stock_data.unit_price < Decimal("0"):
        raise ValueError("Unit price cannot be negative.")

    def _set(db_medication):
        if stock_data.stock_quantity is not None:
            db_medication.stock_quantity = stock_data.stock_quantity
        if stock_data.unit_price is not None:
            db_medication.unit_price = stock_data.unit_price

    return _commit_stock_change(db, medication_id, changed_by, _set)

def get_medication_audits(
    db: Session,
    medication_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
):
    query = db.query(MedicationAudit).filter(MedicationAudit.medication_id == medication_id)

    if start_date:
        query = query.filter(MedicationAudit.changed_at >= start_date)
    if end_date:
        # end_date is inclusive: keep everything before the following midnight
        query = query.filter(MedicationAudit.changed_at < end_date + timedelta(days=1))

    return query.order_by(MedicationAudit.id).all()
