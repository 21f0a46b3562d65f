"""
Medication stock audit hook.

Every change to a medication row must be attributable to a staff member, and
every change to its stock must leave exactly one MedicationAudit row behind.
Instead of a database trigger, this runs as a SQLAlchemy ``before_flush``
listener, so it executes inside the same transaction as the change itself:

    session.flush()
         |
         v
    [before_flush] --> audit_medication_stock()
         |                 |-- no actor on the session --> UnauthorizedStockUpdate
         |                 |-- stock old != new --------> session.add(MedicationAudit)
         v
    UPDATE medications ... ; INSERT INTO medication_audit ...
         |
         v
    COMMIT (both rows) or ROLLBACK (neither)

The hook only checks attribution and records deltas. Whether a change is
allowed business-wise (enough stock, positive quantity) is decided by the
caller before it touches the row.
"""

import logging

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from exceptions import UnauthorizedStockUpdate
from utils.actor_context import get_current_staff_id
from utils.time_utils import clinic_now

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("security")


def _stock_change(medication):
    """Return (old, new) stock if the pending flush changes it, else None."""
    history = inspect(medication).attrs.stock_quantity.history
    if not history.added or not history.deleted:
        return None
    old, new = history.deleted[0], history.added[0]
    if old == new:
        return None
    return old, new


def audit_medication_stock(session, flush_context, instances):
    # Inline imports: models import database, which registers this listener
    from models.medication import Medication
    from models.medication_audit import MedicationAudit, ADDITION, DEDUCTION

    for medication in list(session.dirty):
        if not isinstance(medication, Medication):
            continue
        # Attribute set to its current value: nothing will be written
        if not session.is_modified(medication, include_collections=False):
            continue

        staff_id = get_current_staff_id(session)
        if not staff_id:
            security_logger.warning(
                "Rejected unattributed update of medication %s (stock history: %s)",
                medication.id,
                inspect(medication).attrs.stock_quantity.history,
            )
            raise UnauthorizedStockUpdate(medication.id)

        change = _stock_change(medication)
        if change is None:
            continue
        old_quantity, new_quantity = change

        session.add(
            MedicationAudit(
                medication_id=medication.id,
                old_quantity=old_quantity,
                new_quantity=new_quantity,
                change_type=ADDITION if new_quantity > old_quantity else DEDUCTION,
                changed_at=clinic_now(),
                staff_id=staff_id,
            )
        )
        logger.debug(
            "Stock of medication %s changed %s -> %s by %s",
            medication.id, old_quantity, new_quantity, staff_id,
        )


def register_stock_audit_listener():
    """Attach the audit hook to every Session. Safe to call more than once."""
    if not event.contains(Session, "before_flush", audit_medication_stock):
        event.listen(Session, "before_flush", audit_medication_stock)
