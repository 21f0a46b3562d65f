"""
Prescription issuance: validation order, atomicity and the stock invariant.
"""

import logging

import pytest
from sqlalchemy.exc import OperationalError

import crud.prescription_item as crud_prescription
from crud.prescription_item import issue_prescription_item
from exceptions import (
    DiagnosisNotFound,
    InsufficientStock,
    InvalidQuantity,
    IssuanceFailed,
    MedicationNotFound,
)
from models.medication_audit import DEDUCTION
from models.prescription_item import PrescriptionItem
from utils.actor_context import ACTOR_KEY

from conftest import DOCTOR_ID, audits_of, prescription, prescription_count, stock_of


class TestIssuanceScenario:
    """Stock 10: issue 4, then 7, then 0 and -1."""

    def test_issue_decrements_stock_and_records_item(self, db, medication_id):
        item = issue_prescription_item(db, prescription("RX-1", medication_id, 4), staff_id=DOCTOR_ID)

        assert item.id == "RX-1"
        assert item.quantity == 4
        assert item.created_at is not None
        assert stock_of(db, medication_id) == 6
        assert prescription_count(db) == 1

        audits = audits_of(db, medication_id)
        assert len(audits) == 1
        assert (audits[0].old_quantity, audits[0].new_quantity) == (10, 6)
        assert audits[0].change_type == DEDUCTION
        assert audits[0].staff_id == DOCTOR_ID

    def test_second_issue_beyond_stock_fails_and_changes_nothing(self, db, medication_id):
        issue_prescription_item(db, prescription("RX-1", medication_id, 4), staff_id=DOCTOR_ID)

        with pytest.raises(InsufficientStock) as excinfo:
            issue_prescription_item(db, prescription("RX-2", medication_id, 7), staff_id=DOCTOR_ID)

        assert excinfo.value.requested == 7
        assert excinfo.value.available == 6
        assert stock_of(db, medication_id) == 6
        assert prescription_count(db) == 1
        assert len(audits_of(db, medication_id)) == 1

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, db, medication_id, quantity):
        with pytest.raises(InvalidQuantity):
            issue_prescription_item(db, prescription("RX-1", medication_id, quantity), staff_id=DOCTOR_ID)

        assert stock_of(db, medication_id) == 10
        assert prescription_count(db) == 0

    def test_whole_stock_can_be_issued(self, db, medication_id):
        issue_prescription_item(db, prescription("RX-1", medication_id, 10), staff_id=DOCTOR_ID)

        assert stock_of(db, medication_id) == 0
        with pytest.raises(InsufficientStock):
            issue_prescription_item(db, prescription("RX-2", medication_id, 1), staff_id=DOCTOR_ID)
        assert stock_of(db, medication_id) == 0


class TestValidationOrder:

    @pytest.mark.parametrize("quantity", [True, 2.5, "3", None])
    def test_quantity_must_be_a_positive_integer(self, db, medication_id, quantity):
        with pytest.raises(InvalidQuantity):
            issue_prescription_item(db, prescription("RX-1", medication_id, quantity), staff_id=DOCTOR_ID)
        assert stock_of(db, medication_id) == 10

    def test_unknown_medication_reported_before_bad_quantity(self, db, medication_id):
        with pytest.raises(MedicationNotFound) as excinfo:
            issue_prescription_item(db, prescription("RX-1", 9999, -5), staff_id=DOCTOR_ID)
        assert excinfo.value.medication_id == 9999

    def test_invalid_quantity_rejected_before_row_lock(self, db, medication_id, monkeypatch):
        calls = []
        monkeypatch.setattr(crud_prescription, "lock_medication", lambda *args: calls.append(args))

        with pytest.raises(InvalidQuantity):
            issue_prescription_item(db, prescription("RX-1", medication_id, 0), staff_id=DOCTOR_ID)

        assert calls == []

    def test_unknown_diagnosis(self, db, medication_id):
        with pytest.raises(DiagnosisNotFound):
            issue_prescription_item(
                db, prescription("RX-1", medication_id, 2, diagnosis_id="DX-MISSING"), staff_id=DOCTOR_ID
            )
        assert stock_of(db, medication_id) == 10
        assert prescription_count(db) == 0

    def test_insufficient_stock_is_not_logged_as_error(self, db, medication_id, caplog):
        with caplog.at_level(logging.INFO):
            with pytest.raises(InsufficientStock):
                issue_prescription_item(db, prescription("RX-1", medication_id, 11), staff_id=DOCTOR_ID)

        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


class TestStorageFailures:

    def test_duplicate_item_id_rolls_back_everything(self, db, medication_id):
        issue_prescription_item(db, prescription("RX-1", medication_id, 2), staff_id=DOCTOR_ID)

        with pytest.raises(IssuanceFailed):
            issue_prescription_item(db, prescription("RX-1", medication_id, 3), staff_id=DOCTOR_ID)

        assert stock_of(db, medication_id) == 8
        assert prescription_count(db) == 1
        assert len(audits_of(db, medication_id)) == 1

    def test_driver_detail_is_logged_not_exposed(self, db, medication_id, monkeypatch, caplog):
        def _deadlock(*args):
            raise OperationalError("SELECT ... FOR UPDATE", {}, Exception("deadlock detected on relation 1663"))

        monkeypatch.setattr(crud_prescription, "lock_medication", _deadlock)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(IssuanceFailed) as excinfo:
                issue_prescription_item(db, prescription("RX-1", medication_id, 2), staff_id=DOCTOR_ID)

        assert "deadlock" not in str(excinfo.value)
        assert excinfo.value.__cause__ is None
        assert "deadlock detected" in caplog.text
        assert stock_of(db, medication_id) == 10


class TestActorContext:

    def test_cleared_after_commit(self, db, medication_id):
        issue_prescription_item(db, prescription("RX-1", medication_id, 1), staff_id=DOCTOR_ID)
        assert ACTOR_KEY not in db.info

    @pytest.mark.parametrize("quantity", [0, 50])
    def test_cleared_after_rollback(self, db, medication_id, quantity):
        with pytest.raises((InvalidQuantity, InsufficientStock)):
            issue_prescription_item(db, prescription("RX-1", medication_id, quantity), staff_id=DOCTOR_ID)
        assert ACTOR_KEY not in db.info

    def test_session_reused_for_another_issuance(self, db, medication_id):
        issue_prescription_item(db, prescription("RX-1", medication_id, 1), staff_id="DOC-A")
        issue_prescription_item(db, prescription("RX-2", medication_id, 1), staff_id="DOC-B")

        assert [a.staff_id for a in audits_of(db, medication_id)] == ["DOC-A", "DOC-B"]
        assert db.query(PrescriptionItem).count() == 2
