"""
Typed failures for the clinic dispensary.

Callers catch by type, never by message. Each class carries a machine-readable
``code`` so the HTTP layer can map it without parsing text:

    ClinicError
    |
    +-- IssuanceError
    |   +-- MedicationNotFound
    |   +-- DiagnosisNotFound
    |   +-- InvalidQuantity
    |   +-- InsufficientStock
    |   +-- IssuanceFailed
    |
    +-- UnauthorizedStockUpdate
    +-- PrescriptionItemNotFound
    +-- StockUpdateFailed

Storage-level detail (driver messages, SQL) never goes into these messages; it
is logged where the failure is caught.
"""

from typing import Optional


class ClinicError(Exception):
    """Base class for every failure that crosses a crud/router boundary."""

    code: str = "CLINIC_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class IssuanceError(ClinicError):
    """Outcome of a prescription issuance that did not commit."""

    code: str = "ISSUANCE_ERROR"


class MedicationNotFound(IssuanceError):
    code: str = "MEDICATION_NOT_FOUND"

    def __init__(self, medication_id: int):
        self.medication_id = medication_id
        super().__init__(f"Medication {medication_id} not found.")


class DiagnosisNotFound(IssuanceError):
    code: str = "DIAGNOSIS_NOT_FOUND"

    def __init__(self, diagnosis_id: str):
        self.diagnosis_id = diagnosis_id
        super().__init__(f"Diagnosis {diagnosis_id} not found.")


class InvalidQuantity(IssuanceError):
    """Requested quantity is not a positive integer."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Invalid quantity requested: {quantity!r}.")


class InsufficientStock(IssuanceError):
    """Business outcome, not a fault: the caller may retry with a smaller quantity."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, medication_id: int, requested: int, available: int):
        self.medication_id = medication_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for medication {medication_id}: "
            f"requested {requested}, available {available}."
        )


class IssuanceFailed(IssuanceError):
    """Storage failure (lock timeout, deadlock, lost connection). Safe to retry."""

    code: str = "ISSUANCE_FAILED"

    def __init__(self, message: str = "An error occurred while issuing prescription. Transaction rolled back."):
        super().__init__(message)


class UnauthorizedStockUpdate(ClinicError):
    """A medication row was about to change with no acting staff member set."""

    code: str = "UNAUTHORIZED_STOCK_UPDATE"

    def __init__(self, medication_id: Optional[int] = None):
        self.medication_id = medication_id
        super().__init__("Unauthorized stock update detected.")


class PrescriptionItemNotFound(ClinicError):
    code: str = "PRESCRIPTION_ITEM_NOT_FOUND"

    def __init__(self, prescription_item_id: str):
        self.prescription_item_id = prescription_item_id
        super().__init__(f"Prescription item {prescription_item_id} not found.")


class StockUpdateFailed(ClinicError):
    code: str = "STOCK_UPDATE_FAILED"

    def __init__(self, message: str = "An error occurred while updating stock. Transaction rolled back."):
        super().__init__(message)
