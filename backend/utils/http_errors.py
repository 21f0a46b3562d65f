from fastapi import HTTPException
from exceptions import (
    ClinicError,
    DiagnosisNotFound,
    InsufficientStock,
    InvalidQuantity,
    IssuanceFailed,
    MedicationNotFound,
    PrescriptionItemNotFound,
    StockUpdateFailed,
    UnauthorizedStockUpdate,
)

_STATUS_BY_ERROR = {
    MedicationNotFound: 404,
    DiagnosisNotFound: 404,
    PrescriptionItemNotFound: 404,
    InvalidQuantity: 422,
    InsufficientStock: 409,
    UnauthorizedStockUpdate: 403,
    IssuanceFailed: 503,
    StockUpdateFailed: 503,
}


def to_http_exception(error: ClinicError) -> HTTPException:
    """Translate a typed clinic failure into the response the caller sees.

    Only the code and the failure's own message cross the boundary.
    """
    status_code = _STATUS_BY_ERROR.get(type(error), 400)
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message},
    )
