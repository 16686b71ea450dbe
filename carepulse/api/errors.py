# carepulse/api/errors.py

from fastapi import HTTPException
from fastapi import status as http_status

from carepulse.core.exceptions import (
    CarePulseError,
    ConfigurationError,
    NotFoundError,
    StoreError,
    ValidationError,
)


def to_http_exception(error: CarePulseError) -> HTTPException:
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"message": error.message, "errors": error.errors},
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, StoreError):
        return HTTPException(status_code=http_status.HTTP_502_BAD_GATEWAY, detail=error.message)
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message)
    return HTTPException(status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
