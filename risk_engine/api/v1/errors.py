"""Translation of domain exceptions into HTTP errors"""

import logging
from typing import Optional
from fastapi import HTTPException
from sqlalchemy.orm import Session
from risk_engine.domain.exceptions import (
    DomainException,
    DuplicateError,
    InternalError,
    InvalidInputError,
    NotFoundError,
)

INTERNAL_ERROR_DETAIL = "Internal server error"


def to_http_exception(error: Exception, request_id: str, db: Optional[Session] = None) -> HTTPException:
    """
    Map an exception raised below the API to the response the caller sees.

    Client errors carry the domain message; anything else is logged in full
    and reported generically, after rolling back the session when given.
    """
    if isinstance(error, InvalidInputError):
        logging.warning(f"Invalid input: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=400, detail=str(error))

    if isinstance(error, NotFoundError):
        logging.info(f"Not found: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=404, detail=str(error))

    if isinstance(error, DuplicateError):
        logging.warning(f"Duplicate application: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=409, detail=str(error))

    if db is not None:
        db.rollback()

    if isinstance(error, (InternalError, DomainException)):
        logging.error(f"Internal error: {error}", extra={"request_id": request_id})
    else:
        logging.exception(f"Unexpected error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
