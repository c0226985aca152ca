"""Map engine errors to HTTP errors."""
from contextlib import contextmanager

from fastapi import HTTPException

from stayguard.services.errors import RangeTooLargeError, UnknownJurisdictionError, ValidationError


@contextmanager
def engine_errors():
    try:
        yield
    except UnknownJurisdictionError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except RangeTooLargeError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "requested_days": e.requested_days, "max_days": e.max_days},
        )
