from fastapi import HTTPException

from w1therm.errors import (
    AlarmSearchTimeout,
    OneWireError,
    SysfsIOError,
    SysfsParseError,
    ValueRangeError,
    WriteVerificationError,
)

_STATUS_CODES = (
    (ValueRangeError, 422),
    (WriteVerificationError, 409),
    (AlarmSearchTimeout, 504),
    (SysfsParseError, 502),
    (SysfsIOError, 503),
)


def to_http_exception(exc: OneWireError) -> HTTPException:
    """
    Map a 1-Wire failure to an HTTP error.

    Anything not listed is treated like an unreachable driver (503).
    """
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=503, detail=str(exc))
