from typing import Optional


class OneWireError(RuntimeError):
    """Base class for every failure raised while talking to the w1 sysfs tree."""


class SysfsIOError(OneWireError):
    """A sysfs file could not be opened for reading or writing."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class SysfsParseError(OneWireError, ValueError):
    """A sysfs file held content that could not be decoded."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ValueRangeError(OneWireError, ValueError):
    """A caller supplied value lies outside what the sensor accepts."""

    def __init__(self, field: str, value, minimum: int, maximum: int) -> None:
        super().__init__(
            f"{field}={value!r} is outside the allowed range [{minimum}, {maximum}]"
        )
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class WriteVerificationError(OneWireError):
    """
    The write reached the driver but reading the file back shows another value.

    Usually the driver rejected or clamped the value, or the device did not
    answer on the bus.
    """

    def __init__(self, path: str, field: str, expected, observed) -> None:
        super().__init__(
            f"Failed to change {field} in {path}: "
            f"wrote {expected!r}, read back {observed!r}"
        )
        self.path = path
        self.field = field
        self.expected = expected
        self.observed = observed


class AlarmSearchTimeout(OneWireError, TimeoutError):
    """The bulk temperature conversion did not finish within the poll budget."""

    def __init__(self, path: str, attempts: int) -> None:
        super().__init__(
            f"Bulk conversion still in progress in {path} after {attempts} polls"
        )
        self.path = path
        self.attempts = attempts
