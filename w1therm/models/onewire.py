import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from w1therm.errors import SysfsParseError, ValueRangeError

ALARM_MIN_CELSIUS = -55
ALARM_MAX_CELSIUS = 125
SCRATCHPAD_SIZE = 9


class DeviceType(str, Enum):
    """Supported sensor families. The value is the family code used on the wire."""

    DS18S20 = "10"
    DS1822 = "22"
    DS18B20 = "28"
    DS1825 = "3B"
    DS28EA00 = "42"

    @property
    def family_code(self) -> str:
        return self.value

    @classmethod
    def from_family_code(cls, code: str) -> "DeviceType":
        # the kernel prints family codes in lower case hex
        try:
            return cls(code.strip().upper())
        except ValueError:
            raise SysfsParseError(f"Unknown device family code: {code!r}") from None


class DeviceIdentity(BaseModel):
    """A sensor bound on the bus, addressed as <familycode>-<serial>."""

    model_config = ConfigDict(frozen=True)

    family: DeviceType = Field(
        ...,
        description="Sensor family, e.g. DS18B20",
    )
    serial_number: str = Field(
        ...,
        min_length=1,
        description="Serial number exactly as reported by the driver, e.g. 000000abcd",
    )

    @property
    def name(self) -> str:
        """Folder and control file spelling, e.g. 28-000000abcd."""
        return f"{self.family.family_code}-{self.serial_number}"

    @classmethod
    def parse(cls, text: str) -> "DeviceIdentity":
        code, sep, serial = text.strip().partition("-")
        if not sep or not serial:
            raise SysfsParseError(f"Malformed device name: {text!r}")
        return cls(family=DeviceType.from_family_code(code), serial_number=serial)


class PullupSetting(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    # resolved to ENABLED or DISABLED when written, never stored
    AUTO = "auto"


def round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class AlarmThresholds(BaseModel):
    """Temperature window in whole degrees Celsius; outside it the device alarms."""

    low: int = Field(
        ...,
        ge=ALARM_MIN_CELSIUS,
        le=ALARM_MAX_CELSIUS,
        description="Lower alarm limit (TL) in °C",
    )
    high: int = Field(
        ...,
        ge=ALARM_MIN_CELSIUS,
        le=ALARM_MAX_CELSIUS,
        description="Upper alarm limit (TH) in °C",
    )

    @model_validator(mode="after")
    def _check_order(self) -> "AlarmThresholds":
        if self.low > self.high:
            raise ValueError(f"low={self.low} is above high={self.high}")
        return self

    @classmethod
    def normalized(cls, first: int, second: int) -> "AlarmThresholds":
        """
        Build a window from two limits given in any order.

        Raises ValueRangeError when the window does not fit into the range
        the sensor can store.
        """
        low, high = (first, second) if first <= second else (second, first)
        if low < ALARM_MIN_CELSIUS:
            raise ValueRangeError("low", low, ALARM_MIN_CELSIUS, ALARM_MAX_CELSIUS)
        if high > ALARM_MAX_CELSIUS:
            raise ValueRangeError("high", high, ALARM_MIN_CELSIUS, ALARM_MAX_CELSIUS)
        return cls(low=low, high=high)

    def is_exceeded_by(self, temperature_celsius: float) -> bool:
        rounded = round_half_away(temperature_celsius)
        return rounded < self.low or rounded > self.high


class ScratchpadSnapshot(BaseModel):
    """Raw scratchpad bytes of a device as reported in w1_slave."""

    data: List[int] = Field(
        ...,
        min_length=SCRATCHPAD_SIZE,
        max_length=SCRATCHPAD_SIZE,
        description="The nine scratchpad bytes, byte 0 first",
    )

    @classmethod
    def from_tokens(cls, tokens: List[str], path: Optional[str] = None) -> "ScratchpadSnapshot":
        if len(tokens) < SCRATCHPAD_SIZE:
            raise SysfsParseError(
                f"Expected {SCRATCHPAD_SIZE} scratchpad bytes, got {len(tokens)}", path
            )
        try:
            data = [int(token, 16) for token in tokens[:SCRATCHPAD_SIZE]]
        except ValueError as exc:
            raise SysfsParseError(f"Malformed scratchpad byte: {exc}", path) from exc
        if any(byte > 0xFF or byte < 0 for byte in data):
            raise SysfsParseError(f"Scratchpad byte out of range: {data}", path)
        return cls(data=data)

    def hex(self) -> str:
        return " ".join(f"{byte:02x}" for byte in self.data)
