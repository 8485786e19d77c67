from enum import Enum

from pydantic import BaseModel, Field

from w1therm.models.onewire import AlarmThresholds, DeviceIdentity


class SensorStatus(BaseModel):
    """Domain model describing the current state of a single sensor."""

    device: DeviceIdentity
    temperature_celsius: float = Field(
        ...,
        description="Last converted temperature; -56.0 means the driver reported nothing",
    )
    resolution_bits: int = Field(
        ...,
        description="Conversion resolution in bits (9 to 12)",
    )
    alarms: AlarmThresholds
    external_power: bool = Field(
        ...,
        description="False if the sensor runs on parasitic power",
    )


class ResolutionRequest(BaseModel):
    bits: int = Field(..., description="New resolution in bits, 9 to 12")


class AlarmRequest(BaseModel):
    low: int = Field(..., description="One alarm limit in °C")
    high: int = Field(..., description="The other alarm limit in °C")


class EepromAction(str, Enum):
    SAVE = "save"
    RESTORE = "restore"


class EepromRequest(BaseModel):
    action: EepromAction
