from typing import List

from pydantic import BaseModel, Field

from w1therm.models.onewire import DeviceIdentity, PullupSetting


class BusStatus(BaseModel):
    """Snapshot of one bus master and the sensors bound to it."""

    master_index: int = Field(
        ...,
        ge=1,
        description="Index N of the w1_bus_masterN folder",
    )
    device_count: int = Field(
        ...,
        ge=0,
        description="Number of slaves the driver reports on this bus",
    )
    pullup: PullupSetting = Field(
        ...,
        description="Current strong pullup setting (enabled or disabled)",
    )
    devices: List[DeviceIdentity] = Field(
        default_factory=list,
        description="Bound sensors in the order the driver lists them",
    )


class PullupStatus(BaseModel):
    setting: PullupSetting = Field(
        ...,
        description="Requested setting; auto is resolved from a power survey of all devices",
    )
