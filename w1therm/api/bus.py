from typing import List

from fastapi import APIRouter, HTTPException

from w1therm.api.errors import to_http_exception
from w1therm.errors import OneWireError, SysfsParseError
from w1therm.models.bus import BusStatus, PullupStatus
from w1therm.models.onewire import DeviceIdentity
from w1therm.services import bus_master

router = APIRouter()


@router.get("/status", response_model=BusStatus, summary="Bus master status")
def bus_status() -> BusStatus:
    """
    Return device count, strong pullup setting and bound sensors of the
    configured bus master (env var W1_MASTER_INDEX).

    If the w1 sysfs tree cannot be read, a HTTP 503 Service Unavailable is
    returned.
    """
    bus = bus_master.get_bus_master()
    try:
        return BusStatus(
            master_index=bus.master_index,
            device_count=bus.device_count(),
            pullup=bus.get_pullup(),
            devices=bus.list_devices(),
        )
    except OneWireError as exc:
        raise to_http_exception(exc) from exc


@router.get("/devices", response_model=List[DeviceIdentity], summary="Bound sensors")
def list_devices() -> List[DeviceIdentity]:
    try:
        return bus_master.get_bus_master().list_devices()
    except OneWireError as exc:
        raise to_http_exception(exc) from exc


@router.post("/devices", status_code=202, summary="Bind a sensor manually")
def add_device(identity: DeviceIdentity) -> dict:
    """
    Write the sensor to w1_master_add. The driver decides whether it binds;
    query /bus/devices to confirm.
    """
    try:
        bus_master.get_bus_master().manual_add(identity)
    except OneWireError as exc:
        raise to_http_exception(exc) from exc
    return {"requested": identity.name}


@router.delete("/devices/{name}", status_code=202, summary="Unbind a sensor manually")
def remove_device(name: str) -> dict:
    try:
        identity = DeviceIdentity.parse(name)
    except SysfsParseError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    try:
        bus_master.get_bus_master().manual_remove(identity)
    except OneWireError as exc:
        raise to_http_exception(exc) from exc
    return {"requested": identity.name}


@router.get("/pullup", response_model=PullupStatus, summary="Strong pullup setting")
def get_pullup() -> PullupStatus:
    try:
        return PullupStatus(setting=bus_master.get_bus_master().get_pullup())
    except OneWireError as exc:
        raise to_http_exception(exc) from exc


@router.put("/pullup", response_model=PullupStatus, summary="Change strong pullup setting")
def set_pullup(request: PullupStatus) -> PullupStatus:
    """
    Write the strong pullup setting and return the value that was applied.

    "auto" resolves to "enabled" if any sensor runs on parasitic power.
    A read back mismatch is returned as HTTP 409 Conflict.
    """
    try:
        return PullupStatus(setting=bus_master.get_bus_master().set_pullup(request.setting))
    except OneWireError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/alarm-search",
    response_model=List[DeviceIdentity],
    summary="Sensors outside their alarm window",
)
def alarm_search() -> List[DeviceIdentity]:
    """
    Trigger a bulk conversion on the bus and return the sensors whose
    temperature lies outside their alarm window. Blocks until the
    conversion is done; a conversion that never finishes gives HTTP 504.
    """
    try:
        return bus_master.get_bus_master().alarm_search()
    except OneWireError as exc:
        raise to_http_exception(exc) from exc
