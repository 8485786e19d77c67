from fastapi import APIRouter, HTTPException

from w1therm.api.errors import to_http_exception
from w1therm.errors import OneWireError, SysfsParseError
from w1therm.models.onewire import AlarmThresholds, DeviceIdentity, ScratchpadSnapshot
from w1therm.models.sensor import (
    AlarmRequest,
    EepromAction,
    EepromRequest,
    ResolutionRequest,
    SensorStatus,
)
from w1therm.services import bus_master
from w1therm.services.sensor_device import SensorDevice

router = APIRouter()


def _sensor(name: str) -> SensorDevice:
    try:
        identity = DeviceIdentity.parse(name)
    except SysfsParseError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return bus_master.get_bus_master().device(identity)


@router.get("/{name}", response_model=SensorStatus, summary="Sensor status")
def sensor_status(name: str) -> SensorStatus:
    """
    Read temperature, resolution, alarm window and power mode of one sensor,
    addressed by its folder name, e.g. 28-000000abcd.
    """
    sensor = _sensor(name)
    try:
        return SensorStatus(
            device=sensor.identity,
            temperature_celsius=sensor.temperature(),
            resolution_bits=sensor.resolution(),
            alarms=sensor.alarm_thresholds(),
            external_power=sensor.has_external_power(),
        )
    except OneWireError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{name}/scratchpad", response_model=ScratchpadSnapshot, summary="Raw scratchpad")
def scratchpad(name: str) -> ScratchpadSnapshot:
    sensor = _sensor(name)
    try:
        return sensor.read_scratchpad()
    except OneWireError as exc:
        raise to_http_exception(exc) from exc


@router.put("/{name}/resolution", response_model=ResolutionRequest, summary="Change resolution")
def set_resolution(name: str, request: ResolutionRequest) -> ResolutionRequest:
    sensor = _sensor(name)
    try:
        sensor.set_resolution(request.bits)
    except OneWireError as exc:
        raise to_http_exception(exc) from exc
    return request


@router.put("/{name}/alarms", response_model=AlarmThresholds, summary="Change alarm window")
def set_alarms(name: str, request: AlarmRequest) -> AlarmThresholds:
    """
    Store a new alarm window. The limits may be given in either order;
    the stored, ordered window is returned.
    """
    sensor = _sensor(name)
    try:
        return sensor.set_alarm_thresholds(request.low, request.high)
    except OneWireError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{name}/eeprom", status_code=202, summary="Save or restore EEPROM")
def eeprom(name: str, request: EepromRequest) -> dict:
    sensor = _sensor(name)
    try:
        if request.action is EepromAction.SAVE:
            sensor.save_to_eeprom()
        else:
            sensor.restore_from_eeprom()
    except OneWireError as exc:
        raise to_http_exception(exc) from exc
    return {"device": sensor.identity.name, "action": request.action.value}
