import logging
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from w1therm.errors import SysfsParseError, ValueRangeError, WriteVerificationError
from w1therm.models.onewire import AlarmThresholds, DeviceIdentity, ScratchpadSnapshot
from w1therm.services.sysfs import (
    SysfsAccessor,
    parse_int_pair,
    parse_leading_int,
    tokens_of,
)

if TYPE_CHECKING:
    from w1therm.services.bus_master import BusMaster

logger = logging.getLogger(__name__)

_TEMPERATURE_FILE = "temperature"
_RESOLUTION_FILE = "resolution"
_ALARMS_FILE = "alarms"
_EXT_POWER_FILE = "ext_power"
_EEPROM_FILE = "eeprom"
_SCRATCHPAD_FILE = "w1_slave"

# -56.0 °C lies below the range of every supported sensor
_NO_TEMPERATURE_MILLIDEGREES = -56000
_DEFAULT_RESOLUTION = 12
MIN_RESOLUTION = 9
MAX_RESOLUTION = 12


class SensorDevice:
    """
    Handle on one sensor folder <base>/<familycode>-<serial>/.

    Nothing is cached: every accessor reads the driver files again.
    """

    def __init__(self, identity: DeviceIdentity, accessor: SysfsAccessor) -> None:
        self._identity = identity
        self._accessor = accessor

    def __repr__(self) -> str:
        return f"SensorDevice({self._identity.name!r})"

    @property
    def identity(self) -> DeviceIdentity:
        return self._identity

    def set_device(self, identity: DeviceIdentity) -> None:
        """Point this handle at another sensor on the same tree."""
        self._identity = identity

    @property
    def folder(self) -> str:
        return self._identity.name

    def _path(self, filename: str) -> str:
        return str(self._accessor.path_of(self.folder, filename))

    def _read_int(self, filename: str, default: int) -> int:
        lines = self._accessor.read_lines(self.folder, filename)
        return parse_leading_int(lines, default, self._path(filename))

    def temperature(self) -> float:
        """Last converted temperature in °C, -56.0 if the driver reported nothing."""
        millidegrees = self._read_int(_TEMPERATURE_FILE, _NO_TEMPERATURE_MILLIDEGREES)
        return millidegrees / 1000.0

    def resolution(self) -> int:
        return self._read_int(_RESOLUTION_FILE, _DEFAULT_RESOLUTION)

    def set_resolution(self, bits: int) -> None:
        """
        Change the conversion resolution to ``bits`` (9 to 12).

        The value is read back after writing. On success the scratchpad is
        read once more so the driver refreshes its view of the device.

        Raises:
            ValueRangeError: ``bits`` is outside 9..12, nothing was written.
            WriteVerificationError: the driver reports another resolution.
        """
        if not MIN_RESOLUTION <= bits <= MAX_RESOLUTION:
            raise ValueRangeError("resolution", bits, MIN_RESOLUTION, MAX_RESOLUTION)

        self._accessor.write_lines(self.folder, _RESOLUTION_FILE, [str(bits)])
        observed = self.resolution()
        if observed != bits:
            logger.warning("%s: resolution write of %d read back as %d", self.folder, bits, observed)
            raise WriteVerificationError(self._path(_RESOLUTION_FILE), "resolution", bits, observed)

        logger.info("%s: resolution set to %d bits", self.folder, bits)
        self.persist_to_sram()

    def alarm_thresholds(self) -> AlarmThresholds:
        path = self._path(_ALARMS_FILE)
        low, high = parse_int_pair(self._accessor.read_lines(self.folder, _ALARMS_FILE), path)
        try:
            return AlarmThresholds(low=low, high=high)
        except ValidationError as exc:
            raise SysfsParseError(f"Invalid alarm window {low} {high} in {path}", path) from exc

    def set_alarm_thresholds(self, first: int, second: int) -> AlarmThresholds:
        """
        Store a new alarm window; the limits may be given in any order.

        A mismatch of either limit on read back fails the call.

        Raises:
            ValueRangeError: low < -55 or high > 125, nothing was written.
            WriteVerificationError: the driver reports another window.
        """
        requested = AlarmThresholds.normalized(first, second)

        self._accessor.write_lines(
            self.folder, _ALARMS_FILE, [f"{requested.low} {requested.high}"]
        )
        observed = self.alarm_thresholds()
        if observed.low != requested.low or observed.high != requested.high:
            logger.warning(
                "%s: alarm write of %d %d read back as %d %d",
                self.folder,
                requested.low,
                requested.high,
                observed.low,
                observed.high,
            )
            raise WriteVerificationError(
                self._path(_ALARMS_FILE),
                "alarms",
                (requested.low, requested.high),
                (observed.low, observed.high),
            )

        logger.info("%s: alarms set to %d..%d", self.folder, requested.low, requested.high)
        self.persist_to_sram()
        return requested

    def has_external_power(self) -> bool:
        return self._read_int(_EXT_POWER_FILE, 1) != 0

    def restore_from_eeprom(self) -> None:
        """Reload the scratchpad from EEPROM, as after a power cycle."""
        self._accessor.write_lines(self.folder, _EEPROM_FILE, ["restore"])
        logger.info("%s: restored scratchpad from EEPROM", self.folder)

    def save_to_eeprom(self) -> None:
        """
        Copy the scratchpad into EEPROM.

        Parasitically powered sensors need the strong pullup during the
        copy; making sure it is available is up to the caller.
        """
        self._accessor.write_lines(self.folder, _EEPROM_FILE, ["save"])
        logger.info("%s: saved scratchpad to EEPROM", self.folder)

    def read_scratchpad(self) -> ScratchpadSnapshot:
        lines = self._accessor.read_lines(self.folder, _SCRATCHPAD_FILE)
        return ScratchpadSnapshot.from_tokens(tokens_of(lines), self._path(_SCRATCHPAD_FILE))

    def persist_to_sram(self) -> ScratchpadSnapshot:
        """Make the driver read the device scratchpad again and return it."""
        snapshot = self.read_scratchpad()
        logger.debug("%s: scratchpad %s", self.folder, snapshot.hex())
        return snapshot


def first_device(bus: "BusMaster") -> Optional[SensorDevice]:
    """Handle on the first sensor the bus lists, or None for an empty bus."""
    devices = bus.list_devices()
    if not devices:
        return None
    return bus.device(devices[0])
