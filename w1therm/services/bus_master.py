import logging
import time
from typing import Callable, List, Optional

from w1therm.config import get_settings
from w1therm.errors import AlarmSearchTimeout, WriteVerificationError
from w1therm.models.onewire import DeviceIdentity, PullupSetting
from w1therm.services.sensor_device import SensorDevice
from w1therm.services.sysfs import SysfsAccessor, parse_leading_int

logger = logging.getLogger(__name__)

_SLAVE_COUNT_FILE = "w1_master_slave_count"
_SLAVES_FILE = "w1_master_slaves"
_ADD_FILE = "w1_master_add"
_REMOVE_FILE = "w1_master_remove"
_PULLUP_FILE = "w1_master_pullup"
_BULK_READ_FILE = "therm_bulk_read"
_EXT_POWER_FILE = "ext_power"

# therm_bulk_read reports -1 while a conversion is still running
_CONVERSION_IN_PROGRESS = -1


class BusMaster:
    """
    Bus wide operations on <base>/w1_bus_masterN/.

    The object only remembers which master it talks to; device lists,
    pullup and conversion state are read from the driver on every call.
    Concurrent writers to the same control files are not serialised here.
    """

    def __init__(
        self,
        accessor: SysfsAccessor,
        master_index: int = 1,
        poll_interval_seconds: float = 0.75,
        poll_max_retries: Optional[int] = 20,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._accessor = accessor
        self.master_index = master_index
        self.poll_interval_seconds = poll_interval_seconds
        self.poll_max_retries = poll_max_retries
        self._sleep = sleep

    def __repr__(self) -> str:
        return f"BusMaster({self.folder!r})"

    @property
    def folder(self) -> str:
        return f"w1_bus_master{self.master_index}"

    def _path(self, filename: str) -> str:
        return str(self._accessor.path_of(self.folder, filename))

    def _read_int(self, filename: str, default: int) -> int:
        lines = self._accessor.read_lines(self.folder, filename)
        return parse_leading_int(lines, default, self._path(filename))

    def device(self, identity: DeviceIdentity) -> SensorDevice:
        return SensorDevice(identity, self._accessor)

    def device_count(self) -> int:
        return self._read_int(_SLAVE_COUNT_FILE, 0)

    def list_devices(self) -> List[DeviceIdentity]:
        """
        Return the bound sensors in the order the driver lists them.

        The listing file is not opened when the driver reports no slaves,
        since it may not exist yet.
        """
        if self.device_count() == 0:
            return []

        lines = self._accessor.read_lines(self.folder, _SLAVES_FILE)
        return [DeviceIdentity.parse(line) for line in lines if line.strip()]

    def manual_add(self, identity: DeviceIdentity) -> None:
        """Ask the driver to bind a sensor. Re-list to see whether it did."""
        self._accessor.write_lines(self.folder, _ADD_FILE, [identity.name])
        logger.info("%s: requested add of %s", self.folder, identity.name)

    def manual_remove(self, identity: DeviceIdentity) -> None:
        """Ask the driver to unbind a sensor. Re-list to see whether it did."""
        self._accessor.write_lines(self.folder, _REMOVE_FILE, [identity.name])
        logger.info("%s: requested removal of %s", self.folder, identity.name)

    def get_pullup(self) -> PullupSetting:
        # driver convention: 0 means the strong pullup is enabled
        flag = self._read_int(_PULLUP_FILE, 1)
        return PullupSetting.DISABLED if flag else PullupSetting.ENABLED

    def all_devices_externally_powered(self) -> bool:
        """
        False as soon as one listed sensor runs on parasitic power.

        An empty ext_power flag counts as parasitic here, so AUTO keeps the
        strong pullup on when the power mode is unknown.
        """
        for identity in self.list_devices():
            lines = self._accessor.read_lines(identity.name, _EXT_POWER_FILE)
            path = str(self._accessor.path_of(identity.name, _EXT_POWER_FILE))
            if parse_leading_int(lines, 0, path) == 0:
                logger.debug("%s: %s is parasitically powered", self.folder, identity.name)
                return False
        return True

    def set_pullup(self, requested: PullupSetting) -> PullupSetting:
        """
        Write the strong pullup setting and read it back.

        AUTO enables the pullup when any listed sensor is parasitically
        powered and disables it otherwise. Returns the setting written.

        Raises:
            WriteVerificationError: the driver reports another setting.
        """
        target = requested
        if requested is PullupSetting.AUTO:
            if self.all_devices_externally_powered():
                target = PullupSetting.DISABLED
            else:
                target = PullupSetting.ENABLED

        flag = "0" if target is PullupSetting.ENABLED else "1"
        self._accessor.write_lines(self.folder, _PULLUP_FILE, [flag])

        observed = self.get_pullup()
        if observed is not target:
            logger.warning(
                "%s: pullup write of %s read back as %s", self.folder, target.value, observed.value
            )
            raise WriteVerificationError(
                self._path(_PULLUP_FILE), "pullup", target.value, observed.value
            )

        logger.info("%s: strong pullup %s (requested %s)", self.folder, target.value, requested.value)
        return target

    def _wait_for_conversion(self) -> None:
        attempts = 0
        while self._read_int(_BULK_READ_FILE, 0) == _CONVERSION_IN_PROGRESS:
            attempts += 1
            if self.poll_max_retries is not None and attempts > self.poll_max_retries:
                logger.warning("%s: bulk conversion timed out after %d polls", self.folder, attempts)
                raise AlarmSearchTimeout(self._path(_BULK_READ_FILE), attempts)
            logger.debug("%s: conversion in progress, poll %d", self.folder, attempts)
            self._sleep(self.poll_interval_seconds)

    def alarm_search(self) -> List[DeviceIdentity]:
        """
        Convert all sensors at once and return those outside their alarm window.

        The temperature is rounded to whole degrees before it is compared
        with the window. Results keep the listing order.

        Raises:
            AlarmSearchTimeout: the conversion did not finish within
                ``poll_max_retries`` polls.
        """
        self._accessor.write_lines(self.folder, _BULK_READ_FILE, ["trigger"])
        self._wait_for_conversion()

        alarmed: List[DeviceIdentity] = []
        for identity in self.list_devices():
            sensor = self.device(identity)
            thresholds = sensor.alarm_thresholds()
            if thresholds.is_exceeded_by(sensor.temperature()):
                alarmed.append(identity)

        logger.info("%s: alarm search found %d device(s)", self.folder, len(alarmed))
        return alarmed


def get_bus_master() -> BusMaster:
    """Build the BusMaster for the configured sysfs tree and master index."""
    settings = get_settings()
    return BusMaster(
        SysfsAccessor(settings.w1_base_path),
        master_index=settings.w1_master_index,
        poll_interval_seconds=settings.alarm_poll_interval_seconds,
        poll_max_retries=settings.alarm_poll_max_retries,
    )
