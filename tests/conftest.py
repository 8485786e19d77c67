from pathlib import Path

import pytest

from w1therm.services.sysfs import SysfsAccessor

# w1_slave of a DS18B20 at 23.125 °C, alarms 75/70, 12 bit
SCRATCHPAD_TEXT = (
    "72 01 4b 46 7f ff 0e 10 57 : crc=57 YES\n"
    "72 01 4b 46 7f ff 0e 10 57 t=23125\n"
)


class FakeW1Tree:
    """Builds a w1 sysfs tree with plain files below tmp_path."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def master(self, index: int = 1, slaves=(), pullup: str = "1\n", count=None) -> Path:
        folder = self.root / f"w1_bus_master{index}"
        folder.mkdir(parents=True, exist_ok=True)
        if count is None:
            count = len(slaves)
        (folder / "w1_master_slave_count").write_text(f"{count}\n")
        if slaves:
            (folder / "w1_master_slaves").write_text("".join(f"{s}\n" for s in slaves))
        (folder / "w1_master_pullup").write_text(pullup)
        return folder

    def device(
        self,
        name: str,
        temperature: str = "23562\n",
        resolution: str = "12\n",
        alarms: str = "-10 40\n",
        ext_power: str = "1\n",
        scratchpad: str = SCRATCHPAD_TEXT,
    ) -> Path:
        folder = self.root / name
        folder.mkdir(parents=True, exist_ok=True)
        (folder / "temperature").write_text(temperature)
        (folder / "resolution").write_text(resolution)
        (folder / "alarms").write_text(alarms)
        (folder / "ext_power").write_text(ext_power)
        (folder / "eeprom").write_text("")
        (folder / "w1_slave").write_text(scratchpad)
        return folder

    def read(self, folder: str, filename: str) -> str:
        return (self.root / folder / filename).read_text()


class ScriptedAccessor(SysfsAccessor):
    """
    SysfsAccessor over real files, with two hooks imitating the driver:

    - reads: filename -> queued contents returned by successive reads
      (writes to such a file are recorded only)
    - stored: filename -> value the "driver" stores instead of the one written
    """

    def __init__(self, base_path, reads=None, stored=None) -> None:
        super().__init__(str(base_path))
        self.reads = reads or {}
        self.stored = stored or {}
        self.writes = []

    def read_lines(self, directory, filename):
        queued = self.reads.get(filename)
        if queued:
            return queued.pop(0).split("\n")
        return super().read_lines(directory, filename)

    def write_lines(self, directory, filename, lines):
        self.writes.append((directory, filename, list(lines)))
        if filename in self.reads:
            return
        if filename in self.stored:
            lines = [self.stored[filename]]
        super().write_lines(directory, filename, lines)


@pytest.fixture
def w1_tree(tmp_path) -> FakeW1Tree:
    return FakeW1Tree(tmp_path)


@pytest.fixture
def scripted_accessor(tmp_path):
    def make(**kwargs) -> ScriptedAccessor:
        return ScriptedAccessor(tmp_path, **kwargs)

    return make
