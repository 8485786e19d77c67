import pytest

from w1therm.errors import SysfsIOError, SysfsParseError
from w1therm.services.sysfs import SysfsAccessor, parse_int_pair, parse_leading_int


def test_read_lines_keeps_trailing_empty_line(tmp_path):
    (tmp_path / "dev").mkdir()
    (tmp_path / "dev" / "temperature").write_text("23562\n")

    accessor = SysfsAccessor(str(tmp_path))
    assert accessor.read_lines("dev", "temperature") == ["23562", ""]


def test_read_lines_missing_file(tmp_path):
    accessor = SysfsAccessor(str(tmp_path))
    with pytest.raises(SysfsIOError, match="Can't open file for reading") as excinfo:
        accessor.read_lines("dev", "temperature")
    assert excinfo.value.path == str(tmp_path / "dev" / "temperature")


def test_write_lines_truncates(tmp_path):
    (tmp_path / "dev").mkdir()
    target = tmp_path / "dev" / "alarms"
    target.write_text("-10 40 and some old content\n")

    accessor = SysfsAccessor(str(tmp_path))
    accessor.write_lines("dev", "alarms", ["5 10"])

    assert target.read_text() == "5 10\n"


def test_write_lines_missing_directory(tmp_path):
    accessor = SysfsAccessor(str(tmp_path))
    with pytest.raises(SysfsIOError, match="Can't open file for writing"):
        accessor.write_lines("w1_bus_master1", "w1_master_add", ["28-000000abcd"])


def test_parse_leading_int():
    assert parse_leading_int(["3", ""], default=0) == 3
    assert parse_leading_int(["-1"], default=0) == -1
    assert parse_leading_int([""], default=7) == 7
    assert parse_leading_int([], default=7) == 7


def test_parse_leading_int_rejects_text():
    with pytest.raises(SysfsParseError, match="Expected an integer"):
        parse_leading_int(["trigger", ""], default=0, path="therm_bulk_read")


def test_parse_int_pair():
    assert parse_int_pair(["-10 40", ""]) == [-10, 40]
    with pytest.raises(SysfsParseError):
        parse_int_pair(["40", ""])
    with pytest.raises(SysfsParseError):
        parse_int_pair(["a b"])
