import logging
from pathlib import Path
from typing import List, Sequence

from w1therm.config import W1_BASE_PATH
from w1therm.errors import SysfsIOError, SysfsParseError

logger = logging.getLogger(__name__)


class SysfsAccessor:
    """
    Line based text access to files below the w1 sysfs base directory.

    Every call opens, reads or writes, and closes the file again so the
    driver handles each request separately. Writing to most control files
    needs root on a real host; the resulting permission error is reported
    as SysfsIOError and not handled here.
    """

    def __init__(self, base_path: str = W1_BASE_PATH) -> None:
        self.base_path = Path(base_path)

    def path_of(self, directory: str, filename: str) -> Path:
        return self.base_path / directory / filename

    def read_lines(self, directory: str, filename: str) -> List[str]:
        """
        Return the file content split at newlines.

        A file ending in a newline yields a trailing empty string.
        """
        path = self.path_of(directory, filename)
        try:
            with path.open("r", encoding="utf-8") as handle:
                content = handle.read()
        except OSError as exc:
            raise SysfsIOError(f"Can't open file for reading: {path} ({exc})", str(path)) from exc

        logger.debug("read %s: %r", path, content)
        return content.split("\n")

    def write_lines(self, directory: str, filename: str, lines: Sequence[str]) -> None:
        path = self.path_of(directory, filename)
        content = "".join(f"{line}\n" for line in lines)
        try:
            with path.open("w", encoding="utf-8") as handle:
                handle.write(content)
                handle.flush()
        except OSError as exc:
            raise SysfsIOError(f"Can't open file for writing: {path} ({exc})", str(path)) from exc

        logger.debug("wrote %s: %r", path, content)


def tokens_of(lines: Sequence[str]) -> List[str]:
    """All whitespace separated tokens of a file, across lines."""
    return " ".join(lines).split()


def parse_leading_int(lines: Sequence[str], default: int, path: str = "") -> int:
    """
    Parse the first token of the content as a decimal integer.

    Empty content gives ``default``; anything else that is not an integer
    raises SysfsParseError.
    """
    tokens = tokens_of(lines)
    if not tokens:
        return default
    try:
        return int(tokens[0])
    except ValueError:
        raise SysfsParseError(f"Expected an integer in {path}, got {tokens[0]!r}", path) from None


def parse_int_pair(lines: Sequence[str], path: str = "") -> List[int]:
    tokens = tokens_of(lines)
    if len(tokens) < 2:
        raise SysfsParseError(f"Expected two integers in {path}, got {tokens!r}", path)
    try:
        return [int(tokens[0]), int(tokens[1])]
    except ValueError:
        raise SysfsParseError(f"Expected two integers in {path}, got {tokens[:2]!r}", path) from None
