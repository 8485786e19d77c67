import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field

W1_BASE_PATH = "/sys/bus/w1/devices"


class Settings(BaseModel):
    # 1-Wire sysfs tree
    w1_base_path: str = Field(
        default=W1_BASE_PATH,
        description="Directory holding the bus master and slave folders of the w1 driver",
    )
    w1_master_index: int = Field(
        default=1,
        ge=1,
        description="Index N of the bus master folder w1_bus_masterN to operate on",
    )

    # Alarm search polling
    alarm_poll_interval_seconds: float = Field(
        default=0.75,
        gt=0.0,
        description="Pause between two reads of therm_bulk_read while a conversion runs",
    )
    alarm_poll_max_retries: Optional[int] = Field(
        default=20,
        ge=1,
        description="Number of polls before giving up on a bulk conversion; None waits forever",
    )

    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="INFO",
        description="Root log level, e.g. DEBUG or WARNING",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}

        base_path = os.getenv("W1_BASE_PATH", "").strip()
        if base_path:
            values["w1_base_path"] = base_path

        master_index = os.getenv("W1_MASTER_INDEX", "").strip()
        if master_index:
            values["w1_master_index"] = int(master_index)

        poll_interval = os.getenv("W1_ALARM_POLL_INTERVAL", "").strip()
        if poll_interval:
            values["alarm_poll_interval_seconds"] = float(poll_interval)

        # 0 disables the bound and restores the unbounded wait
        max_retries = os.getenv("W1_ALARM_POLL_MAX_RETRIES", "").strip()
        if max_retries:
            values["alarm_poll_max_retries"] = int(max_retries) or None

        log_level = os.getenv("LOG_LEVEL", "").strip()
        if log_level:
            values["log_level"] = log_level.upper()

        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
