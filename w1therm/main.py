import logging

from fastapi import FastAPI

from .api import bus, devices, health
from .config import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="1-Wire Temperature Sensors")

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(bus.router, prefix="/bus", tags=["bus"])
app.include_router(devices.router, prefix="/devices", tags=["devices"])
