# settings.py
#
# Runtime configuration, loaded from .env (local) or the environment.
#
# .env:
#   LUXON_SENSOR_SOURCE=simulated   # simulated | bh1750 | push
#   LUXON_TIMEZONE=Europe/Istanbul
#   LUXON_DEFAULT_TEST_VALUE=300
#   LUXON_I2C_BUS=1
#   LUXON_I2C_ADDRESS=0x23
#   LUXON_PORT=5001
#   LUXON_DEBUG=0

import os
from dataclasses import dataclass
from datetime import datetime

import pytz
from dotenv import load_dotenv

load_dotenv()

SENSOR_SOURCES = ("simulated", "bh1750", "push")


class InvalidSettingError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    sensor_source: str = "simulated"
    timezone: str = "Europe/Istanbul"
    default_test_value: float = 300.0
    i2c_bus: int = 1
    i2c_address: int = 0x23
    port: int = 5001
    debug: bool = False

    @property
    def tz(self):
        return pytz.timezone(self.timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)


def _get_env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        # base 0 accepts hex addresses like 0x23
        return int(raw.strip(), 0)
    except ValueError:
        raise InvalidSettingError(f"Invalid integer for {name}: {raw!r} (check .env)")


def _get_env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidSettingError(f"Invalid number for {name}: {raw!r} (check .env)")


def load_settings() -> Settings:
    source = os.getenv("LUXON_SENSOR_SOURCE", "simulated").strip().lower()
    if source not in SENSOR_SOURCES:
        raise InvalidSettingError(f"LUXON_SENSOR_SOURCE must be one of {SENSOR_SOURCES}, got {source!r}")

    tz_name = os.getenv("LUXON_TIMEZONE", "Europe/Istanbul")
    try:
        pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise InvalidSettingError(f"Unknown timezone for LUXON_TIMEZONE: {tz_name!r}")

    return Settings(
        sensor_source=source,
        timezone=tz_name,
        default_test_value=_get_env_float("LUXON_DEFAULT_TEST_VALUE", 300.0),
        i2c_bus=_get_env_int("LUXON_I2C_BUS", 1),
        i2c_address=_get_env_int("LUXON_I2C_ADDRESS", 0x23),
        port=_get_env_int("LUXON_PORT", 5001),
        debug=os.getenv("LUXON_DEBUG", "0").strip().lower() in ("1", "true", "yes"),
    )
