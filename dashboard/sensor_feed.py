# sensor_feed.py
#
# Light sample providers. Every provider hands out Subscription handles:
# registering a callback is acquisition, Subscription.release() gives it back
# and may be called any number of times.
#
#   SensorFeed            push-only; samples arrive via publish() (HTTP POST)
#   SimulatedLightSensor  pull; samples come from the digital twin curve
#   BH1750Sensor          pull; I2C read through smbus2 (optional dependency)

import random
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

import pytz

from twin_sim import TwinConfig, observed_lux, predicted_lux

try:
    from smbus2 import SMBus
    _HAS_SMBUS = True
except ImportError:
    _HAS_SMBUS = False

SampleCallback = Callable[[float, datetime], None]


@dataclass(frozen=True)
class LightSample:
    timestamp: datetime
    lux: float


class Subscription:
    def __init__(self, release_fn: Callable[[], None]):
        self._release_fn: Optional[Callable[[], None]] = release_fn

    @property
    def active(self) -> bool:
        return self._release_fn is not None

    def release(self) -> None:
        fn, self._release_fn = self._release_fn, None
        if fn is not None:
            fn()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class SensorFeed:
    """Base feed. Delivers every published sample to the active subscribers."""

    name = "push"

    def __init__(self, tz=None):
        self.tz = tz or pytz.utc
        self._callbacks: List[SampleCallback] = []

    @property
    def available(self) -> bool:
        return True

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: SampleCallback) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(lambda: self._unsubscribe(callback))

    def _unsubscribe(self, callback: SampleCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def publish(self, lux: float, timestamp: Optional[datetime] = None) -> LightSample:
        sample = LightSample(timestamp=timestamp or self.now(), lux=float(lux))
        # copy: a callback may release its own subscription
        for callback in list(self._callbacks):
            callback(sample.lux, sample.timestamp)
        return sample

    def read_lux(self) -> Optional[float]:
        return None

    def poll(self) -> Optional[LightSample]:
        """Take one reading and publish it. None when the sensor gave nothing."""
        lux = self.read_lux()
        if lux is None:
            return None
        return self.publish(lux)


class SimulatedLightSensor(SensorFeed):
    name = "simulated"

    def __init__(self, cfg: Optional[TwinConfig] = None, tz=None, cloud_cover: float = 0.3, rng=None):
        super().__init__(tz=tz)
        self.cfg = cfg or TwinConfig()
        self.cloud_cover = cloud_cover
        self._rng = rng or random.Random()
        self._started = self.now()

    def read_lux(self) -> Optional[float]:
        ts = self.now()
        day_index = (ts.date() - self._started.date()).days
        pred = predicted_lux(ts, self.cloud_cover, self.cfg)
        return observed_lux(pred, day_index, self.cfg, rng=self._rng)


class BH1750Sensor(SensorFeed):
    """BH1750 over I2C. Without smbus2 or a responding chip it yields no samples."""

    name = "bh1750"
    DEFAULT_ADDR = 0x23

    POWER_ON = 0x01
    CONTINUOUS_HIGH_RES = 0x10
    MEASUREMENT_SECONDS = 0.18

    def __init__(self, bus: int = 1, addr: int = DEFAULT_ADDR, tz=None):
        super().__init__(tz=tz)
        self.bus_num = bus
        self.addr = addr

    @property
    def available(self) -> bool:
        return _HAS_SMBUS

    def read_lux(self) -> Optional[float]:
        if not _HAS_SMBUS:
            return None
        try:
            with SMBus(self.bus_num) as bus:
                bus.write_byte(self.addr, self.POWER_ON)
                bus.write_byte(self.addr, self.CONTINUOUS_HIGH_RES)
                time.sleep(self.MEASUREMENT_SECONDS)
                data = bus.read_i2c_block_data(self.addr, 0x00, 2)
        except OSError as e:
            print(f"⚠️ BH1750 read failed on bus {self.bus_num} at 0x{self.addr:02x}: {e}")
            return None
        raw = (data[0] << 8) | data[1]
        return raw / 1.2


def build_feed(settings) -> SensorFeed:
    tz = settings.tz
    if settings.sensor_source == "bh1750":
        return BH1750Sensor(bus=settings.i2c_bus, addr=settings.i2c_address, tz=tz)
    if settings.sensor_source == "push":
        return SensorFeed(tz=tz)
    return SimulatedLightSensor(tz=tz)
