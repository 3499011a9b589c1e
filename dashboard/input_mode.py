# input_mode.py
#
# Live/Test input state machine.
#
#   LIVE --enter_test(v)--> TEST     sensor subscription released, reading = v
#   TEST --exit_test()----> LIVE     sensor subscription re-acquired, reading kept
#                                    until the next sample arrives
#
# Sensor samples received in TEST and test values set in LIVE are ignored.

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from sensor_feed import SensorFeed, Subscription

TEST_VALUE_MIN = 0.0
TEST_VALUE_MAX = 1000.0
DEFAULT_TEST_VALUE = 300.0

TEST_PRESETS = {
    "low": ("Düşük", 100.0),
    "ideal": ("İdeal", 300.0),
    "high": ("Yüksek", 600.0),
}

TEST_MODE_HINT_ON = "Test modunda sensör devre dışı bırakılır ve manuel olarak ışık seviyesi ayarlanabilir."
TEST_MODE_HINT_OFF = (
    "Test modunu açarak farklı ışık seviyelerini test edebilirsiniz. "
    "Sensör otomatik olarak devre dışı kalacaktır."
)


class InputMode(Enum):
    LIVE = "live"
    TEST = "test"


@dataclass(frozen=True)
class ReadingState:
    mode: InputMode
    lux: float
    test_value: float
    updated_at: Optional[datetime] = None

    @property
    def is_test(self) -> bool:
        return self.mode is InputMode.TEST


Listener = Callable[[ReadingState], None]


def clamp_test_value(value: float) -> float:
    return max(TEST_VALUE_MIN, min(TEST_VALUE_MAX, float(value)))


class InputModeController:
    def __init__(self, feed: SensorFeed, test_value: float = DEFAULT_TEST_VALUE):
        self._feed = feed
        self._listeners: List[Listener] = []
        self._closed = False
        self._state = ReadingState(mode=InputMode.LIVE, lux=0.0, test_value=test_value)
        self._sensor_sub: Optional[Subscription] = feed.subscribe(self.on_sensor_sample)

    @property
    def state(self) -> ReadingState:
        return self._state

    @property
    def mode(self) -> InputMode:
        return self._state.mode

    @property
    def reading(self) -> float:
        return self._state.lux

    @property
    def test_value(self) -> float:
        return self._state.test_value

    @property
    def feed(self) -> SensorFeed:
        return self._feed

    @property
    def consuming_sensor(self) -> bool:
        return self._sensor_sub is not None and self._sensor_sub.active

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)

        def _release():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(_release)

    def _set_state(self, **changes) -> None:
        changes.setdefault("updated_at", self._feed.now())
        self._state = ReadingState(
            mode=changes.get("mode", self._state.mode),
            lux=changes.get("lux", self._state.lux),
            test_value=changes.get("test_value", self._state.test_value),
            updated_at=changes["updated_at"],
        )
        for listener in list(self._listeners):
            listener(self._state)

    def _release_sensor(self) -> None:
        if self._sensor_sub is not None:
            self._sensor_sub.release()
            self._sensor_sub = None

    def enter_test(self, initial_test_value: Optional[float] = None) -> None:
        """Freeze the reading at the test value and stop consuming sensor samples."""
        value = self._state.test_value if initial_test_value is None else float(initial_test_value)
        if self._state.mode is InputMode.TEST:
            self.set_test_value(value)
            return

        self._release_sensor()
        print(f"🧪 Test mode on ({value:.0f} lux)")
        self._set_state(mode=InputMode.TEST, lux=value, test_value=value)

    def exit_test(self) -> None:
        """Resume sensor sampling. The reading stays stale until the next sample."""
        if self._state.mode is InputMode.LIVE:
            return

        if not self._closed:
            self._sensor_sub = self._feed.subscribe(self.on_sensor_sample)
            print(f"📡 Test mode off, listening to {self._feed.name} sensor")
        # reading is still the test value, so its timestamp stays too
        self._set_state(mode=InputMode.LIVE, updated_at=self._state.updated_at)

    def set_test_value(self, value: float) -> bool:
        if self._state.mode is not InputMode.TEST:
            return False
        value = float(value)
        self._set_state(lux=value, test_value=value)
        return True

    def on_sensor_sample(self, lux: float, timestamp: Optional[datetime] = None) -> bool:
        # a late event from a released subscription must not overwrite a test value
        if self._closed or self._state.mode is not InputMode.LIVE:
            return False
        self._set_state(lux=float(lux), updated_at=timestamp or self._feed.now())
        return True

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """End the session: release the sensor for good. Safe to call twice."""
        if self._sensor_sub is not None:
            print(f"🔌 Releasing {self._feed.name} sensor")
        self._closed = True
        self._release_sensor()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
