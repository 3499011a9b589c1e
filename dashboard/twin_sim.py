# twin_sim.py
#
# Digital twin for a desk light sensor:
# - lamp baseline outside daylight hours
# - window daylight as a sine curve between sunrise and sunset, dimmed by clouds
# - gaussian noise, slow upward drift, occasional anomalies (lamp off, glare, shadow)
#
# Used as the sample source when no hardware sensor is attached, and for
# quick "how much of the day is in the ideal band" summaries.

import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from light_status import LightCategory, classify


@dataclass(frozen=True)
class TwinConfig:
    device_id: str = "luxon-desk-01"
    sampling_seconds: int = 60  # one reading per minute

    # Lux curve characteristics
    lamp_lux: float = 90.0            # desk lamp / ceiling light only
    peak_lux: float = 850.0           # window light at midday
    sunrise_hour: float = 7.0
    sunset_hour: float = 19.0

    # Noise and drift
    noise_sigma: float = 12.0         # gaussian noise on observed readings
    drift_per_day: float = 1.5        # sensor drifts upward per day
    anomaly_rate: float = 0.005       # chance to inject an anomaly per reading


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def _fractional_hour(ts: datetime) -> float:
    return ts.hour + ts.minute / 60.0 + ts.second / 3600.0


def predicted_lux(ts: datetime, cloud_cover: float, cfg: TwinConfig) -> float:
    """
    Predict desk lux using a smooth day curve:
      - lamp lux outside sunrise..sunset
      - sine curve between sunrise and sunset (peaks at midday)
      - cloud_cover in [0,1] attenuates the daylight part only
    """
    h = _fractional_hour(ts)
    if h < cfg.sunrise_hour or h > cfg.sunset_hour:
        return cfg.lamp_lux

    span = cfg.sunset_hour - cfg.sunrise_hour
    x = (h - cfg.sunrise_hour) / span  # 0..1
    daylight_shape = math.sin(math.pi * x)  # 0 at sunrise/sunset, 1 at midday

    attenuation = 1.0 - 0.75 * _clamp(cloud_cover, 0.0, 1.0)
    lux = cfg.lamp_lux + (cfg.peak_lux - cfg.lamp_lux) * daylight_shape * attenuation
    return max(0.0, lux)


def observed_lux(
    pred_lux: float,
    day_index: int,
    cfg: TwinConfig,
    rng: Optional[random.Random] = None,
) -> float:
    """
    Observed lux = predicted + drift + noise + occasional anomaly.
    A photodiode never reports below zero, so the result is floored at 0.
    """
    rng = rng or random
    drift = cfg.drift_per_day * day_index
    obs = pred_lux + drift + rng.gauss(0.0, cfg.noise_sigma)

    if rng.random() < cfg.anomaly_rate:
        kind = rng.choice(["lamp_off", "glare", "shadow"])
        if kind == "lamp_off":
            obs = 0.0
        elif kind == "glare":
            obs = cfg.peak_lux * 1.5
        elif kind == "shadow":
            obs = pred_lux * 0.3

    return max(0.0, obs)


def generate_series(
    start_ts: datetime,
    minutes: int,
    cfg: TwinConfig,
    cloud_cover_fn: Optional[Callable[[datetime], float]] = None,
    rng: Optional[random.Random] = None,
) -> List[Dict]:
    """
    Generate one document per sampling step:
      - ts (datetime, tz-aware), lux_pred, lux_obs
      - category (comfort band of lux_obs)
      - cloud_cover
    """
    if start_ts.tzinfo is None:
        start_ts = start_ts.replace(tzinfo=timezone.utc)
    rng = rng or random

    total_points = int((minutes * 60) / cfg.sampling_seconds)
    out: List[Dict] = []

    for i in range(total_points):
        ts = start_ts + timedelta(seconds=i * cfg.sampling_seconds)
        day_index = (ts.date() - start_ts.date()).days

        cloud_cover = float(cloud_cover_fn(ts)) if cloud_cover_fn else rng.random()
        cloud_cover = _clamp(cloud_cover, 0.0, 1.0)

        pred = predicted_lux(ts, cloud_cover, cfg)
        obs = observed_lux(pred, day_index, cfg, rng=rng)

        out.append(
            {
                "device_id": cfg.device_id,
                "ts": ts,
                "cloud_cover": cloud_cover,
                "lux_pred": float(pred),
                "lux_obs": float(obs),
                "category": classify(obs).category.value,
            }
        )

    return out


def summarize_bands(docs: List[Dict]) -> Dict:
    """Share of samples (percent) that fall in each comfort band."""
    if not docs:
        return {"ok": False, "reason": "no data"}

    counts = {c.value: 0 for c in LightCategory}
    for d in docs:
        counts[d["category"]] += 1

    total = len(docs)
    return {
        "ok": True,
        "count": total,
        "percent": {k: round(100.0 * v / total, 2) for k, v in counts.items()},
    }


def main() -> None:
    """
    Default run: simulate today at 1-minute resolution and print the band split.
    """
    cfg = TwinConfig()
    start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    docs = generate_series(start_ts=start, minutes=24 * 60, cfg=cfg)

    report = summarize_bands(docs)
    print("Twin Band Report")
    print("----------------")
    print(f"count: {report['count']}")
    for band, pct in report["percent"].items():
        print(f"{band}: {pct}%")


if __name__ == "__main__":
    main()
