# twin_sim_test.py
import random
from datetime import datetime, timezone

from twin_sim import TwinConfig, generate_series, observed_lux, predicted_lux, summarize_bands


def _fixed_cloud(_ts):
    return 0.2  # mostly clear


def test_time_is_increasing():
    cfg = TwinConfig(sampling_seconds=60)
    start = datetime(2026, 2, 1, 0, 0, tzinfo=timezone.utc)
    docs = generate_series(start, minutes=180, cfg=cfg, cloud_cover_fn=_fixed_cloud)

    ts_list = [d["ts"] for d in docs]
    assert ts_list == sorted(ts_list)
    assert len(ts_list) == 180


def test_night_is_lamp_only_day_has_peak():
    cfg = TwinConfig(sunrise_hour=7.0, sunset_hour=19.0, lamp_lux=90.0, peak_lux=850.0)

    def at(hour):
        return predicted_lux(datetime(2026, 2, 1, hour, 0, tzinfo=timezone.utc), 0.2, cfg)

    assert at(2) == 90.0
    assert at(22) == 90.0
    assert at(13) > at(9) > at(2)


def test_night_lamp_is_low_midday_is_not():
    cfg = TwinConfig(noise_sigma=0.0, anomaly_rate=0.0, drift_per_day=0.0)
    start = datetime(2026, 2, 1, 0, 0, tzinfo=timezone.utc)
    docs = generate_series(start, minutes=24 * 60, cfg=cfg, cloud_cover_fn=_fixed_cloud)

    assert docs[2 * 60]["category"] == "low"
    assert docs[13 * 60]["category"] == "high"


def test_drift_increases_observed_over_days():
    cfg = TwinConfig(drift_per_day=5.0, noise_sigma=0.0, anomaly_rate=0.0)

    assert observed_lux(300.0, 0, cfg) == 300.0
    assert observed_lux(300.0, 2, cfg) == 310.0


def test_observed_never_negative():
    cfg = TwinConfig(lamp_lux=0.0, noise_sigma=50.0, anomaly_rate=0.5)
    rng = random.Random(3)
    assert all(observed_lux(0.0, 0, cfg, rng=rng) >= 0.0 for _ in range(500))


def test_summarize_bands():
    docs = [{"category": "low"}, {"category": "ideal"}, {"category": "ideal"}, {"category": "high"}]
    report = summarize_bands(docs)
    assert report["ok"] is True
    assert report["count"] == 4
    assert report["percent"] == {"low": 25.0, "ideal": 50.0, "high": 25.0}


def test_summarize_bands_empty():
    assert summarize_bands([]) == {"ok": False, "reason": "no data"}
