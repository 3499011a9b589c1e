import pytest

from light_status import (
    HIGH_LUX_THRESHOLD,
    LOW_LUX_THRESHOLD,
    LightCategory,
    calculate_progress,
    classify,
    get_recommendations,
    get_sensor_status,
)


@pytest.mark.parametrize("lux", [-50.0, 0.0, 100.0, 149.99])
def test_below_150_is_low(lux):
    assert classify(lux).category is LightCategory.LOW


@pytest.mark.parametrize("lux", [150.0, 300.0, 450.5, 600.0])
def test_150_to_600_inclusive_is_ideal(lux):
    assert classify(lux).category is LightCategory.IDEAL


@pytest.mark.parametrize("lux", [600.01, 700.0, 1200.0, 1e6])
def test_above_600_is_high(lux):
    assert classify(lux).category is LightCategory.HIGH


def test_thresholds_are_named_constants():
    assert LOW_LUX_THRESHOLD == 150
    assert HIGH_LUX_THRESHOLD == 600


def test_every_reading_gets_exactly_one_band():
    for lux in range(-100, 1500, 5):
        matches = [
            lux < LOW_LUX_THRESHOLD,
            LOW_LUX_THRESHOLD <= lux <= HIGH_LUX_THRESHOLD,
            lux > HIGH_LUX_THRESHOLD,
        ]
        assert matches.count(True) == 1
        expected = [LightCategory.LOW, LightCategory.IDEAL, LightCategory.HIGH][matches.index(True)]
        assert classify(lux).category is expected


def test_low_status_texts_and_colors():
    status = classify(100)
    assert status.message == "Ortam ışığı yetersiz"
    assert status.description == "Daha iyi bir çalışma ortamı için ışığı artırın."
    assert status.accent_color == status.text_color == "#C56A67"


def test_ideal_and_high_colors():
    assert classify(300).accent_color == "#548D6F"
    assert classify(700).accent_color == "#D4AF63"
    assert classify(700).message == "Ortam ışığı fazla parlak"


def test_classify_is_deterministic():
    assert classify(300) is classify(450)


def test_progress_examples():
    assert calculate_progress(-50) == 0.0
    assert calculate_progress(0) == 0.0
    assert calculate_progress(100) == pytest.approx(0.1)
    assert calculate_progress(300) == pytest.approx(0.3)
    assert calculate_progress(500) == pytest.approx(0.5)
    assert calculate_progress(700) == pytest.approx(0.7)
    assert calculate_progress(1000) == 1.0
    assert calculate_progress(1200) == 1.0
    assert calculate_progress(1500) == 1.0


def test_recommendations_follow_band():
    assert get_recommendations(100)[0].startswith("Işığı artırmak")
    assert get_recommendations(300)[0] == "Mevcut aydınlatma seviyeniz idealdir"
    assert get_recommendations(900)[0].startswith("Işığı azaltmak")


def test_sensor_status_payload():
    result = get_sensor_status(1200)
    assert result["category"] == "high"
    assert result["progress"] == 1.0
    assert result["text_color"] == "#D4AF63"
