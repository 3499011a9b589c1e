import atexit
import math
from datetime import datetime

from flask import Flask, jsonify, request

from input_mode import (
    InputMode,
    InputModeController,
    TEST_MODE_HINT_OFF,
    TEST_MODE_HINT_ON,
    TEST_PRESETS,
    TEST_VALUE_MAX,
    TEST_VALUE_MIN,
    clamp_test_value,
)
from light_status import INFO_TEXT, INFO_TITLE, classify, get_recommendations, get_sensor_status
from sensor_feed import build_feed
from settings import load_settings

HISTORY_SIZE = 50


def keep_last_n(history_list, n=HISTORY_SIZE):
    if len(history_list) > n:
        del history_list[:-n]


def _iso(ts):
    return ts.isoformat() if ts else None


def _parse_lux(value):
    """float lux from a JSON value, or None if it is not a finite number"""
    if isinstance(value, bool):
        return None
    try:
        lux = float(value)
    except (TypeError, ValueError):
        return None
    return lux if math.isfinite(lux) else None


def _parse_timestamp(value, tz):
    if value is None:
        return None
    ts = datetime.fromisoformat(str(value))
    if ts.tzinfo is None:
        ts = tz.localize(ts)
    return ts


def _json_body():
    """request JSON as a dict, {} when absent; None when it is JSON but not an object"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def create_app(settings=None, feed=None):
    settings = settings or load_settings()
    feed = feed or build_feed(settings)

    controller = InputModeController(feed, test_value=clamp_test_value(settings.default_test_value))
    atexit.register(controller.close)

    # displayed readings, newest last
    reading_history = []

    def _record(state):
        reading_history.append({
            "lux": round(state.lux, 1),
            "mode": state.mode.value,
            "category": classify(state.lux).category.value,
            "timestamp": _iso(state.updated_at),
        })
        keep_last_n(reading_history, HISTORY_SIZE)

    controller.subscribe(_record)

    app = Flask(__name__)
    app.config["LUXON_SETTINGS"] = settings
    app.extensions["luxon"] = controller

    if feed.available:
        print(f"✅ LUXON started with {feed.name} sensor")
    else:
        print(f"⚠️ LUXON started, {feed.name} sensor not available (use test mode)")

    def reading_payload():
        state = controller.state
        return {
            "lux": round(state.lux, 1),
            "lux_display": int(state.lux),
            "mode": state.mode.value,
            "test_mode": state.is_test,
            "status": get_sensor_status(state.lux),
            "sensor_available": feed.available,
            "timestamp": _iso(state.updated_at),
        }

    def test_mode_payload():
        state = controller.state
        return {
            "enabled": state.is_test,
            "test_value": state.test_value,
            "lux": round(state.lux, 1),
            "range": {"min": TEST_VALUE_MIN, "max": TEST_VALUE_MAX},
            "presets": [
                {"key": key, "label": f"{label} ({int(lux)})", "lux": lux}
                for key, (label, lux) in TEST_PRESETS.items()
            ],
            "hint": TEST_MODE_HINT_ON if state.is_test else TEST_MODE_HINT_OFF,
            "status": get_sensor_status(state.test_value),
        }

    @app.get("/api/sensor")
    def get_sensor_data():
        """Current reading; in live mode a fresh sample is pulled first"""
        if controller.mode is InputMode.LIVE:
            feed.poll()
        return jsonify(reading_payload())

    @app.post("/api/v1/sensors/data")
    def submit_sensor_reading():
        data = _json_body()
        if data is None:
            return jsonify({"success": False, "error": "Expected a JSON object"}), 400

        lux = _parse_lux(data.get("lux"))
        if lux is None:
            return jsonify({"success": False, "error": "Missing or invalid 'lux'"}), 400

        try:
            timestamp = _parse_timestamp(data.get("timestamp"), settings.tz)
        except ValueError:
            return jsonify({"success": False, "error": "Invalid 'timestamp', expected ISO 8601"}), 400

        applied = controller.mode is InputMode.LIVE
        feed.publish(lux, timestamp)

        body = {"success": True, "applied": applied, "reading": reading_payload()}
        return jsonify(body), (201 if applied else 202)

    @app.get("/api/test-mode")
    def get_test_mode():
        return jsonify(test_mode_payload())

    @app.post("/api/test-mode")
    def set_test_mode():
        data = _json_body()
        if data is None:
            return jsonify({"success": False, "error": "Expected a JSON object"}), 400

        enabled = data.get("enabled")
        if not isinstance(enabled, bool):
            return jsonify({"success": False, "error": "Missing or invalid 'enabled'"}), 400

        if not enabled:
            # test_value has no meaning when leaving test mode
            controller.exit_test()
            return jsonify({"success": True, **test_mode_payload()})

        test_value = None
        if data.get("test_value") is not None:
            test_value = _parse_lux(data.get("test_value"))
            if test_value is None:
                return jsonify({"success": False, "error": "Invalid 'test_value'"}), 400
            test_value = clamp_test_value(test_value)

        controller.enter_test(test_value)
        return jsonify({"success": True, **test_mode_payload()})

    @app.post("/api/test-mode/value")
    def set_test_value():
        data = _json_body()
        if data is None:
            return jsonify({"success": False, "error": "Expected a JSON object"}), 400

        if "preset" in data:
            preset = TEST_PRESETS.get(str(data["preset"]).lower())
            if preset is None:
                return jsonify({"success": False, "error": f"Invalid preset. Valid presets: {list(TEST_PRESETS)}"}), 400
            value = preset[1]
        else:
            value = _parse_lux(data.get("lux"))
            if value is None:
                return jsonify({"success": False, "error": "Missing or invalid 'lux'"}), 400

        applied = controller.set_test_value(clamp_test_value(value))
        return jsonify({"success": True, "applied": applied, **test_mode_payload()})

    @app.get("/api/recommendations")
    def recommendations():
        lux = controller.reading
        return jsonify({
            "title": "Tavsiyeler",
            "lux": int(lux),
            "summary": f"Mevcut ışık seviyesi: {int(lux)} lux",
            "category": classify(lux).category.value,
            "items": list(get_recommendations(lux)),
        })

    @app.get("/api/info")
    def information():
        return jsonify({"title": "Bilgilendirme", "heading": INFO_TITLE, "text": INFO_TEXT})

    @app.get("/api/history")
    def history():
        return jsonify({"count": len(reading_history), "readings": list(reading_history)})

    return app


if __name__ == '__main__':
    settings = load_settings()
    app = create_app(settings)
    # one event at a time: sensor samples and UI edits never interleave
    app.run(debug=settings.debug, port=settings.port, threaded=False)
