import json
import os

import pytest

from tape_vision.utils.config_utils import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_PUBLISHER_CONFIG,
    ConfigError,
    config_file_from_argv,
    parse_config,
    read_camera_config,
    read_config,
)

SAMPLE_CONFIG = os.path.join(os.path.dirname(__file__), "..", "config", "frc.json")


def test_minimal_config_gets_defaults():
    config = parse_config({"cameras": []})

    assert config["cameras"] == []
    assert config["pipeline"] == {}
    assert config["calibration"] == {}
    assert config["publisher"] == DEFAULT_PUBLISHER_CONFIG


def test_publisher_overrides_merge_with_defaults():
    config = parse_config({"cameras": [], "publisher": {"table": "Goal"}})
    assert config["publisher"]["table"] == "Goal"
    assert config["publisher"]["log_every_n_frames"] == 20


def test_top_level_must_be_object():
    with pytest.raises(ConfigError, match="must be JSON object"):
        parse_config([1, 2, 3])


def test_cameras_required():
    with pytest.raises(ConfigError, match="could not read cameras"):
        parse_config({"pipeline": {}})


def test_cameras_must_be_list():
    with pytest.raises(ConfigError, match="JSON array"):
        parse_config({"cameras": {"name": "cam"}})


def test_camera_name_required():
    with pytest.raises(ConfigError, match="could not read camera name"):
        read_camera_config({"path": "/dev/video0"})


def test_camera_path_required():
    with pytest.raises(ConfigError, match="camera 'front': could not read path"):
        read_camera_config({"name": "front"})


def test_camera_defaults():
    camera = read_camera_config({"name": "front", "path": "/dev/video0"})
    assert camera == {
        "name": "front",
        "path": "/dev/video0",
        "width": 320,
        "height": 240,
        "fps": 30,
        "pixel_format": None,
        "brightness": None,
        "white_balance": None,
        "exposure": None,
        "properties": [],
        "stream": {},
    }


def test_camera_settings_are_carried():
    camera = read_camera_config({
        "name": "front",
        "path": "/dev/video0",
        "pixel format": "MJPEG",
        "brightness": 30,
        "white balance": "hold",
        "exposure": 5,
        "properties": [{"name": "contrast", "value": 50}, {"name": "Auto Exposure", "value": False}],
    })

    assert camera["pixel_format"] == "MJPEG"
    assert camera["brightness"] == 30
    assert camera["white_balance"] == "hold"
    assert camera["exposure"] == 5
    assert camera["properties"] == [("contrast", 50), ("Auto Exposure", 0)]


def base_camera(**overrides):
    camera = {"name": "front", "path": "/dev/video0"}
    camera.update(overrides)
    return camera


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"width": "wide"}, "width must be a positive integer"),
        ({"height": 0}, "height must be a positive integer"),
        ({"fps": 0}, "fps must be a positive integer"),
        ({"fps": -5}, "fps must be a positive integer"),
        ({"fps": 7.5}, "fps must be a positive integer"),
        ({"fps": True}, "fps must be a positive integer"),
        ({"stream": [1]}, "stream must be a JSON object"),
        ({"stream": {"quality": "high"}}, "stream quality"),
        ({"stream": {"quality": 101}}, "stream quality"),
        ({"pixel format": "H264X"}, "unknown pixel format"),
        ({"pixel format": 7}, "unknown pixel format"),
        ({"brightness": "bright"}, "brightness must be a number"),
        ({"exposure": "manual"}, "exposure must be"),
        ({"white balance": [4000]}, "white balance must be"),
        ({"properties": {"name": "contrast"}}, "properties must be a JSON array"),
        ({"properties": [{"value": 1}]}, "could not read property name"),
        ({"properties": [{"name": "sharpnesss", "value": 1}]}, "unknown property 'sharpnesss'"),
        ({"properties": [{"name": "contrast", "value": "max"}]}, "needs a numeric value"),
    ],
)
def test_bad_camera_values_raise_config_error(overrides, message):
    with pytest.raises(ConfigError, match=message):
        read_camera_config(base_camera(**overrides))


def test_integral_float_sizes_are_accepted():
    camera = read_camera_config(base_camera(width=640.0, fps=15))
    assert camera["width"] == 640
    assert isinstance(camera["width"], int)


@pytest.mark.parametrize("section", ["pipeline", "calibration", "publisher"])
def test_sections_must_be_objects(section):
    with pytest.raises(ConfigError, match=f"{section} must be a JSON object"):
        parse_config({"cameras": [], section: [1, 2]})


@pytest.mark.parametrize(
    "calibration, message",
    [
        ({"fov_horizontal": "61"}, "fov_horizontal must be a positive number"),
        ({"distance_between_targets": 0}, "distance_between_targets must be a positive number"),
        ({"pixels_horizontal": -320}, "pixels_horizontal must be a positive number"),
        ({"legacy_fov_units": "yes"}, "legacy_fov_units must be true or false"),
    ],
)
def test_bad_calibration_raises_config_error(calibration, message):
    with pytest.raises(ConfigError, match=message):
        parse_config({"cameras": [], "calibration": calibration})


@pytest.mark.parametrize(
    "publisher, message",
    [
        ({"table": ""}, "table must be a non-empty string"),
        ({"image_topic": 5}, "image_topic must be a non-empty string"),
        ({"compressed": "true"}, "compressed must be true or false"),
        ({"show_debug_window": 1}, "show_debug_window must be true or false"),
        ({"log_every_n_frames": 0}, "log_every_n_frames must be a positive integer"),
    ],
)
def test_bad_publisher_raises_config_error(publisher, message):
    with pytest.raises(ConfigError, match=message):
        parse_config({"cameras": [], "publisher": publisher})


def test_bad_value_in_file_raises_config_error(tmp_path):
    path = tmp_path / "frc.json"
    path.write_text(json.dumps({"cameras": [base_camera(width="wide")]}))
    with pytest.raises(ConfigError) as excinfo:
        read_config(str(path))
    assert excinfo.value.config_file == str(path)


def test_error_names_the_file():
    with pytest.raises(ConfigError) as excinfo:
        parse_config(None, "/tmp/cams.json")
    assert "/tmp/cams.json" in str(excinfo.value)
    assert excinfo.value.config_file == "/tmp/cams.json"


def test_read_config_from_file(tmp_path):
    path = tmp_path / "frc.json"
    path.write_text(json.dumps({
        "cameras": [{"name": "cam", "path": "0", "fps": 15}],
        "calibration": {"fov_horizontal": 68.5},
    }))

    config = read_config(str(path))

    assert config["cameras"][0]["fps"] == 15
    assert config["calibration"]["fov_horizontal"] == 68.5


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="could not open"):
        read_config(str(tmp_path / "missing.json"))


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{ cameras: ")
    with pytest.raises(ConfigError, match="invalid JSON"):
        read_config(str(path))


def test_sample_config_parses():
    config = read_config(SAMPLE_CONFIG)

    assert config["cameras"][0]["width"] == 320
    assert config["cameras"][0]["exposure"] == 5
    assert config["cameras"][0]["properties"] == [("contrast", 50)]
    assert config["pipeline"]["blur_type"] == "Box Blur"
    assert config["calibration"]["distance_between_targets"] == 1.1
    assert config["publisher"]["table"] == "VisionTarget"


def test_config_file_from_argv():
    assert config_file_from_argv(["tape_target_subscriber"]) == DEFAULT_CONFIG_FILE
    assert config_file_from_argv(["tape_target_subscriber", "/home/pi/frc.json"]) == "/home/pi/frc.json"
