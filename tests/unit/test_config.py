"""Tests für das Konfigurations-Management."""

import pytest

from clipfx_studio.core.config import Config
from clipfx_studio.core.exceptions import ConfigurationError


def test_missing_file_creates_defaults(tmp_path):
    path = tmp_path / "config.ini"
    config = Config(path)

    assert path.exists()
    assert config.get("Timing", "rounding") == "half_even"
    assert config.get_int("PopCurve", "pop_in_frames_a") == 4
    assert config.get_float("PopCurve", "max_scale") == 1.5
    assert config.get_bool("TextWidth", "enabled") is False


def test_create_false_does_not_write(tmp_path):
    path = tmp_path / "config.ini"
    Config(path, create=False)
    assert not path.exists()


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[PopCurve]\nmin_scale = 0.25\n\n[Transfer]\ntransactional = yes\n")

    config = Config(path)

    assert config.get_float("PopCurve", "min_scale") == 0.25
    assert config.get_float("PopCurve", "max_scale") == 1.5
    assert config.get_bool("Transfer", "transactional") is True


def test_defaults_for_unknown_options():
    config = Config(None)
    assert config.get("Nope", "missing", "fallback") == "fallback"
    assert config.get_int("Nope", "missing", 7) == 7
    assert config.get_float("Nope", "missing", 0.5) == 0.5
    assert config.get_bool("Nope", "missing", True) is True


def test_unparseable_numbers_fall_back():
    config = Config(None)
    config.set("PopCurve", "pop_in_frames_a", "four")
    assert config.get_int("PopCurve", "pop_in_frames_a", 4) == 4


def test_get_list():
    config = Config(None)
    config.set("Classifier", "pip_names", " Picture in Picture , Crop,, ")
    assert config.get_list("Classifier", "pip_names") == ("Picture in Picture", "Crop")
    assert config.get_list("Classifier", "unknown", ("a",)) == ("a",)


def test_set_and_save_round_trip(tmp_path):
    path = tmp_path / "config.ini"
    config = Config(path)
    config.set("Logging", "console_level", "DEBUG")
    config.save()

    assert Config(path).get("Logging", "console_level") == "DEBUG"


def test_in_memory_config_cannot_be_saved():
    with pytest.raises(ConfigurationError):
        Config(None).save()
