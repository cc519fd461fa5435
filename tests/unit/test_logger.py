import logging

import pytest

from clipfx_studio.core.config import Config
from clipfx_studio.core.exceptions import ConfigurationError
from clipfx_studio.utils.logger import get_logger, setup_logging, setup_logging_from_config


def test_setup_logging_writes_rotating_file(tmp_path):
    logger = setup_logging(log_file="test.log", log_dir=str(tmp_path))
    logger.info("hello")

    handlers = {type(h).__name__ for h in logger.handlers}
    assert handlers == {"StreamHandler", "RotatingFileHandler"}
    assert (tmp_path / "test.log").exists()


def test_console_only_without_log_dir():
    logger = setup_logging(log_dir=None)
    assert [type(h).__name__ for h in logger.handlers] == ["StreamHandler"]


def test_setup_from_config_verbose(tmp_path):
    config = Config(None)
    config.set("Logging", "log_dir", str(tmp_path))

    logger = setup_logging_from_config(config, verbose=True)

    console = next(h for h in logger.handlers if type(h).__name__ == "StreamHandler")
    assert console.level == logging.DEBUG


def test_get_logger_names():
    assert get_logger("clipfx_studio.animation").name == "clipfx_studio.animation"
    assert get_logger("plugin").name == "clipfx_studio.plugin"
    assert get_logger().name == "clipfx_studio"


def test_unknown_level_is_a_configuration_error():
    previous = setup_logging(log_dir=None)
    config = Config(None)
    config.set("Logging", "console_level", "VERBOSE")

    with pytest.raises(ConfigurationError, match="VERBOSE"):
        setup_logging_from_config(config)

    # bestehende Handler bleiben erhalten
    assert previous.handlers


def test_level_names_are_case_insensitive():
    logger = setup_logging(console_level="warning", log_dir=None)
    assert logger.handlers[0].level == logging.WARNING
