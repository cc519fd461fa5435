"""
Logging-System für ClipFX Studio

Basierend auf Python logging mit Console- und File-Handler.
Automatische Log-Rotation und verschiedene Log-Level.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ..core.exceptions import ConfigurationError

ROOT_LOGGER_NAME = "clipfx_studio"

# Globaler Logger für die Anwendung
_logger = None


def _level(value: str | int, fallback: int) -> int:
    if isinstance(value, int):
        return value
    if not value:
        return fallback
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {value}", {"level": value})
    return level


def setup_logging(
    log_file: str = "clipfx.log",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
    log_dir: str | None = "logs",
) -> logging.Logger:
    """
    Richtet das Logging-System für die Anwendung ein.

    Args:
        log_file: Name der Log-Datei
        console_level: Log-Level für Console-Ausgabe
        file_level: Log-Level für File-Ausgabe
        log_dir: Verzeichnis für Log-Dateien (None = nur Console)

    Returns:
        Konfigurierter Logger

    Raises:
        ConfigurationError: Unbekannter Log-Level Name
    """
    global _logger
    console_level = _level(console_level, logging.INFO)
    file_level = _level(file_level, logging.DEBUG)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    _logger = logger

    # Entferne bestehende Handler
    if logger.hasHandlers():
        logger.handlers.clear()

    # Console-Handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_dir is None:
        logger.debug("Logging-System initialisiert (nur Console)")
        return logger

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Datei-Handler mit Rotation (10MB pro Datei, 5 Backups)
    log_filepath = log_path / log_file
    file_handler = RotatingFileHandler(
        log_filepath, maxBytes=10485760, backupCount=5, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    logger.info(f"Logging-System initialisiert. Log-Datei: {log_filepath}")
    return logger


def setup_logging_from_config(config, verbose: bool = False) -> logging.Logger:
    """Richtet Logging anhand der [Logging] Section ein."""
    console_level = "DEBUG" if verbose else config.get("Logging", "console_level", "INFO")
    return setup_logging(
        log_file=config.get("Logging", "log_file", "clipfx.log"),
        console_level=console_level,
        file_level=config.get("Logging", "file_level", "DEBUG"),
        log_dir=config.get("Logging", "log_dir", "logs"),
    )


def get_logger(name: str = None) -> logging.Logger:
    """
    Gibt einen Logger zurück (entweder modul-spezifisch oder global).
    Falls noch nicht initialisiert, wird setup_logging() aufgerufen.

    Args:
        name: Optional logger name (typically __name__ from calling module)

    Returns:
        Application logger
    """
    global _logger
    if _logger is None:
        _logger = setup_logging()

    if name:
        if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
            return logging.getLogger(name)
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    return _logger
