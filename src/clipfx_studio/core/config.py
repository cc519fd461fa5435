"""
Zentrales Konfigurations-Management für ClipFX Studio

Verwendet configparser für .ini-Dateien.
Automatische Erstellung von Standardkonfiguration.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from . import constants
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _join(values: tuple[str, ...]) -> str:
    return ", ".join(values)


class Config:
    """Zentrale Konfigurationsklasse für ClipFX Studio."""

    def __init__(self, config_file: str | Path | None = "config.ini", create: bool = True):
        """
        Initialisiert die Konfiguration.

        Args:
            config_file: Pfad zur Konfigurationsdatei (None: nur Defaults im Speicher)
            create: Standardkonfiguration speichern, falls die Datei fehlt
        """
        self.config_file = Path(config_file) if config_file is not None else None
        self.config = configparser.ConfigParser()
        self.load(create=create)

    def load(self, create: bool = True) -> None:
        """Lädt die Konfiguration aus der Datei oder erstellt Standardkonfiguration."""
        self._create_default_config()
        if self.config_file is None:
            return
        if self.config_file.exists():
            self.config.read(self.config_file, encoding="utf-8")
            logger.info(f"Konfiguration aus {self.config_file} geladen")
        else:
            logger.info(
                f"Konfigurationsdatei {self.config_file} nicht gefunden. "
                "Verwende Standardkonfiguration."
            )
            if create:
                self.save()

    def _create_default_config(self) -> None:
        """Erstellt die Standardkonfiguration."""
        self.config["Timing"] = {
            "rounding": "half_even",  # half_even, half_away_from_zero
        }

        self.config["PopCurve"] = {
            "min_scale": str(constants.DEFAULT_MIN_SCALE),
            "max_scale": str(constants.DEFAULT_MAX_SCALE),
            "pop_in_frames_a": str(constants.POP_IN_FRAMES_A),
            "pop_in_frames_b": str(constants.POP_IN_FRAMES_B),
            "pop_out_frames_a": str(constants.POP_OUT_FRAMES_A),
            "pop_out_frames_b": str(constants.POP_OUT_FRAMES_B),
            "full_pop_out_min_frame_buffer": str(constants.FULL_POP_OUT_MIN_FRAME_BUFFER),
            "half_pop_out_min_frame_buffer": str(constants.HALF_POP_OUT_MIN_FRAME_BUFFER),
        }

        self.config["TextWidth"] = {
            "enabled": "false",
            "full_width_characters": str(constants.FULL_WIDTH_CHARACTERS),
            "grow_factor": str(constants.SCALE_GROW_FACTOR),
            "shrink_factor": str(constants.SCALE_SHRINK_FACTOR),
            "margin": str(constants.SCALE_MARGIN),
        }

        self.config["Transfer"] = {
            "reference_corner": constants.REFERENCE_CORNER,
            "mode_parameter": constants.MODE_PARAMETER,
            "free_form_choice": str(constants.FREE_FORM_CHOICE_INDEX),
            "transactional": "false",
        }

        self.config["Classifier"] = {
            "text_generator_names": _join(constants.TEXT_GENERATOR_NAMES),
            "text_generator_uids": _join(constants.TEXT_GENERATOR_UIDS),
            "pip_names": _join(constants.PIP_NAMES),
            "pip_uids": _join(constants.PIP_UIDS),
            "tracking_names": _join(constants.TRACKING_NAMES),
            "tracking_uids": _join(constants.TRACKING_UIDS),
        }

        self.config["Logging"] = {
            "console_level": "INFO",
            "file_level": "DEBUG",
            "log_file": "clipfx.log",
            "log_dir": "logs",
        }

    def save(self) -> None:
        """Speichert die Konfiguration in die Datei."""
        if self.config_file is None:
            raise ConfigurationError("Configuration has no file to save to")
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            self.config.write(f)
        logger.info(f"Konfiguration in {self.config_file} gespeichert")

    def get(self, section: str, option: str, default: Any | None = None) -> str | None:
        """
        Holt einen Konfigurationswert.

        Args:
            section: Section-Name
            option: Option-Name
            default: Default-Wert falls nicht gefunden

        Returns:
            Konfigurationswert oder default
        """
        try:
            return self.config.get(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError):
            logger.warning(
                f"Konfigurationswert [{section}] {option} nicht gefunden. "
                f"Verwende Default: {default}"
            )
            return default

    def get_int(self, section: str, option: str, default: int | None = None) -> int | None:
        """Holt einen Integer-Konfigurationswert."""
        try:
            return self.config.getint(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_float(self, section: str, option: str, default: float | None = None) -> float | None:
        """Holt einen Float-Konfigurationswert."""
        try:
            return self.config.getfloat(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_bool(self, section: str, option: str, default: bool | None = None) -> bool | None:
        """Holt einen Boolean-Konfigurationswert."""
        try:
            return self.config.getboolean(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_list(
        self, section: str, option: str, default: tuple[str, ...] = ()
    ) -> tuple[str, ...]:
        """
        Holt eine komma-separierte Liste.

        Leere Einträge werden verworfen.
        """
        raw = self.get(section, option)
        if raw is None:
            return tuple(default)
        return tuple(item.strip() for item in raw.split(",") if item.strip())

    def set(self, section: str, option: str, value: Any) -> None:
        """
        Setzt einen Konfigurationswert.

        Args:
            section: Section-Name
            option: Option-Name
            value: Zu setzender Wert
        """
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))
        logger.debug(f"Konfiguration gesetzt: [{section}] {option} = {value}")

    def __repr__(self) -> str:
        """String-Repräsentation."""
        sections = ", ".join(self.config.sections())
        return f"Config(file='{self.config_file}', sections=[{sections}])"


# Globale Konfigurationsinstanz
_config = None


def get_config(config_file: str | Path = "config.ini") -> Config:
    """
    Gibt die globale Konfigurationsinstanz zurück.

    Args:
        config_file: Pfad zur Konfigurationsdatei

    Returns:
        Config-Instanz
    """
    global _config
    if _config is None:
        _config = Config(config_file)
    return _config
