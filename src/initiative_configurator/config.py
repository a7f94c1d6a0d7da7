"""
Konfiguration und Logging

- AppConfig: Pfade und Einstellungen (unveränderlich)
- default_config(): Standardpfade unter data/ im Repo-Root
- configure_logging(): Log-Datei für das Paket-Logger

Die Konsole bleibt der View vorbehalten. Logs gehen nur in die Datei.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "initiative_configurator"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s]: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 1 MB pro Datei, 3 Backups.
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3


@dataclass(frozen=True)
class AppConfig:
    """
    Laufzeit-Einstellungen.
    - data_path: JSON-Datei mit dem gesamten Zustand
    - log_path: Log-Datei
    - log_level: Name des Levels (z.B. "INFO")
    - json_indent: Einrückung beim Speichern
    """
    data_path: Path
    log_path: Path
    log_level: str = "INFO"
    json_indent: int = 2

    def __post_init__(self) -> None:
        """Leichte Prüfungen der Werte."""
        if not str(self.data_path).strip():
            raise ValueError("data_path darf nicht leer sein.")
        if not str(self.log_path).strip():
            raise ValueError("log_path darf nicht leer sein.")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unbekanntes Log-Level: {self.log_level!r}.")
        if self.json_indent < 0:
            raise ValueError(f"json_indent muss >= 0 sein, ist aber {self.json_indent}.")


def default_config() -> AppConfig:
    """
    Standardkonfiguration.
    Erwartet: data/ im Repo-Root (wird beim ersten Speichern angelegt).
    """
    repo_root = Path(__file__).resolve().parents[2]  # .../src/initiative_configurator/config.py
    data_dir = repo_root / "data"
    return AppConfig(
        data_path=data_dir / "appstate.json",
        log_path=data_dir / "initiative_configurator.log",
    )


def configure_logging(config: AppConfig) -> logging.Logger:
    """
    Richtet den Paket-Logger ein.
    Mehrfacher Aufruf ersetzt den vorhandenen Datei-Handler, statt einen zweiten anzuhängen.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.log_level.upper())

    for handler in list(logger.handlers):
        if isinstance(handler, RotatingFileHandler):
            logger.removeHandler(handler)
            handler.close()

    config.log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        config.log_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(handler)
    return logger
