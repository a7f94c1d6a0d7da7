"""
Entry point für den Initiativen-Konfigurator.
Dieses Modul startet die Anwendung.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import AppConfig, configure_logging, default_config
from .controller import ConfiguratorController
from .domain import ApplicationState
from .exceptions import PersistenceError
from .persistence import JsonStateRepository, JsonStateSerializer
from .service import AuthService, CategoryService, ConfigurationService, FieldService
from .view import ConsoleView

logger = logging.getLogger(__name__)


def load_state(repo: JsonStateRepository, view: ConsoleView) -> ApplicationState:
    """
    Lädt den gespeicherten Zustand.
    - Datei fehlt -> neuer, leerer Zustand
    - Datei beschädigt -> Meldung und neuer, leerer Zustand
    """
    try:
        loaded = repo.load()
    except PersistenceError as e:
        logger.error("Laden fehlgeschlagen: %s", e)
        view.show_error(f"Gespeicherter Zustand konnte nicht geladen werden: {e}")
        view.show_warning("Start mit leerem Zustand.")
        return ApplicationState()

    if loaded is None:
        view.show_info("Kein gespeicherter Zustand. Erster Start.")
        return ApplicationState()

    view.show_info("Gespeicherter Zustand geladen.")
    return loaded


def build_controller(
    state: ApplicationState,
    repo: JsonStateRepository,
    view: ConsoleView,
) -> ConfiguratorController:
    """Verdrahtet Services und Controller. Alle Services teilen sich denselben State."""
    return ConfiguratorController(
        view=view,
        auth=AuthService(state),
        configuration=ConfigurationService(state),
        fields=FieldService(state),
        categories=CategoryService(state),
        repo=repo,
        state=state,
    )


def main(config: Optional[AppConfig] = None) -> None:
    """
    Startpunkt der Anwendung.
    Ablauf:
    - Konfiguration und Logging
    - Zustand laden
    - Komponenten erstellen
    - Controller starten
    """
    config = config or default_config()
    view = ConsoleView()

    try:
        configure_logging(config)
    except OSError as e:
        # Ohne Log-Datei geht es trotzdem weiter.
        view.show_warning(f"Log-Datei nicht verfügbar: {e}")

    try:
        repo = JsonStateRepository(config.data_path, serializer=JsonStateSerializer(config.json_indent))
        state = load_state(repo, view)
        controller = build_controller(state, repo, view)

        logger.info("Anwendung gestartet (Daten: %s)", config.data_path)
        controller.run()
        logger.info("Anwendung beendet")

    except (KeyboardInterrupt, EOFError):
        # Sauberer Abbruch per Strg+C / Strg+D.
        print("\nAnwendung beendet.")
        sys.exit(0)

    except Exception as e:
        # Unerwarteter Fehler.
        logger.exception("Unerwarteter Fehler")
        print(f"\nFEHLER: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
