"""
Controller layer

Der ConfiguratorController steuert die App. Er verbindet Services, Repository und View.

Aufgaben:
- Anmeldung und Erstregistrierung
- Menüs anzeigen und Eingaben verarbeiten
- Services aufrufen und DomainErrors als Meldung anzeigen
- Nach jeder erfolgreichen Änderung speichern
"""

from __future__ import annotations

import logging
from typing import Optional

from .domain import DEFAULT_PASSWORD, DEFAULT_USERNAME, ApplicationState, Category, Configurator
from .exceptions import DomainError, DuplicateUsernameError, PersistenceError
from .persistence import StateRepository
from .service import AuthService, CategoryService, ConfigurationService, FieldService
from .view import ConsoleView

logger = logging.getLogger(__name__)


class ConfiguratorController:
    """
    Hauptcontroller für den Konfigurator.

    Aufgaben:
    - Login-Schleife und Sitzungsmenü
    - Aufrufe an die Services
    - Speichern von Änderungen
    """

    def __init__(
        self,
        view: ConsoleView,
        auth: AuthService,
        configuration: ConfigurationService,
        fields: FieldService,
        categories: CategoryService,
        repo: StateRepository,
        state: ApplicationState,
    ) -> None:
        """
        Erstellt den Controller.

        - state: wird nur zum Speichern an das Repository gereicht
        """
        self._view = view
        self._auth = auth
        self._configuration = configuration
        self._fields = fields
        self._categories = categories
        self._repo = repo
        self._state = state
        self._current: Optional[Configurator] = None

    @property
    def current_configurator(self) -> Optional[Configurator]:
        return self._current

    def run(self) -> None:
        """
        Startet die Anwendung.

        - Anmeldung (mit Wiederholung)
        - Basisfelder beim ersten Mal anlegen
        - Sitzungsmenü bis zur Abmeldung
        """
        while True:
            self._view.show_title("Verwaltung der Freizeitinitiativen")

            if not self.login():
                self._view.show_error("Anmeldung nicht erfolgreich.")
                if not self._view.read_confirm("Erneut versuchen?"):
                    break
                continue

            self.init_base_fields_if_needed()

            if not self._session_menu():
                break

        self._view.show_title("Auf Wiedersehen!")

    def _session_menu(self) -> bool:
        """
        Hauptmenü einer Sitzung.
        Rückgabe: True, wenn danach ein anderes Konto angemeldet werden soll.
        """
        assert self._current is not None
        while True:
            self._view.show_title(f"Hauptmenü - Konfigurator: {self._current.username}")
            self._view.render_menu(
                [
                    "Gemeinsame Felder verwalten",
                    "Kategorien verwalten",
                    "Alle Kategorien und Felder anzeigen",
                ],
                back_label="Abmelden",
            )
            choice = self._view.read_int("Auswahl", 0, 3)

            if choice == 1:
                self.manage_common_fields()
            elif choice == 2:
                self.manage_categories()
            elif choice == 3:
                self.view_all()
            else:
                self.logout()
                return self._view.read_confirm("Mit einem anderen Konto anmelden?")

    # Anmeldung

    def login(self) -> bool:
        """
        Ablauf der Anmeldung.
        - Erststart: Standard-Zugangsdaten, danach Registrierung
        - Sonst: normale Anmeldung; unvollständige Registrierung wird nachgeholt
        """
        self._view.show_section("Anmeldung Konfigurator")

        if self._auth.is_first_ever_launch():
            self._view.show_info("Erster Start - bitte mit den Standard-Zugangsdaten anmelden:")
            self._view.show_info(f"  Benutzer: {DEFAULT_USERNAME}   Passwort: {DEFAULT_PASSWORD}")

        username = self._view.read_string("Benutzername")
        password = self._view.read_string("Passwort")

        if self._auth.is_first_ever_launch():
            if not self._auth.is_default_credentials(username, password):
                self._view.show_error("Beim ersten Start sind nur die Standard-Zugangsdaten gültig.")
                return False
            self._view.show_success("Standard-Zugangsdaten akzeptiert.")
            pending = self._auth.create_pending_configurator()
            return self._run_registration(pending)

        try:
            configurator = self._auth.authenticate(username, password)
        except DomainError as e:
            self._view.show_error(str(e))
            return False

        if configurator.first_login:
            self._view.show_warning("Registrierung unvollständig. Bitte persönliche Zugangsdaten wählen.")
            return self._run_registration(configurator)

        self._current = configurator
        self._view.show_success(f"Willkommen, {configurator.username}!")
        return True

    def _run_registration(self, pending: Configurator) -> bool:
        """Fragt persönliche Zugangsdaten ab, bis sie gültig sind."""
        self._view.show_section("Persönliche Zugangsdaten wählen")
        while True:
            new_username = self._view.read_string("Neuer Benutzername")
            new_password = self._view.read_string("Neues Passwort")
            confirm = self._view.read_string("Passwort bestätigen")

            if new_password != confirm:
                self._view.show_error("Die Passwörter stimmen nicht überein.")
                continue

            try:
                self._auth.complete_registration(pending, new_username, new_password)
            except DuplicateUsernameError as e:
                self._view.show_error(str(e))
                continue

            self._save()
            self._current = pending
            self._view.show_success(f"Registrierung abgeschlossen. Willkommen, {pending.username}!")
            return True

    def logout(self) -> None:
        if self._current is not None:
            self._view.show_info(f"Sitzung beendet für: {self._current.username}")
            self._current = None

    # Basisfelder

    def init_base_fields_if_needed(self) -> None:
        """Legt die Basisfelder beim ersten Mal an. Danach passiert nichts."""
        if self._configuration.are_base_fields_initialised():
            return
        self._view.show_section("Einmalige Initialisierung der Basisfelder")
        try:
            self._configuration.init_base_fields()
        except DomainError as e:
            self._view.show_info(str(e))
            return
        self._save()
        self._view.show_success("Acht Basisfelder angelegt und dauerhaft gesperrt.")

    # Gemeinsame Felder

    def manage_common_fields(self) -> None:
        while True:
            self._view.show_title("Gemeinsame Felder")
            self._view.render_fields(self._fields.get_common_fields(), "(keine gemeinsamen Felder)")
            self._view.render_menu(
                [
                    "Gemeinsames Feld hinzufügen",
                    "Gemeinsames Feld entfernen",
                    "Pflicht-Eigenschaft ändern",
                ],
                back_label="Zurück",
            )
            choice = self._view.read_int("Auswahl", 0, 3)

            if choice == 1:
                self._add_common_field()
            elif choice == 2:
                self._remove_common_field()
            elif choice == 3:
                self._toggle_common_field()
            else:
                return

    def _add_common_field(self) -> None:
        name = self._view.read_string("Feldname")
        ftype = self._view.read_field_type()
        mandatory = self._view.read_mandatory()
        try:
            self._fields.add_common_field(name, ftype, mandatory)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()
        self._view.show_success(f"Gemeinsames Feld '{name}' hinzugefügt.")

    def _remove_common_field(self) -> None:
        if not self._fields.get_common_fields():
            self._view.show_info("Keine gemeinsamen Felder vorhanden.")
            return
        name = self._view.read_string("Name des zu entfernenden Feldes")
        if not self._view.read_confirm(f"'{name}' wirklich entfernen?"):
            self._view.show_info("Abgebrochen.")
            return
        try:
            self._fields.remove_common_field(name)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()
        self._view.show_success(f"Gemeinsames Feld '{name}' entfernt.")

    def _toggle_common_field(self) -> None:
        if not self._fields.get_common_fields():
            self._view.show_info("Keine gemeinsamen Felder vorhanden.")
            return
        name = self._view.read_string("Name des Feldes")
        mandatory = self._view.read_mandatory()
        try:
            self._fields.set_common_field_mandatory(name, mandatory)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()
        self._view.show_success(f"Feld '{name}' ist jetzt {'Pflicht' if mandatory else 'optional'}.")

    # Kategorien

    def manage_categories(self) -> None:
        while True:
            self._view.show_title("Kategorien")
            self._view.show_info(f"Vorhandene Kategorien: {len(self._categories.get_categories())}")
            self._view.render_menu(
                [
                    "Neue Kategorie anlegen",
                    "Spezifische Felder einer Kategorie bearbeiten",
                    "Kategorie entfernen",
                    "Kategorien und Felder anzeigen",
                ],
                back_label="Zurück",
            )
            choice = self._view.read_int("Auswahl", 0, 4)

            if choice == 1:
                self._create_category()
            elif choice == 2:
                self._edit_specific_fields()
            elif choice == 3:
                self._remove_category()
            elif choice == 4:
                self.view_all()
            else:
                return

    def _create_category(self) -> None:
        """
        Legt eine Kategorie an.
        Spezifische Felder können direkt danach hinzugefügt werden.
        """
        name = self._view.read_string("Name der Kategorie")
        try:
            category = self._categories.add_category(name)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()

        while self._view.read_confirm("Spezifisches Feld hinzufügen?"):
            self._add_specific_field(category)

        self._view.show_success(
            f"Kategorie '{category.name}' mit {len(category.specific_fields)} spezifischen Feldern angelegt."
        )

    def _edit_specific_fields(self) -> None:
        category = self._pick_category()
        if category is None:
            return

        while True:
            self._view.show_section(f"Kategorie: {category.name}")
            self._view.render_fields(category.specific_fields, "(keine spezifischen Felder)")
            self._view.render_menu(
                [
                    "Spezifisches Feld hinzufügen",
                    "Spezifisches Feld entfernen",
                    "Pflicht-Eigenschaft ändern",
                ],
                back_label="Zurück",
            )
            choice = self._view.read_int("Auswahl", 0, 3)

            if choice == 1:
                self._add_specific_field(category)
            elif choice == 2:
                self._remove_specific_field(category)
            elif choice == 3:
                self._toggle_specific_field(category)
            else:
                return

    def _add_specific_field(self, category: Category) -> None:
        name = self._view.read_string("Name des spezifischen Feldes")
        ftype = self._view.read_field_type()
        mandatory = self._view.read_mandatory()
        try:
            self._fields.add_specific_field(category, name, ftype, mandatory)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()
        self._view.show_success(f"Spezifisches Feld '{name}' hinzugefügt.")

    def _remove_specific_field(self, category: Category) -> None:
        if not category.specific_fields:
            self._view.show_info("Keine spezifischen Felder vorhanden.")
            return
        name = self._view.read_string("Name des zu entfernenden Feldes")
        if not self._view.read_confirm(f"'{name}' wirklich entfernen?"):
            self._view.show_info("Abgebrochen.")
            return
        try:
            self._fields.remove_specific_field(category, name)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()
        self._view.show_success(f"Spezifisches Feld '{name}' entfernt.")

    def _toggle_specific_field(self, category: Category) -> None:
        if not category.specific_fields:
            self._view.show_info("Keine spezifischen Felder vorhanden.")
            return
        name = self._view.read_string("Name des Feldes")
        mandatory = self._view.read_mandatory()
        try:
            self._fields.set_specific_field_mandatory(category, name, mandatory)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()
        self._view.show_success("Aktualisiert.")

    def _remove_category(self) -> None:
        category = self._pick_category()
        if category is None:
            return
        self._view.show_warning("Alle spezifischen Felder der Kategorie werden mit entfernt.")
        if not self._view.read_confirm(f"Kategorie '{category.name}' wirklich entfernen?"):
            self._view.show_info("Abgebrochen.")
            return
        try:
            self._categories.remove_category(category.name)
        except DomainError as e:
            self._view.show_error(str(e))
            return
        self._save()
        self._view.show_success(f"Kategorie '{category.name}' entfernt.")

    def view_all(self) -> None:
        """Übersicht: Basisfelder, gemeinsame Felder und jede Kategorie."""
        self._view.show_title("Übersicht Kategorien und Felder")

        self._view.show_section("Basisfelder (unveränderlich, für alle Kategorien)")
        self._view.render_fields(self._configuration.get_base_fields(), "(noch nicht initialisiert)")

        self._view.show_section("Gemeinsame Felder")
        self._view.render_fields(self._fields.get_common_fields(), "(keine)")

        categories = self._categories.get_categories()
        if not categories:
            self._view.show_info("Keine Kategorien definiert.")
            return

        for category in categories:
            self._view.show_section(f"Kategorie: {category.name.upper()}")
            self._view.render_fields(category.specific_fields, "(keine spezifischen Felder)")

    # Hilfsmethoden

    def _pick_category(self) -> Optional[Category]:
        """
        Auswahl einer Kategorie aus der Liste.
        - Kategorie oder None bei Abbruch.
        """
        categories = self._categories.get_categories()
        if not categories:
            self._view.show_info("Keine Kategorien vorhanden.")
            return None

        self._view.show_section("Kategorie wählen")
        self._view.render_menu([c.name for c in categories], back_label="Abbrechen")
        choice = self._view.read_int("Auswahl", 0, len(categories))
        return None if choice == 0 else categories[choice - 1]

    def _save(self) -> None:
        """
        Speichert den kompletten Zustand.
        Fehler werden gemeldet, die Sitzung läuft im Speicher weiter.
        """
        try:
            self._repo.save(self._state)
        except PersistenceError as e:
            logger.error("Speichern fehlgeschlagen: %s", e)
            self._view.show_error(f"FEHLER beim Speichern: {e}")
