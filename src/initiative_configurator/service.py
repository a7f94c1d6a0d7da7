"""
Application/Use-Case layer

Die Services kapseln die Geschäftsregeln über dem ApplicationState.
Alle Services bekommen dieselbe State-Instanz im Konstruktor und ändern sie direkt.

- AuthService: Erststart, Registrierung, Anmeldung
- ConfigurationService: einmalige Initialisierung der Basisfelder
- FieldService: gemeinsame und spezifische Felder
- CategoryService: Lebenszyklus der Kategorien

Regel für alle Operationen: entweder vollständig erfolgreich oder
genau ein DomainError und keine Änderung am State.
"""

from __future__ import annotations

import logging
from typing import Tuple

from .domain import (
    DEFAULT_PASSWORD,
    DEFAULT_USERNAME,
    ApplicationState,
    BaseField,
    Category,
    CommonField,
    Configurator,
    FieldType,
    SpecificField,
    names_match,
)
from .exceptions import (
    AuthenticationError,
    BaseFieldsAlreadyInitializedError,
    CategoryNotFoundError,
    DuplicateCategoryError,
    DuplicateFieldError,
    DuplicateUsernameError,
    FieldNotFoundError,
)

logger = logging.getLogger(__name__)


# Die acht festen Basisfelder (Name, Typ).
BASE_FIELD_DEFINITIONS: Tuple[Tuple[str, FieldType], ...] = (
    ("Title", FieldType.STRING),
    ("ParticipantCount", FieldType.INTEGER),
    ("RegistrationDeadline", FieldType.DATE),
    ("Location", FieldType.STRING),
    ("Date", FieldType.DATE),
    ("Time", FieldType.TIME),
    ("IndividualFee", FieldType.DECIMAL),
    ("FinalDate", FieldType.DATE),
)


class AuthService:
    """
    Regeln für Anmeldung und Registrierung.
    - Erststart mit Standard-Zugangsdaten
    - Registrierung eigener Zugangsdaten (einmalig)
    - Anmeldung bei späteren Starts
    - Eindeutige Benutzernamen
    """

    def __init__(self, state: ApplicationState) -> None:
        self._state = state

    def is_first_ever_launch(self) -> bool:
        """Wahr, solange noch kein Konfigurator existiert."""
        return not self._state.configurators

    def is_default_credentials(self, username: str, password: str) -> bool:
        return username == DEFAULT_USERNAME and password == DEFAULT_PASSWORD

    def is_username_taken(self, username: str) -> bool:
        return any(names_match(c.username, username) for c in self._state.configurators)

    def create_pending_configurator(self) -> Configurator:
        """
        Legt den ersten Konfigurator mit Standard-Zugangsdaten an.
        Nur beim allerersten Start erlaubt. Der Aufrufer prüft das vorher.
        """
        if not self.is_first_ever_launch():
            raise RuntimeError("Es existiert bereits ein Konfigurator.")

        pending = Configurator(DEFAULT_USERNAME, DEFAULT_PASSWORD)
        self._state.configurators.append(pending)
        logger.info("Vorläufiger Konfigurator angelegt")
        return pending

    def complete_registration(self, configurator: Configurator, new_username: str, new_password: str) -> None:
        """
        Setzt die persönlichen Zugangsdaten eines vorläufigen Konfigurators.
        - Nur wenn first_login noch True ist.
        - Der Name darf von keinem anderen Konfigurator belegt sein.
        """
        if not configurator.first_login:
            raise RuntimeError(f"Konfigurator '{configurator.username}' ist bereits registriert.")

        taken = any(
            c is not configurator and names_match(c.username, new_username)
            for c in self._state.configurators
        )
        if taken:
            logger.warning("Registrierung abgelehnt: Benutzername '%s' vergeben", new_username)
            raise DuplicateUsernameError(new_username)

        configurator.set_personal_credentials(new_username, new_password)
        logger.info("Registrierung abgeschlossen für '%s'", configurator.username)

    def authenticate(self, username: str, password: str) -> Configurator:
        """Liefert den ersten passenden Konfigurator, sonst AuthenticationError."""
        for c in self._state.configurators:
            if c.authenticate(username, password):
                logger.info("Anmeldung erfolgreich: '%s'", c.username)
                return c

        logger.warning("Anmeldung fehlgeschlagen für '%s'", username)
        raise AuthenticationError()


class ConfigurationService:
    """
    Einmalige Initialisierung der Basisfelder.
    Nach der Initialisierung sind sie für immer gesperrt.
    """

    def __init__(self, state: ApplicationState) -> None:
        self._state = state

    def are_base_fields_initialised(self) -> bool:
        return self._state.base_fields_locked

    def get_base_fields(self) -> Tuple[BaseField, ...]:
        return tuple(self._state.base_fields)

    def init_base_fields(self) -> None:
        """
        Legt die acht Basisfelder an und sperrt sie.
        Zweiter Aufruf -> BaseFieldsAlreadyInitializedError.
        """
        if self.are_base_fields_initialised():
            raise BaseFieldsAlreadyInitializedError()

        self._state.base_fields[:] = [BaseField(name, ftype) for name, ftype in BASE_FIELD_DEFINITIONS]
        self._state.base_fields_locked = True
        logger.info("%d Basisfelder initialisiert und gesperrt", len(self._state.base_fields))


class FieldService:
    """
    Regeln für gemeinsame und spezifische Felder.
    - Gemeinsame Felder: global, Namen eindeutig
    - Spezifische Felder: pro Kategorie, Namen eindeutig innerhalb der Kategorie
    - Existenzprüfung vor Entfernen und Ändern
    """

    def __init__(self, state: ApplicationState) -> None:
        self._state = state

    # Gemeinsame Felder

    def get_common_fields(self) -> Tuple[CommonField, ...]:
        return tuple(self._state.common_fields)

    def common_field_exists(self, name: str) -> bool:
        return any(names_match(f.name, name) for f in self._state.common_fields)

    def get_common_field(self, name: str) -> CommonField:
        for f in self._state.common_fields:
            if names_match(f.name, name):
                return f
        raise FieldNotFoundError(name)

    def add_common_field(self, name: str, type: FieldType, mandatory: bool) -> CommonField:
        if self.common_field_exists(name):
            logger.warning("Gemeinsames Feld '%s' existiert bereits", name)
            raise DuplicateFieldError(name, "gemeinsame Felder")

        common = CommonField(name, type, mandatory)
        self._state.common_fields.append(common)
        logger.info("Gemeinsames Feld '%s' (%s) angelegt", common.name, type.name)
        return common

    def remove_common_field(self, name: str) -> None:
        common = self.get_common_field(name)
        self._state.common_fields.remove(common)
        logger.info("Gemeinsames Feld '%s' entfernt", common.name)

    def set_common_field_mandatory(self, name: str, mandatory: bool) -> None:
        common = self.get_common_field(name)
        common.set_mandatory(mandatory)
        logger.info("Gemeinsames Feld '%s': mandatory=%s", common.name, mandatory)

    # Spezifische Felder (immer bezogen auf eine Kategorie)

    def add_specific_field(self, category: Category, name: str, type: FieldType, mandatory: bool) -> SpecificField:
        if category.has_specific_field(name):
            logger.warning("Spezifisches Feld '%s' existiert bereits in '%s'", name, category.name)
            raise DuplicateFieldError(name, f"spezifische Felder von '{category.name}'")

        specific = SpecificField(name, type, mandatory)
        category.add_specific_field(specific)
        logger.info("Spezifisches Feld '%s' zu '%s' hinzugefügt", specific.name, category.name)
        return specific

    def remove_specific_field(self, category: Category, name: str) -> None:
        if not category.remove_specific_field(name):
            raise FieldNotFoundError(name)
        logger.info("Spezifisches Feld '%s' aus '%s' entfernt", name, category.name)

    def set_specific_field_mandatory(self, category: Category, name: str, mandatory: bool) -> None:
        specific = category.get_specific_field(name)
        if specific is None:
            raise FieldNotFoundError(name)
        specific.set_mandatory(mandatory)
        logger.info("Spezifisches Feld '%s' in '%s': mandatory=%s", specific.name, category.name, mandatory)


class CategoryService:
    """
    Lebenszyklus der Kategorien.
    - Namen systemweit eindeutig
    - Existenzprüfung vor Bearbeiten und Entfernen
    Spezifische Felder verwaltet der FieldService.
    """

    def __init__(self, state: ApplicationState) -> None:
        self._state = state

    def get_categories(self) -> Tuple[Category, ...]:
        return tuple(self._state.categories)

    def category_exists(self, name: str) -> bool:
        return any(names_match(c.name, name) for c in self._state.categories)

    def get_category(self, name: str) -> Category:
        for c in self._state.categories:
            if names_match(c.name, name):
                return c
        raise CategoryNotFoundError(name)

    def add_category(self, name: str) -> Category:
        """
        Legt eine leere Kategorie an und gibt sie zurück.
        Felder werden danach separat hinzugefügt.
        """
        if self.category_exists(name):
            logger.warning("Kategorie '%s' existiert bereits", name)
            raise DuplicateCategoryError(name)

        category = Category(name)
        self._state.categories.append(category)
        logger.info("Kategorie '%s' angelegt", category.name)
        return category

    def remove_category(self, name: str) -> None:
        """Entfernt die Kategorie samt aller spezifischen Felder."""
        category = self.get_category(name)
        self._state.categories.remove(category)
        logger.info(
            "Kategorie '%s' mit %d spezifischen Feldern entfernt",
            category.name,
            len(category.specific_fields),
        )

