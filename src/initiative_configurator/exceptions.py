"""
Fehlerklassen

Alle fachlichen Fehler erben von DomainError.
- Jeder Fehler trägt eine lesbare Meldung (str(exc)).
- Der betroffene Name bleibt als Attribut erhalten.
- Der Controller fängt sie ab und zeigt die Meldung an.

PersistenceError gehört nicht zur Fachlogik. Er meldet Lade-/Speicherprobleme.
"""

from __future__ import annotations


class DomainError(Exception):
    """Basisklasse für alle fachlichen Fehler."""


class DuplicateFieldError(DomainError):
    """Ein Feld mit gleichem Namen existiert bereits im angegebenen Bereich."""

    def __init__(self, name: str, scope: str) -> None:
        super().__init__(f"Feld '{name}' existiert bereits in: {scope}.")
        self.name = name
        self.scope = scope


class DuplicateCategoryError(DomainError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Kategorie existiert bereits: '{name}'.")
        self.name = name


class DuplicateUsernameError(DomainError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Benutzername bereits vergeben: '{username}'.")
        self.username = username


class FieldNotFoundError(DomainError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Feld nicht gefunden: '{name}'.")
        self.name = name


class CategoryNotFoundError(DomainError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Kategorie nicht gefunden: '{name}'.")
        self.name = name


class AuthenticationError(DomainError):
    def __init__(self) -> None:
        super().__init__("Benutzername oder Passwort ungültig.")


class BaseFieldsAlreadyInitializedError(DomainError):
    def __init__(self) -> None:
        super().__init__("Die Basisfelder sind bereits initialisiert und unveränderlich.")


class BaseFieldImmutableError(DomainError):
    """Basisfelder sind nach dem Anlegen fest (Name, Typ, Pflicht). Jede Änderung wird abgelehnt."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Basisfeld '{name}' ist unveränderlich und immer ein Pflichtfeld.")
        self.name = name


class PersistenceError(Exception):
    """
    Fehler beim Laden oder Speichern des Zustands.
    - Beim Laden: Datei unlesbar oder beschädigt.
    - Beim Speichern: Schreiben fehlgeschlagen.
    """
