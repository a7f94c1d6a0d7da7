"""
Domain beinhaltet die Entities + Enums

Dieses Modul enthält nur die Fachlogik.
Es enthält keine UI- oder JSON-Logik.

- Entities sind Dataclasses.
- Namen werden beim Erzeugen getrimmt und dürfen nicht leer sein.
- Namensvergleiche sind immer case-insensitive.
- Basisfelder sind immer Pflichtfelder und danach unveränderlich.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional

from .exceptions import BaseFieldImmutableError


# Zugangsdaten für den allerersten Start.
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "adminYA"


def names_match(a: str, b: str) -> bool:
    """Vergleicht zwei Namen ohne Rücksicht auf Groß/Klein und Leerzeichen am Rand."""
    return a.strip().lower() == b.strip().lower()


def _require_text(value: object, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} darf nicht leer sein.")
    return value


class FieldType(Enum):
    """
    Erlaubte Datentypen eines Feldes.
    Der Wert ist die Bezeichnung für die Anzeige.
    """
    STRING = "Text"
    INTEGER = "Ganzzahl"
    DECIMAL = "Dezimalzahl"
    DATE = "Datum"
    TIME = "Uhrzeit"
    BOOLEAN = "Ja/Nein"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_index(cls, index: int) -> Optional[FieldType]:
        """
        Liefert den Typ zur Menü-Nummer (1-basiert).
        Ungültige Nummer -> None.
        """
        members = list(cls)
        if not (1 <= index <= len(members)):
            return None
        return members[index - 1]


@dataclass(slots=True)
class Field:
    """
    Gemeinsame Basis aller Felder (Basis, Gemeinsam, Spezifisch).
    - name: getrimmt, nicht leer
    - type: FieldType, nie None
    - mandatory: Pflichtfeld ja/nein
    Die Variante bestimmt kind_label und ob mandatory änderbar ist.
    """
    name: str
    type: FieldType
    mandatory: bool = False

    kind_label: ClassVar[str] = "Feld"

    def __post_init__(self) -> None:
        """Prüft Grundregeln nach dem Erzeugen."""
        self.name = _require_text(self.name, "Feldname").strip()
        if not isinstance(self.type, FieldType):
            raise ValueError(f"Ungültiger Feldtyp: {self.type!r}.")

    def set_mandatory(self, mandatory: bool) -> None:
        self.mandatory = mandatory

    def describe(self) -> str:
        """Eine Tabellenzeile: Name | Typ | Pflicht | Art."""
        pflicht = "Pflicht" if self.mandatory else "Optional"
        return f"{self.name:30} | {self.type.display_name:15} | {pflicht:10} | {self.kind_label}"


@dataclass(slots=True, init=False)
class BaseField(Field):
    """
    Basisfeld.
    - Wird nur einmal über den ConfigurationService angelegt.
    - Ist immer Pflichtfeld.
    - Nach dem Erzeugen sind name, type und mandatory fest.
      Jeder Änderungsversuch löst BaseFieldImmutableError aus.
    """
    kind_label: ClassVar[str] = "Basis"
    _sealed: bool = field(default=False, init=False, repr=False, compare=False)

    def __init__(self, name: str, type: FieldType) -> None:
        Field.__init__(self, name, type, True)
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, key: str, value: object) -> None:
        if key in ("name", "type", "mandatory") and getattr(self, "_sealed", False):
            raise BaseFieldImmutableError(self.name)
        object.__setattr__(self, key, value)

    def set_mandatory(self, mandatory: bool) -> None:
        raise BaseFieldImmutableError(self.name)


@dataclass(slots=True)
class CommonField(Field):
    """Gemeinsames Feld. Gilt für alle Kategorien, frei änderbar."""
    kind_label: ClassVar[str] = "Gemeinsam"


@dataclass(slots=True)
class SpecificField(Field):
    """Spezifisches Feld. Gehört genau zu einer Kategorie."""
    kind_label: ClassVar[str] = "Spezifisch"


@dataclass(slots=True)
class Category:
    """
    Eine Kategorie von Initiativen (z.B. "Sport", "Kunst", "Ausflüge").
    - Der Name ist systemweit eindeutig (prüft der CategoryService).
    - Spezifische Felder sind innerhalb der Kategorie eindeutig.
    - Die Felder leben nur mit ihrer Kategorie.
    """
    name: str
    specific_fields: List[SpecificField] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Prüft Grundregeln der Kategorie."""
        self.name = _require_text(self.name, "Kategoriename").strip()

        # Doppelte Feldnamen erkennen, z.B. aus einer manipulierten Datei.
        seen = set()
        for f in self.specific_fields:
            key = f.name.lower()
            if key in seen:
                raise ValueError(f"Kategorie '{self.name}' enthält das Feld '{f.name}' mehrfach.")
            seen.add(key)

    def has_specific_field(self, name: str) -> bool:
        return self.get_specific_field(name) is not None

    def get_specific_field(self, name: str) -> Optional[SpecificField]:
        """Sucht ein spezifisches Feld. Nicht gefunden -> None."""
        for f in self.specific_fields:
            if names_match(f.name, name):
                return f
        return None

    def add_specific_field(self, specific: SpecificField) -> bool:
        """
        Fügt ein Feld hinzu.
        - True: hinzugefügt
        - False: Name schon vorhanden, nichts geändert
        """
        if self.has_specific_field(specific.name):
            return False
        self.specific_fields.append(specific)
        return True

    def remove_specific_field(self, name: str) -> bool:
        """Entfernt ein Feld. False, wenn es nicht existiert."""
        f = self.get_specific_field(name)
        if f is None:
            return False
        self.specific_fields.remove(f)
        return True


@dataclass(slots=True)
class Configurator:
    """
    Ein Konfigurator (Back-End-Benutzer).
    - Startet mit den Standard-Zugangsdaten und first_login=True.
    - Nach der Registrierung: eigene Zugangsdaten, first_login=False.
    - Es gibt keinen Weg zurück.
    Das Passwort wird im Klartext gespeichert.
    """
    username: str
    password: str = field(repr=False)
    first_login: bool = True

    def __post_init__(self) -> None:
        self.username = _require_text(self.username, "Benutzername").strip()
        _require_text(self.password, "Passwort")

    def authenticate(self, username: str, password: str) -> bool:
        """Benutzername case-insensitive, Passwort exakt."""
        return names_match(self.username, username) and self.password == password

    def set_personal_credentials(self, username: str, password: str) -> None:
        """
        Setzt die persönlichen Zugangsdaten.
        Danach ist first_login dauerhaft False.
        """
        username = _require_text(username, "Benutzername").strip()
        password = _require_text(password, "Passwort")
        self.username = username
        self.password = password
        self.first_login = False


@dataclass(slots=True)
class ApplicationState:
    """
    Der komplette Zustand der Anwendung.
    Es gibt genau eine Instanz pro Prozess. Sie wird in main erzeugt
    (neu oder geladen) und an alle Services übergeben.
    """
    configurators: List[Configurator] = field(default_factory=list)
    base_fields: List[BaseField] = field(default_factory=list)
    common_fields: List[CommonField] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    base_fields_locked: bool = False
