"""
Persistence layer (JSON)

Der gesamte ApplicationState wird als ein JSON-Dokument gespeichert und
immer komplett geladen bzw. überschrieben. Die Domain selbst bleibt frei von JSON-Details.
- StateRepository: Schnittstelle (load / save)
- FileStorage: Dateizugriff, atomares Schreiben
- JsonStateSerializer: Mapping zwischen State und JSON
- JsonStateRepository: Datei-Repository

Das Dokument trägt ein Format-Kennzeichen und eine Versionsnummer.
Fehlende Datei = kein gespeicherter Zustand. Beschädigte Datei = PersistenceError.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Protocol, Union

from .domain import (
    ApplicationState,
    BaseField,
    Category,
    CommonField,
    Configurator,
    FieldType,
    SpecificField,
)
from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

FORMAT_TAG = "initiative-configurator/state"
FORMAT_VERSION = 1

PathLike = Union[str, Path]


class StateRepository(Protocol):
    """
    Schnittstelle für Persistenz.
    """
    def load(self) -> Optional[ApplicationState]:
        """Lädt den Zustand. None, wenn noch nichts gespeichert wurde."""
        ...

    def save(self, state: ApplicationState) -> None:
        """Speichert den kompletten Zustand."""
        ...


class FileStorage:
    """
    Klasse für Dateihandling beim Laden und Speichern.
    - UTF-8 wird fest genutzt.
    - Geschrieben wird zuerst in eine temporäre Datei, dann ersetzt.
      So bleibt bei einem Abbruch die alte Datei erhalten.
    """

    def __init__(self, temp_suffix: str = ".tmp") -> None:
        self._temp_suffix = temp_suffix

    def read_text(self, path: PathLike) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def write_text(self, path: PathLike, content: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(target.name + self._temp_suffix)
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp, target)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise


class JsonStateSerializer:
    """
    Wandelt ApplicationState <-> JSON.
    - Enums: per name gespeichert.
    - Parsing ist tolerant (name/value, Groß/Klein).
    - Alles Ungültige beim Laden endet in PersistenceError.
    """

    def __init__(self, indent: int = 2) -> None:
        self._indent = indent

    def to_json(self, state: ApplicationState) -> str:
        """
        Macht aus dem State einen JSON-String.
        """
        payload = self._state_to_dict(state)
        return json.dumps(payload, ensure_ascii=False, indent=self._indent)

    def from_json(self, raw: str) -> ApplicationState:
        """
        Baut den State aus JSON.
        """
        try:
            payload = json.loads(raw)
            return self._state_from_dict(payload)
        except PersistenceError:
            raise
        except (ValueError, KeyError, TypeError, AttributeError, RecursionError) as e:
            raise PersistenceError(f"Zustandsdatei ist beschädigt: {e}") from e

    def _parse_enum(self, enum_cls, raw, default=None):
        """
        Parst einen Enum-Wert.

        Wenn nichts passt:
        - default wird zurückgegeben.
        """
        if raw is None:
            return default

        s = str(raw).strip()
        if not s:
            return default

        # Member-Name direkt.
        if s in enum_cls.__members__:
            return enum_cls[s]

        # Vergleich über value.
        for m in enum_cls:
            if str(m.value) == s:
                return m

        # Fallback: case-insensitive.
        low = s.lower()
        for name, m in enum_cls.__members__.items():
            if name.lower() == low:
                return m
        for m in enum_cls:
            if str(m.value).lower() == low:
                return m

        return default

    def _parse_field_type(self, raw: Any) -> FieldType:
        ftype = self._parse_enum(FieldType, raw)
        if ftype is None:
            raise ValueError(f"unbekannter Feldtyp {raw!r}")
        return ftype

    def _parse_bool(self, raw: Any, what: str) -> bool:
        if not isinstance(raw, bool):
            raise ValueError(f"{what} muss true/false sein, ist aber {raw!r}")
        return raw

    def _state_to_dict(self, state: ApplicationState) -> Dict[str, Any]:
        """State Mapping für JSON."""
        return {
            "format": FORMAT_TAG,
            "version": FORMAT_VERSION,
            "base_fields_locked": state.base_fields_locked,
            "configurators": [
                {"username": c.username, "password": c.password, "first_login": c.first_login}
                for c in state.configurators
            ],
            "base_fields": [{"name": f.name, "type": f.type.name} for f in state.base_fields],
            "common_fields": [self._field_to_dict(f) for f in state.common_fields],
            "categories": [
                {
                    "name": c.name,
                    "specific_fields": [self._field_to_dict(f) for f in c.specific_fields],
                }
                for c in state.categories
            ],
        }

    def _field_to_dict(self, f: Union[CommonField, SpecificField]) -> Dict[str, Any]:
        return {"name": f.name, "type": f.type.name, "mandatory": f.mandatory}

    def _state_from_dict(self, d: Dict[str, Any]) -> ApplicationState:
        """
        Mapping für den State.
        Format und Version werden zuerst geprüft.
        """
        if not isinstance(d, dict):
            raise PersistenceError("Zustandsdatei enthält kein JSON-Objekt.")
        if d.get("format") != FORMAT_TAG:
            raise PersistenceError(f"Unbekanntes Dateiformat: {d.get('format')!r}.")

        version = d.get("version")
        if not isinstance(version, int) or version < 1:
            raise PersistenceError(f"Ungültige Formatversion: {version!r}.")
        if version > FORMAT_VERSION:
            raise PersistenceError(
                f"Formatversion {version} ist neuer als die unterstützte Version {FORMAT_VERSION}."
            )

        state = ApplicationState(
            configurators=[self._configurator_from_dict(x) for x in d.get("configurators", [])],
            base_fields=[
                BaseField(x["name"], self._parse_field_type(x["type"])) for x in d.get("base_fields", [])
            ],
            common_fields=[
                CommonField(x["name"], self._parse_field_type(x["type"]), self._parse_bool(x["mandatory"], "mandatory"))
                for x in d.get("common_fields", [])
            ],
            categories=[self._category_from_dict(x) for x in d.get("categories", [])],
            base_fields_locked=self._parse_bool(d.get("base_fields_locked", False), "base_fields_locked"),
        )

        # Sperre und Basisfelder gehören zusammen.
        if state.base_fields_locked != bool(state.base_fields):
            raise PersistenceError(
                f"Basisfelder passen nicht zur Sperre: locked={state.base_fields_locked}, "
                f"{len(state.base_fields)} Basisfelder."
            )

        # Eindeutigkeit wie in den Services prüfen.
        self._check_unique((f.name for f in state.base_fields), "Basisfeld")
        self._check_unique((c.username for c in state.configurators), "Benutzername")
        self._check_unique((f.name for f in state.common_fields), "gemeinsames Feld")
        self._check_unique((c.name for c in state.categories), "Kategorie")

        return state

    def _configurator_from_dict(self, d: Dict[str, Any]) -> Configurator:
        """Mapping für Configurator."""
        return Configurator(
            username=d["username"],
            password=d["password"],
            first_login=self._parse_bool(d.get("first_login", True), "first_login"),
        )

    def _category_from_dict(self, d: Dict[str, Any]) -> Category:
        """Mapping für Category samt spezifischer Felder."""
        return Category(
            name=d["name"],
            specific_fields=[
                SpecificField(x["name"], self._parse_field_type(x["type"]), self._parse_bool(x["mandatory"], "mandatory"))
                for x in d.get("specific_fields", [])
            ],
        )

    def _check_unique(self, names: Iterable[str], what: str) -> None:
        seen = set()
        for name in names:
            key = name.lower()
            if key in seen:
                raise PersistenceError(f"Doppelter Eintrag ({what}): '{name}'.")
            seen.add(key)


class JsonStateRepository:
    """
    Repository für eine JSON-Datei.
    - FileStorage für Datei-Zugriff
    - JsonStateSerializer für Mapping
    """

    def __init__(
        self,
        path: PathLike,
        storage: Optional[FileStorage] = None,
        serializer: Optional[JsonStateSerializer] = None
    ) -> None:
        self._path = Path(path)
        self._storage = storage or FileStorage()
        self._serializer = serializer or JsonStateSerializer()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[ApplicationState]:
        """
        Lädt die Datei und baut die Domain-Objekte.
        - Datei fehlt -> None
        - Datei unlesbar oder beschädigt -> PersistenceError
        """
        if not self._path.exists():
            logger.info("Keine Zustandsdatei unter %s", self._path)
            return None

        try:
            raw = self._storage.read_text(self._path)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Zustandsdatei nicht lesbar: {e}") from e

        state = self._serializer.from_json(raw)
        logger.info(
            "Zustand geladen: %d Konfiguratoren, %d Kategorien",
            len(state.configurators),
            len(state.categories),
        )
        return state

    def save(self, state: ApplicationState) -> None:
        """
        Serialisiert und überschreibt die Datei.
        """
        raw = self._serializer.to_json(state)
        try:
            self._storage.write_text(self._path, raw)
        except OSError as e:
            raise PersistenceError(f"Speichern fehlgeschlagen: {e}") from e
        logger.debug("Zustand gespeichert nach %s", self._path)

    def has_saved_state(self) -> bool:
        return self._path.exists()

    def delete_saved_state(self) -> bool:
        """Löscht die Zustandsdatei. False, wenn keine existiert."""
        if not self._path.exists():
            return False
        self._path.unlink()
        logger.info("Zustandsdatei %s gelöscht", self._path)
        return True
