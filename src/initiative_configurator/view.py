"""
UI layer für die Console

Diese View ist die einzige Stelle mit input() und print().
- Titel, Abschnitte, Meldungen und Menüs ausgeben
- Feldtabellen formatieren
- Eingaben lesen und prüfen (Text, Zahl, Ja/Nein, Feldtyp)

Services und Domain bekommen nur fertige Werte (str, bool, FieldType).
"""

from __future__ import annotations

import shutil
from typing import Iterable, List, Sequence

from .domain import Field, FieldType


class ConsoleView:
    """
    View für die Konsole.

    Die Breite wird automatisch ermittelt anhand der Breite des aktuellen Fensters.
    """

    def __init__(self, width: int | None = None) -> None:
        """
        Erstellt die View.
        - Wenn width None ist, wird die Terminal-Breite genutzt.
        - Es gibt eine Mindest- und eine Höchstbreite.
        """
        term_cols = shutil.get_terminal_size(fallback=(100, 24)).columns

        if width is None:
            width = term_cols

        self._width = max(60, min(width, 100))

    # Ausgabe

    def show_title(self, text: str) -> None:
        """Titel im Doppelrahmen."""
        inner = self._width - 2
        print()
        print("╔" + "═" * inner + "╗")
        print("║" + f"  {text.upper()}"[:inner].ljust(inner) + "║")
        print("╚" + "═" * inner + "╝")

    def show_section(self, text: str) -> None:
        print("─" * self._width)
        print(f"  » {text}")
        print("─" * self._width)

    def show_message(self, text: str) -> None:
        """
        Gibt eine Nachricht aus.
        """
        print(text)

    def show_info(self, text: str) -> None:
        print(f"  [i] {text}")

    def show_success(self, text: str) -> None:
        print(f"  [✓] {text}")

    def show_warning(self, text: str) -> None:
        print(f"  [!] {text}")

    def show_error(self, text: str) -> None:
        print(f"  [X] {text}")

    def render_menu(self, options: Sequence[str], back_label: str = "Zurück / Beenden") -> None:
        """Nummeriertes Menü, 0 ist immer Zurück."""
        for i, option in enumerate(options, 1):
            print(f"    [{i}] {option}")
        print(f"    [0] {back_label}")

    def render_fields(self, fields: Iterable[Field], empty_text: str = "(keine)") -> None:
        """
        Zeigt Felder als Tabelle.
        Leere Liste -> nur der Hinweistext.
        """
        rows: List[str] = [f.describe() for f in fields]
        if not rows:
            self.show_info(empty_text)
            return

        header = f"{'Name':30} | {'Typ':15} | {'Pflicht':10} | Art"
        print("      " + header)
        print("      " + "-" * len(header))
        for row in rows:
            print("      " + row)

    # Eingabe

    def prompt(self, frage: str) -> str:
        """
        Fragt den Nutzer nach Eingabe.
        """
        return input(frage)

    def read_string(self, label: str) -> str:
        """Liest einen nicht leeren Text. Fragt so lange, bis etwas kommt."""
        while True:
            value = self.prompt(f"  > {label}: ").strip()
            if value:
                return value
            self.show_error("Der Wert darf nicht leer sein.")

    def read_int(self, label: str, minimum: int, maximum: int) -> int:
        """Liest eine ganze Zahl im Bereich minimum..maximum."""
        while True:
            raw = self.prompt(f"  > {label} ({minimum}-{maximum}): ").strip()
            try:
                value = int(raw)
            except ValueError:
                self.show_error("Bitte eine ganze Zahl eingeben.")
                continue
            if minimum <= value <= maximum:
                return value
            self.show_error(f"Bitte eine Zahl zwischen {minimum} und {maximum} eingeben.")

    def read_confirm(self, label: str) -> bool:
        """Ja/Nein-Frage. j/ja/y/yes -> True, n/nein/no -> False."""
        while True:
            antwort = self.prompt(f"  > {label} (j/n): ").strip().lower()
            if antwort in ("j", "ja", "y", "yes"):
                return True
            if antwort in ("n", "nein", "no"):
                return False
            self.show_error("Bitte mit 'j' oder 'n' antworten.")

    def read_field_type(self) -> FieldType:
        """Auswahl des Datentyps über die Menü-Nummer."""
        self.show_section("Datentyp des Feldes wählen")
        members = list(FieldType)
        for i, ftype in enumerate(members, 1):
            print(f"    [{i}] {ftype.display_name}")
        choice = self.read_int("Typ", 1, len(members))
        return FieldType.from_index(choice)

    def read_mandatory(self) -> bool:
        print("    [1] Pflichtfeld")
        print("    [2] Optional")
        return self.read_int("Pflicht", 1, 2) == 1
