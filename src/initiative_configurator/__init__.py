"""
initiative_configurator package

Dieses Paket implementiert den Konsolen-Konfigurator für Freizeitinitiativen:
Kategorien, Basisfelder, gemeinsame und spezifische Felder sowie die
Anmeldung des Konfigurators.

Schichtenarchitektur:
- domain.py: Entitäten + Enums
- exceptions.py: fachliche Fehler
- service.py: Geschäftsregeln (Auth, Basisfelder, Felder, Kategorien)
- persistence.py: JSON-Persistierung des gesamten Zustands
- config.py: Pfade und Logging
- view.py: Konsolen-Ein-/Ausgabe
- controller.py: Menü-Orchestrierung
- main.py: Einstiegspunkt
"""
