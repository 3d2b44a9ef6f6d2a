"""User-facing interface texts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Messages:
    """All strings shown by the user and admin windows."""

    window_title: str
    search_games: str
    admin_mode: str

    not_installed: str
    install_and_play: str
    play_with_profile: str
    play_game: str
    installing: str
    game_running: str
    game_active: str
    running_button: str
    stop_game: str
    stopping: str
    update_profile: str
    updating: str

    download: str
    install: str
    launch: str
    configure: str
    stop: str
    update: str

    loading_games: str
    no_games_found: str
    profile_installed: str
    installation_failed: str
    launch_failed: str
    stop_failed: str
    update_failed: str

    r2modman_status: str
    steam_status: str
    manifest_status: str

    manifest_url: str
    target_dir: str
    save: str
    cancel: str

    info_title: str
    info_content: str
    close: str

    error: str
    steam_not_found: str
    r2modman_not_found: str
    network_error: str

    update_available: str
    update_button: str
    update_downloading: str
    update_installing: str
    update_error: str
    update_success: str
    update_restart: str
    checking_updates: str
    no_updates_available: str
    update_dialog_title: str
    update_dialog_message: str
    update_now: str
    update_later: str


_GERMAN_INFO = """VERWENDUNG:

1. SPIEL SUCHEN
   • Tippe Spielnamen in Suchfeld
   • Wähle aus der Liste

2. PROFIL INSTALLIEREN
   • Klicke "Installieren & Spielen"
   • Warte auf Download

3. SPIEL STARTEN
   • Klicke "Mit Profil spielen"
   • Steam startet automatisch

VORAUSSETZUNGEN:
• Steam installiert
• r2modman empfohlen
• Internetverbindung

PROBLEME:
• Admin-Modus für Konfiguration
• Profile in r2modman-Ordner
• Steam-Overlay für beste Erfahrung

HINWEIS:
Profile werden automatisch in die
richtige Verzeichnisstruktur installiert."""


def german() -> Messages:
    """Return the German text set."""
    return Messages(
        window_title="R2ModMan Profile Sharer",
        search_games="Spiele suchen...",
        admin_mode="Admin-Modus",
        not_installed="Nicht installiert",
        install_and_play="Installieren & Spielen",
        play_with_profile="Mit Profil spielen",
        play_game="Spiel starten",
        installing="Installiere...",
        game_running="Läuft gerade",
        game_active="Aktiv",
        running_button="Läuft...",
        stop_game="Spiel beenden",
        stopping="Beende...",
        update_profile="Profil aktualisieren",
        updating="Aktualisiere...",
        download="Herunterladen",
        install="Installieren",
        launch="Starten",
        configure="Konfigurieren",
        stop="Beenden",
        update="Aktualisieren",
        loading_games="Lade Spiele...",
        no_games_found="Keine Spiele gefunden",
        profile_installed="Profil erfolgreich installiert",
        installation_failed="Installation fehlgeschlagen",
        launch_failed="Start fehlgeschlagen",
        stop_failed="Beenden fehlgeschlagen",
        update_failed="Aktualisierung fehlgeschlagen",
        r2modman_status="r2modman",
        steam_status="Steam",
        manifest_status="Manifest",
        manifest_url="Manifest-URL:",
        target_dir="Zielordner:",
        save="Speichern",
        cancel="Abbrechen",
        info_title="Anleitung",
        info_content=_GERMAN_INFO,
        close="Schließen",
        error="Fehler",
        steam_not_found="Steam nicht gefunden",
        r2modman_not_found="r2modman nicht gefunden",
        network_error="Netzwerkfehler",
        update_available="Update verfügbar",
        update_button="Aktualisieren",
        update_downloading="Lade Update herunter...",
        update_installing="Installiere Update...",
        update_error="Update fehlgeschlagen",
        update_success="Update erfolgreich",
        update_restart="Anwendung wird neu gestartet...",
        checking_updates="Prüfe Updates...",
        no_updates_available="Keine Updates verfügbar",
        update_dialog_title="Update verfügbar",
        update_dialog_message="Eine neue Version ist verfügbar. Jetzt aktualisieren?",
        update_now="Jetzt aktualisieren",
        update_later="Später",
    )