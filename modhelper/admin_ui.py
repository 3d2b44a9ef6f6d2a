"""Settings window for administrators."""

from __future__ import annotations

import logging

from . import config as config_store
from .messages import german
from .models import APP_NAME, WINDOW_HEIGHT, WINDOW_WIDTH, Config

log = logging.getLogger(__name__)

_INFO_TEXT = (
    "Konfiguration\n\n"
    "• Manifest-URL: URL zum JSON-Manifest mit Spiellisten\n"
    "• Zielordner: Pfad für r2modman Profile Installation\n\n"
    "Änderungen werden sofort nach dem Speichern aktiv."
)
_SAVED_TITLE = "✅ Konfiguration gespeichert"
_SAVED_TEXT = "Die Einstellungen wurden erfolgreich gespeichert."


def initial_config() -> Config:
    """Return the stored settings, or defaults when they cannot be read."""
    try:
        return config_store.load()
    except (OSError, ValueError) as exc:
        log.error("Failed to load config: %s", exc)
        return Config(
            manifest_url=config_store.DEFAULT_MANIFEST_URL,
            target_dir=config_store.get_default_profile_dir(),
        )


def save_settings(manifest_url: str, target_dir: str) -> Config:
    """Store the given settings and return them."""
    settings = Config(manifest_url=manifest_url, target_dir=target_dir)
    config_store.save(settings)
    log.info("Configuration saved successfully")
    return settings


def run_admin() -> None:
    """Show the settings window until it is closed."""
    import tkinter as tk
    from tkinter import messagebox, ttk

    messages = german()
    settings = initial_config()

    root = tk.Tk()
    root.title(f"{APP_NAME} - {messages.admin_mode}")
    root.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")

    frame = ttk.Frame(root, padding=12)
    frame.pack(fill="both", expand=True)
    frame.columnconfigure(1, weight=1)

    ttk.Label(frame, text=_INFO_TEXT, wraplength=WINDOW_WIDTH - 40, justify="left").grid(
        row=0, column=0, columnspan=2, sticky="w", pady=(0, 10)
    )
    ttk.Separator(frame).grid(row=1, column=0, columnspan=2, sticky="ew", pady=6)

    manifest_var = tk.StringVar(value=settings.manifest_url)
    target_var = tk.StringVar(value=settings.target_dir)

    ttk.Label(frame, text=messages.manifest_url).grid(row=2, column=0, sticky="w", padx=(0, 8))
    ttk.Entry(frame, textvariable=manifest_var).grid(row=2, column=1, sticky="ew", pady=4)
    ttk.Label(frame, text=messages.target_dir).grid(row=3, column=0, sticky="w", padx=(0, 8))
    ttk.Entry(frame, textvariable=target_var).grid(row=3, column=1, sticky="ew", pady=4)

    ttk.Separator(frame).grid(row=4, column=0, columnspan=2, sticky="ew", pady=6)

    def on_save() -> None:
        try:
            save_settings(manifest_var.get(), target_var.get())
        except OSError as exc:
            log.error("Failed to save config: %s", exc)
            messagebox.showerror(messages.error, str(exc), parent=root)
            return
        messagebox.showinfo(_SAVED_TITLE, _SAVED_TEXT, parent=root)

    buttons = ttk.Frame(frame)
    buttons.grid(row=5, column=0, columnspan=2)
    ttk.Button(buttons, text=messages.save, command=on_save).pack(side="left", padx=4)
    ttk.Button(buttons, text=messages.cancel, command=root.destroy).pack(side="left", padx=4)

    root.mainloop()