from __future__ import annotations

import importlib.util
import logging
import os
import sys
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class SavePrompt(Protocol):
    def ask_save_path(self, suggested_name: str) -> Path | None:
        """Return the chosen path, or None when the user cancels."""
        ...


def _has_display() -> bool:
    if sys.platform.startswith(("win", "darwin")):
        return True
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


class TkSaveDialog:
    """Native "save as" dialog for when the app runs on the user's own desktop."""

    def __init__(self, title: str = "Save merged PDF") -> None:
        self.title = title

    @staticmethod
    def is_supported() -> bool:
        return importlib.util.find_spec("tkinter") is not None and _has_display()

    def ask_save_path(self, suggested_name: str) -> Path | None:
        import tkinter as tk
        from tkinter import filedialog

        try:
            root = tk.Tk()
        except tk.TclError:
            logger.warning("Unable to open save dialog", exc_info=True)
            return None

        root.withdraw()
        root.attributes("-topmost", True)
        try:
            selected = filedialog.asksaveasfilename(
                parent=root,
                title=self.title,
                defaultextension=".pdf",
                initialfile=suggested_name,
                filetypes=[("PDF Document", "*.pdf")],
            )
        except (tk.TclError, RuntimeError):
            logger.warning("Save dialog failed", exc_info=True)
            return None
        finally:
            root.destroy()

        if not selected:
            logger.info("Save dialog cancelled")
            return None
        return Path(selected)


def resolve_save_prompt(enabled: bool) -> SavePrompt | None:
    if not enabled:
        return None
    if not TkSaveDialog.is_supported():
        logger.info("Native save dialog requested but no display or tkinter is available")
        return None
    return TkSaveDialog()
