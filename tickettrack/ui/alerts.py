"""Modal alerts.

Every failure reaches the user as one modal dialog carrying the
already-normalised message.
"""

from __future__ import annotations

from tkinter import messagebox
from typing import Optional

import customtkinter as ctk


def show_error(message: str, title: str = "Error", parent: Optional[ctk.CTkBaseClass] = None) -> None:
    messagebox.showerror(title=title, message=message, parent=parent)


def show_info(message: str, title: str = "Success", parent: Optional[ctk.CTkBaseClass] = None) -> None:
    messagebox.showinfo(title=title, message=message, parent=parent)
