"""UI Theme Constants for TicketTrack.

Colours, fonts and sizes for the CustomTkinter interface: dark sidebar,
light content area, coloured badges for ticket type and status.

Constants only.
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------

SIDEBAR_BG: Final[str] = "#1f2937"
SIDEBAR_HOVER: Final[str] = "#374151"
SIDEBAR_ACTIVE: Final[str] = "#2563eb"
SIDEBAR_TEXT: Final[str] = "#e5e7eb"

CONTENT_BG: Final[str] = "#f3f4f6"
CONTENT_CARD_BG: Final[str] = "#ffffff"
CARD_BORDER: Final[str] = "#e5e7eb"

ACCENT_PRIMARY: Final[str] = "#2563eb"
ACCENT_HOVER: Final[str] = "#1d4ed8"
TEXT_PRIMARY: Final[str] = "#111827"
TEXT_SECONDARY: Final[str] = "#6b7280"
TEXT_LIGHT: Final[str] = "#ffffff"

INPUT_BORDER: Final[str] = "#d1d5db"
ERROR_TEXT: Final[str] = "#dc2626"
SIGN_OUT_TEXT: Final[str] = "#f87171"
SIGN_OUT_HOVER: Final[str] = "#3f1d1d"

# Ticket type badges
BADGE_BUG: Final[str] = "#ef4444"
BADGE_FEATURE: Final[str] = "#10b981"
BADGE_CLIENT: Final[str] = "#6366f1"

# Ticket status colours, keyed by ``TicketStatus`` value
STATUS_COLOURS: Final[dict[str, str]] = {
    "open": "#3b82f6",
    "in-progress": "#f59e0b",
    "resolved": "#10b981",
    "closed": "#6b7280",
}
STATUS_INACTIVE_BG: Final[str] = "#e5e7eb"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

FONT_FAMILY: Final[str] = "Segoe UI"
FONT_BRAND: Final[tuple[str, int, str]] = (FONT_FAMILY, 22, "bold")
FONT_HEADING: Final[tuple[str, int, str]] = (FONT_FAMILY, 20, "bold")
FONT_TITLE: Final[tuple[str, int, str]] = (FONT_FAMILY, 15, "bold")
FONT_BODY: Final[tuple[str, int]] = (FONT_FAMILY, 13)
FONT_SIDEBAR: Final[tuple[str, int]] = (FONT_FAMILY, 14)
FONT_SIDEBAR_ACTIVE: Final[tuple[str, int, str]] = (FONT_FAMILY, 14, "bold")
FONT_LABEL: Final[tuple[str, int, str]] = (FONT_FAMILY, 11, "bold")
FONT_SMALL: Final[tuple[str, int]] = (FONT_FAMILY, 11)
FONT_BADGE: Final[tuple[str, int, str]] = (FONT_FAMILY, 10, "bold")
FONT_BUTTON: Final[tuple[str, int, str]] = (FONT_FAMILY, 13, "bold")

# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

SIDEBAR_WIDTH: Final[int] = 230
LOGIN_WINDOW_WIDTH: Final[int] = 460
LOGIN_WINDOW_HEIGHT: Final[int] = 640
MAIN_WINDOW_WIDTH: Final[int] = 1000
MAIN_WINDOW_HEIGHT: Final[int] = 700
INPUT_HEIGHT: Final[int] = 40
BUTTON_HEIGHT: Final[int] = 42
CORNER_RADIUS: Final[int] = 8
PADDING_SM: Final[int] = 8
PADDING_MD: Final[int] = 16
PADDING_LG: Final[int] = 24
