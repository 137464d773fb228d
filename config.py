"""
GlassCalc Configuration Settings
"""
import logging
import os

# Application Settings
APP_NAME = "GlassCalc"
VERSION = "1.0.0"

# Display Settings
WINDOW_WIDTH = 360
WINDOW_HEIGHT = 560
DISPLAY_FONT = ("Consolas", 26, "bold")
BUTTON_FONT = ("Segoe UI", 14)
LABEL_FONT = ("Segoe UI", 10)

# ── Theme Palettes ─────────────────────────────────────────────────────────────

# DEFAULT palette  – translucent purple glass
THEME_DEFAULT = {
    "bg":           "#2D2A4A",
    "display_bg":   "#1F1D36",
    "display_fg":   "#FFFFFF",
    "btn_bg":       "#3F3B6C",
    "btn_fg":       "#FFFFFF",
    "operator_fg":  "#FDCB6E",
    "function_bg":  "#524C8A",
    "memory_bg":    "#35315C",
    "equals_bg":    "#6C5CE7",
    "equals_fg":    "#FFFFFF",
    "clear_bg":     "#D63031",
    "success":      "#00B894",
    "danger":       "#FF6B6B",
    "indicator_bg": "#00B894",
}

# DARK palette  – deep slate
THEME_DARK = {
    "bg":           "#121212",
    "display_bg":   "#000000",
    "display_fg":   "#FFFFFF",
    "btn_bg":       "#1E1E1E",
    "btn_fg":       "#E0E0E0",
    "operator_fg":  "#FF9F43",
    "function_bg":  "#2A2A2A",
    "memory_bg":    "#181818",
    "equals_bg":    "#FF9F43",
    "equals_fg":    "#121212",
    "clear_bg":     "#B03A2E",
    "success":      "#00B894",
    "danger":       "#FF6B6B",
    "indicator_bg": "#00B894",
}

# NEON palette  – black with cyan/magenta accents
THEME_NEON = {
    "bg":           "#0A0A12",
    "display_bg":   "#05050A",
    "display_fg":   "#00FFF7",
    "btn_bg":       "#14142B",
    "btn_fg":       "#00FFF7",
    "operator_fg":  "#FF00E6",
    "function_bg":  "#1C1C3A",
    "memory_bg":    "#10101F",
    "equals_bg":    "#FF00E6",
    "equals_fg":    "#0A0A12",
    "clear_bg":     "#FF2E63",
    "success":      "#39FF14",
    "danger":       "#FF2E63",
    "indicator_bg": "#39FF14",
}

THEMES = {
    "default": THEME_DEFAULT,
    "dark": THEME_DARK,
    "neon": THEME_NEON,
}


def get_theme(name: str) -> dict:
    """Return the colour palette for a theme name, falling back to default."""
    return THEMES.get(name, THEME_DEFAULT)


# Calculator Settings
ERROR_TEXT = "Error"
FACTORIAL_LIMIT = 170            # 171! overflows a double

# Display mode flash durations (milliseconds)
SUCCESS_FLASH_MS = 1000
ERROR_FLASH_MS = 2000

# Logging
LOG_LEVEL = logging.INFO
LOG_FILE = os.environ.get("GLASSCALC_LOG_FILE")

# Web API settings
WEB_HOST = '0.0.0.0'
WEB_PORT = 8888
