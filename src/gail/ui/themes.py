"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)
- How the user's accent colour (GAIL_HIGHLIGHT_COLOR) is applied

Styling is derived from the theme on every layout pass; nothing mutates
shared style objects.
"""

from textual.theme import Theme

GAIL_THEME_NAME = "gail"

_BASE_VARIABLES = {
    "block-cursor-foreground": "#11111b",
    "block-cursor-background": "#f5e0dc",
    "block-cursor-text-style": "bold",
    "input-cursor-background": "#cdd6f4",
    "input-cursor-foreground": "#11111b",
    "input-selection-background": "#89b4fa 30%",
    "border": "#45475a",
    "border-blurred": "#313244",
    "scrollbar": "#313244",
    "scrollbar-hover": "#45475a",
    "scrollbar-background": "#181825",
    "footer-foreground": "#bac2de",
    "footer-background": "#11111b",
    "footer-key-foreground": "#f9e2af",
    "footer-key-background": "#313244",
    "text-muted": "#6c7086",
}


def build_theme(accent: str = "cyan") -> Theme:
    """Build the application theme around the user's accent colour.

    Args:
        accent: Any colour Textual understands (name or hex)
    """
    return Theme(
        name=GAIL_THEME_NAME,
        primary=accent,
        secondary="#cba6f7",   # Mauve - assistant label
        accent="#f9e2af",      # Gold - highlights
        foreground="#cdd6f4",
        background="#11111b",
        success="#a6e3a1",
        warning="#fab387",
        error="#f38ba8",
        surface="#1e1e2e",
        panel="#181825",
        dark=True,
        variables=dict(_BASE_VARIABLES),
    )
