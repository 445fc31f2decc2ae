"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, footer)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Dark theme built around the blue/rose/violet gradient of the Gemini mark
GEMINI_NIGHT = Theme(
    name="gemini-night",
    primary="#4285F4",      # Blue - user prompts, focus
    secondary="#9B72CB",    # Violet - replies
    accent="#D96570",       # Rose - hover and highlights
    foreground="#E3E3E3",
    background="#131314",
    success="#81C995",
    warning="#FDD663",
    error="#F28B82",
    surface="#1E1F20",
    panel="#171718",
    dark=True,
    variables={
        "border": "#3C4043",
        "border-blurred": "#2D2F31",

        "scrollbar": "#2D2F31",
        "scrollbar-hover": "#3C4043",
        "scrollbar-active": "#4285F4",
        "scrollbar-background": "#171718",

        "footer-key-foreground": "#D96570",
        "footer-background": "#131314",

        "text-muted": "#9AA0A6",
        "text-disabled": "#5F6368",

        "input-cursor-background": "#E3E3E3",
        "input-selection-background": "#4285F4 30%",
    },
)
