"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Catppuccin Mocha palette; user bubbles use primary, assistant bubbles use surface
CATPPUCCIN_MOCHA = Theme(
    name="catppuccin-mocha",
    primary="#89b4fa",      # Blue - user bubbles, focus
    secondary="#cba6f7",    # Mauve - assistant accent
    accent="#f9e2af",       # Yellow - pending reply
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",
    warning="#fab387",
    error="#f38ba8",        # Clear button, error notices
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "border": "#45475a",
        "border-blurred": "#313244",

        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",

        "footer-background": "#11111b",
        "footer-key-foreground": "#f9e2af",
        "footer-description-foreground": "#a6adc8",

        "text-muted": "#6c7086",
        "text-disabled": "#45475a",

        "input-selection-background": "#89b4fa 30%",
        "button-color-foreground": "#11111b",
    },
)
