"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Catppuccin Mocha palette
RELAYCHAT_DARK = Theme(
    name="relaychat-dark",
    primary="#89b4fa",      # Blue - input and user turns
    secondary="#cba6f7",    # Mauve - assistant turns
    accent="#f9e2af",       # Gold - dialogs
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",
    warning="#fab387",
    error="#f38ba8",
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "input-cursor-background": "#cdd6f4",
        "input-cursor-foreground": "#11111b",
        "input-selection-background": "#89b4fa 30%",
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",
        "footer-key-foreground": "#f9e2af",
        "text-muted": "#6c7086",
        "link-color": "#89b4fa",
    },
)
