"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palette and visual appearance
- Theme variables (borders, scrollbars, footer)

To add a new theme, define it here and register it in the app.
"""

from textual.theme import Theme

# Warehouse dark theme: slate surfaces, teal primary, amber for stock alerts
WAREHOUSE_DARK = Theme(
    name="warehouse-dark",
    primary="#2dd4bf",      # Teal - main accent
    secondary="#a78bfa",    # Violet - agent messages
    accent="#fbbf24",       # Amber - highlights
    foreground="#e2e8f0",
    background="#0f172a",
    success="#4ade80",
    warning="#fb923c",
    error="#f87171",
    surface="#1e293b",
    panel="#111827",
    dark=True,
    variables={
        "border": "#334155",
        "border-blurred": "#1e293b",

        "scrollbar": "#1e293b",
        "scrollbar-hover": "#334155",
        "scrollbar-active": "#2dd4bf",
        "scrollbar-background": "#111827",

        "footer-foreground": "#cbd5e1",
        "footer-background": "#0f172a",
        "footer-key-foreground": "#fbbf24",
        "footer-key-background": "#1e293b",

        "text-muted": "#64748b",
        "input-selection-background": "#2dd4bf 30%",
    },
)
