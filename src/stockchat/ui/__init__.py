"""Terminal UI module for stockchat.

Provides a Textual-based TUI for chatting with the inventory agent.

Module structure (Parnas principle - each module hides a design decision):
- config.py: Constants and log levels
- widgets.py: Custom widgets (input history, messages, sheet, status, log)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette and theme configuration
- app.py: Application orchestration (user interaction flow)
"""

from .app import StockChatApp, run_textual_tui
from .config import LogLevel
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    MessageView,
    SheetPanel,
    StatusIndicator,
)

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "LogLevel",
    "MessageView",
    "SheetPanel",
    "StatusIndicator",
    "StockChatApp",
    "run_textual_tui",
]
