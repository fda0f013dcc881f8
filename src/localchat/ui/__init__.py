"""Terminal UI module for localchat.

Provides a Textual-based TUI over the chat controller.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (input bar, chat bubbles, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (confirmation screens)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatTextualApp, run_textual_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, MessageBubble

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatTextualApp",
    "DebugPanel",
    "LogLevel",
    "MessageBubble",
    "run_textual_tui",
]
