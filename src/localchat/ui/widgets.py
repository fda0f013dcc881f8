"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input bar submit handling
- Chat bubble rendering
- Log rendering and level filtering
"""

from datetime import datetime

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, RichLog, Static, TextArea

from ..chat import PLACEHOLDER_TEXT
from ..store import ChatMessage
from .config import (
    BUBBLE_TIMESTAMP_FORMAT,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    The bar does not clear itself on submit; the controller empties the
    input buffer and the app syncs that back with ``sync_text``.
    """

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._loading = False

    def compose(self) -> ComposeResult:
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="primary", disabled=True).with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        text_area.focus()

    @property
    def text(self) -> str:
        return self.query_one("#chat-input", TextArea).text

    @property
    def send_enabled(self) -> bool:
        return not self.query_one("#send-btn", Button).disabled

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self.submit()

    def on_key(self, event) -> None:
        """Submit on ctrl+j.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self.submit()
            event.prevent_default()
            event.stop()

    def submit(self) -> None:
        """Post the current text unless it is blank or a reply is pending."""
        if self._loading:
            return
        value = self.text.strip()
        if value:
            self.post_message(self.Submitted(value))

    def sync_text(self, text: str) -> None:
        """Show the controller's input buffer if it differs from the widget."""
        text_area = self.query_one("#chat-input", TextArea)
        if text_area.text != text:
            text_area.text = text

    def render_state(self, is_loading: bool, can_send: bool) -> None:
        """Enable or disable input from the controller's state."""
        self.query_one("#send-btn", Button).disabled = not can_send
        if is_loading == self._loading:
            return
        self._loading = is_loading
        text_area = self.query_one("#chat-input", TextArea)
        text_area.disabled = is_loading
        if not is_loading:
            text_area.focus()

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class MessageBubble(Vertical):
    """One chat bubble; clicking it copies the text."""

    def __init__(self, message: ChatMessage, pending: bool = False, **kwargs) -> None:
        side = "user-bubble" if message.is_from_user else "assistant-bubble"
        classes = f"bubble {side}" + (" pending" if pending else "")
        super().__init__(classes=classes, **kwargs)
        self.message = message

    def compose(self) -> ComposeResult:
        author = "You" if self.message.is_from_user else "Assistant"
        when = self.message.timestamp.astimezone().strftime(BUBBLE_TIMESTAMP_FORMAT)
        yield Static(f"{author} · {when}", classes="bubble-header", markup=False)
        yield Static(self.message.text, classes="bubble-text", markup=False)

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self.message.text)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable list of chat bubbles.

    Always re-rendered from the full message list, never patched.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "No messages"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._messages: list[ChatMessage] = []

    @property
    def messages(self) -> list[ChatMessage]:
        """Messages currently rendered."""
        return list(self._messages)

    def show_messages(self, messages: list[ChatMessage], loading: bool = False) -> None:
        """Replace the rendered bubbles with ``messages``."""
        self._messages = list(messages)
        self.remove_children()

        rows = []
        last = len(messages) - 1
        for index, message in enumerate(messages):
            pending = (
                loading
                and index == last
                and not message.is_from_user
                and message.text == PLACEHOLDER_TEXT
            )
            side = "user-row" if message.is_from_user else "assistant-row"
            rows.append(Horizontal(MessageBubble(message, pending=pending), classes=f"bubble-row {side}"))

        if rows:
            self.mount_all(rows)
        self.border_subtitle = f"{len(messages)} messages" if messages else "No messages"
        self.call_after_refresh(self.scroll_end, animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for message in reversed(self._messages):
            if not message.is_from_user:
                return message.text
        return None


class DebugPanel(RichLog):
    """Log panel for controller tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Hidden"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Chat": "green",
        "Store": "bright_green",
        "LLM": "magenta",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Chat, Store, LLM)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        from rich.markup import escape

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def debug(self, component: str, message: str) -> None:
        """Log a DEBUG level message."""
        self.log_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        """Log an INFO level message."""
        self.log_entry(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        """Log a WARNING level message."""
        self.log_entry(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        """Log an ERROR level message."""
        self.log_entry(component, message, LogLevel.ERROR)

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self._update_subtitle()

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
