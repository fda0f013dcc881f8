"""Main Textual TUI application.

Renders the chat controller's state and forwards user commands to it.
The app keeps no message list of its own: every redraw comes from the
ChatState snapshot the controller publishes.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, TextArea

from ..chat import ChatController, ChatState
from .config import ERROR_NOTIFY_TIMEOUT, LogLevel
from .screens import ConfirmationScreen
from .styles import APP_CSS
from .themes import CATPPUCCIN_MOCHA
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel


class ChatTextualApp(App):
    """Textual TUI chatting with a local Ollama model."""

    CSS = APP_CSS
    TITLE = "Chat with Ollama"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear_chat", "Clear Chat", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
    ]

    def __init__(self, controller: ChatController, log_level: str | None = None) -> None:
        super().__init__()
        self._controller = controller
        self._log_level = log_level
        self._unsubscribe = None
        self._rendered_loading = False

    @property
    def controller(self) -> ChatController:
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="main-panel"):
            yield ChatHistoryWidget(id="chat-history")
            yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    async def on_mount(self) -> None:
        """Wire the controller to the widgets and load the history."""
        self.register_theme(CATPPUCCIN_MOCHA)
        self.theme = "catppuccin-mocha"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self.sub_title = f"{self._controller.client.model} | {self._controller.store.backend_type}"

        self._controller.set_debug_callback(self._route_debug)
        self._unsubscribe = self._controller.subscribe(self._render_state)
        await self._controller.load_history()

        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _route_debug(self, level: str, component: str, message: str) -> None:
        """Route controller log messages to the log panel."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        if level == "debug":
            log_panel.debug(component, message)
        elif level == "info":
            log_panel.info(component, message)
        elif level == "warning":
            log_panel.warning(component, message)
        elif level == "error":
            log_panel.error(component, message)

    def _render_state(self, state: ChatState) -> None:
        """Redraw everything from a controller snapshot."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)

        if state.messages != chat.messages or state.is_loading != self._rendered_loading:
            chat.show_messages(state.messages, loading=state.is_loading)
            self._rendered_loading = state.is_loading
        input_bar.sync_text(state.input_text)
        input_bar.render_state(state.is_loading, state.can_send)

        if state.last_error is not None:
            self.notify(
                str(state.last_error),
                title="Error",
                severity="error",
                timeout=ERROR_NOTIFY_TIMEOUT,
            )
            self._controller.dismiss_error()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Mirror the input widget into the controller's buffer."""
        if event.text_area.id == "chat-input":
            self._controller.set_input(event.text_area.text)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        self._send(event.value)

    @work(group="chat")
    async def _send(self, text: str) -> None:
        """Run one send as a background async worker."""
        await self._controller.send_message(text)

    @work(group="chat")
    async def _clear(self) -> None:
        state = await self._controller.clear_all()
        if state.is_empty:
            self.notify("Chat cleared", timeout=2)

    def action_clear_chat(self) -> None:
        """Ask for confirmation, then clear the conversation."""
        state = self._controller.state
        if state.is_empty or state.is_loading:
            self.notify("Nothing to clear" if state.is_empty else "Wait for the reply first", timeout=2)
            return

        def _on_answer(confirmed: bool | None) -> None:
            if confirmed:
                self._clear()

        self.push_screen(
            ConfirmationScreen("Are you sure you want to erase the whole conversation?"),
            _on_answer,
        )

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(controller: ChatController, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        controller: Chat controller with a connected store
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ChatTextualApp(controller=controller, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
