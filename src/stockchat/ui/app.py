"""Main Textual TUI application.

Orchestrates the UI components around one ChatSession, the agent connection
and the live sheet.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..agent import AgentConnection, HealthStatus, create_agent_client
from ..config import Settings
from ..conversation import ChatSession
from ..memory import SessionMemory, create_session_memory
from ..sheet import SheetClient, SheetFetchError
from .config import SHEET_UNCONFIGURED_TEXT, LogLevel
from .styles import APP_CSS
from .themes import WAREHOUSE_DARK
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    MessageView,
    SheetPanel,
    StatusIndicator,
    copy_text,
)


def build_connection(settings: Settings) -> AgentConnection:
    """Create the agent connection described by the settings."""
    return AgentConnection(
        lambda: create_agent_client(
            "http",
            base_url=settings.agent_url,
            api_key=settings.api_key,
            timeout=settings.request_timeout,
            health_timeout=settings.health_timeout,
        )
    )


def build_memory(settings: Settings) -> SessionMemory:
    """Create the session memory backend described by the settings."""
    if settings.memory_backend == "sqlite":
        return create_session_memory("sqlite", path=settings.memory_path)
    return create_session_memory("memory")


class StockChatApp(App):
    """Textual TUI for chatting with the inventory agent."""

    CSS = APP_CSS
    TITLE = "Stockchat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("ctrl+r", "refresh_sheet", "Refresh Sheet"),
        Binding("ctrl+w", "wake_server", "Wake Server"),
        Binding("ctrl+y", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
        Binding("escape", "cancel_request", "Cancel"),
    ]

    def __init__(
        self,
        settings: Settings,
        log_level: str | None = None,
        connection: AgentConnection | None = None,
        memory: SessionMemory | None = None,
        sheet_client: SheetClient | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._log_level = log_level
        self._connection = connection or build_connection(settings)
        self._memory = memory or build_memory(settings)
        if sheet_client is None and settings.sheet_id:
            sheet_client = SheetClient(settings.sheet_id, settings.sheet_gid)
        self._sheet_client = sheet_client
        self._session = ChatSession(
            self._connection,
            memory=self._memory,
            streaming=settings.streaming,
            request_timeout=settings.request_timeout,
            max_tokens=settings.max_tokens,
            on_change=self._on_session_change,
        )
        self._expanded: set[str] = set()
        self._notified_errors: set[str] = set()

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        yield ChatHistoryWidget(id="chat-history")

        with Vertical(id="right-panel"):
            yield StatusIndicator(id="server-status")
            yield SheetPanel(id="sheet-panel")
            yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield ChatInputBar(id="chat-input-bar")

        yield Footer()

    async def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(WAREHOUSE_DARK)
        self.theme = "warehouse-dark"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._session.set_debug_callback(log_panel.route)
        self._connection.set_debug_callback(log_panel.route)
        if self._sheet_client is not None:
            self._sheet_client.set_debug_callback(log_panel.route)

        await self._memory.connect()
        log_panel.info("Memory", f"Session memory: {self._memory.backend_type}")

        mode = "streaming" if self._settings.streaming else "single response"
        self.sub_title = f"{self._settings.agent_url} | {mode} | {self._memory.backend_type}"

        self._check_health()
        self._load_sheet()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    async def on_unmount(self) -> None:
        """Release the connection, memory and sheet client."""
        self._session.cancel()
        await self._connection.disconnect()
        await self._memory.disconnect()
        if self._sheet_client is not None:
            await self._sheet_client.close()

    def _on_session_change(self) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.sync(self._session.messages, self._expanded)

        for message in self._session.messages:
            if message.is_error and message.id not in self._notified_errors:
                self._notified_errors.add(message.id)
                self.notify(message.text, severity="error", timeout=5)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._session.in_flight:
            self.query_one("#debug-panel", DebugPanel).info("TUI", "Superseding in-flight request")
        self._session.submit(event.value)

    def on_message_view_table_toggled(self, event: MessageView.TableToggled) -> None:
        """Expand or collapse the table under one message."""
        if event.message_id in self._expanded:
            self._expanded.discard(event.message_id)
        else:
            self._expanded.add(event.message_id)
        self._on_session_change()

    @work(exclusive=True, group="health")
    async def _check_health(self) -> None:
        indicator = self.query_one("#server-status", StatusIndicator)
        log_panel = self.query_one("#debug-panel", DebugPanel)

        indicator.set_status(HealthStatus.CHECKING)
        report = await self._connection.health()
        indicator.set_status(report.status, report.error)
        if report.status is HealthStatus.ONLINE:
            log_panel.info("Agent", f"Server health: {report.detail}")
        else:
            log_panel.warning("Agent", f"Server offline: {report.error}")

    @work(exclusive=True, group="sheet")
    async def _load_sheet(self) -> None:
        panel = self.query_one("#sheet-panel", SheetPanel)
        if self._sheet_client is None:
            panel.set_message(SHEET_UNCONFIGURED_TEXT)
            return

        panel.set_loading()
        try:
            rows = await self._sheet_client.fetch_rows()
        except SheetFetchError as e:
            self.query_one("#debug-panel", DebugPanel).error("Sheet", str(e))
            panel.set_error(str(e))
            return
        panel.set_rows(rows)

    async def action_new_chat(self) -> None:
        """Clear the transcript and forget the thread id."""
        await self._session.new_chat()
        self._expanded.clear()
        self._notified_errors.clear()
        self.query_one("#chat-history", ChatHistoryWidget).clear_history()
        self.notify("New chat started", timeout=2)

    def action_cancel_request(self) -> None:
        """Abort the in-flight request, if any."""
        if self._session.cancel():
            self.notify("Request cancelled", severity="warning", timeout=2)

    def action_wake_server(self) -> None:
        self._check_health()

    def action_refresh_sheet(self) -> None:
        self._load_sheet()

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last agent response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            copy_text(self, response, "Response")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(settings: Settings, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        settings: Validated settings
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = StockChatApp(settings=settings, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
