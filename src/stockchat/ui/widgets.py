"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Chat message rendering and the per-message table toggle
- Live sheet table states (loading, loaded, error)
- Server status display
- Log rendering and level filtering
"""

from datetime import datetime
from typing import Any

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, DataTable, RichLog, Static, TextArea

from ..agent.models import HealthStatus
from ..conversation.models import (
    CardContent,
    ErrorContent,
    MarkdownContent,
    Message,
    Role,
    TableContent,
    TextContent,
)
from ..extract.models import table_columns
from ..markdown import STREAMING_CURSOR, IncrementalMarkdownParser, render_markdown, render_rows
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIMESTAMP_FORMAT,
    PENDING_TEXT,
    SHEET_LOADING_TEXT,
    STATUS_LABELS,
    LogLevel,
)


def copy_text(app: Any, text: str, label: str) -> None:
    """Copy text to the system clipboard, falling back to the terminal."""
    import pyperclip

    try:
        pyperclip.copy(text)
        app.notify(f"{label} copied", timeout=2)
    except pyperclip.PyperclipException:
        app.copy_to_clipboard(text)
        app.notify(f"{label} copied (terminal)", timeout=2)


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value:
            if not self._history or self._history[-1] != value:
                self._history.append(value)
                del self._history[:-INPUT_HISTORY_MAX_SIZE]
            self._history_index = -1
            text_area.text = ""
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class MessageView(Vertical):
    """One chat message: header, rendered body and an optional table.

    The table stays collapsed behind a toggle button until expanded.
    Clicking the message copies its text.
    """

    class TableToggled(TextualMessage):
        """Sent when the table toggle of a message is pressed."""

        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    def __init__(self, message: Message, expanded: bool = False) -> None:
        role_class = "user-message" if message.role is Role.USER else "assistant-message"
        super().__init__(id=f"msg-{message.id}", classes=f"chat-message {role_class}")
        self._message = message
        self._expanded = expanded
        self._parser = IncrementalMarkdownParser()

    @property
    def message(self) -> Message:
        return self._message

    def compose(self):
        yield Static(self._header(), classes="message-header")
        yield Static(self._body(), classes="message-content")
        toggle = Button("", classes="table-toggle")
        table = Static("", classes="message-table")
        self._apply_table(toggle, table)
        yield toggle
        yield table

    def update_message(self, message: Message, expanded: bool) -> None:
        """Re-render after the message or its expansion state changed."""
        self._message = message
        self._expanded = expanded
        self.set_class(message.is_error, "error-message")
        self.query_one(".message-header", Static).update(self._header())
        self.query_one(".message-content", Static).update(self._body())
        self._apply_table(
            self.query_one(".table-toggle", Button),
            self.query_one(".message-table", Static),
        )

    def _header(self) -> str:
        prefix = "You" if self._message.role is Role.USER else "Agent"
        icon = ">" if self._message.role is Role.USER else "<"
        timestamp = self._message.timestamp.astimezone().strftime(MESSAGE_TIMESTAMP_FORMAT)
        return f"{icon} {prefix} [{timestamp}]"

    def _body(self) -> RenderableType:
        if self._message.is_pending:
            pending = Text(f"{PENDING_TEXT} ", style="dim italic")
            pending.append(STREAMING_CURSOR, style="blink")
            return pending

        renderables: list[RenderableType] = []
        for part in self._message.parts():
            if isinstance(part, ErrorContent):
                renderables.append(Text(part.text, style="bold red"))
            elif isinstance(part, TextContent):
                renderables.append(Text(part.text))
            elif isinstance(part, MarkdownContent):
                nodes = self._parser.parse(part.text)
                renderables.append(render_markdown(nodes, streaming=part.streaming))
            elif isinstance(part, CardContent):
                renderables.append(Panel(
                    Text("\n".join(part.lines)),
                    title=part.title,
                    title_align="left",
                    border_style="cyan",
                ))
        return Group(*renderables)

    def _table_part(self) -> TableContent | None:
        for part in self._message.parts():
            if isinstance(part, TableContent):
                return part
        return None

    def _apply_table(self, toggle: Button, table: Static) -> None:
        part = self._table_part()
        if part is None or self._message.streaming:
            toggle.display = False
            table.display = False
            return

        count = len(part.rows)
        toggle.display = True
        toggle.label = "Hide table" if self._expanded else (
            f"View table ({count} {'item' if count == 1 else 'items'})"
        )
        table.display = self._expanded
        if self._expanded:
            table.update(render_rows(part.rows))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.has_class("table-toggle"):
            event.stop()
            self.post_message(self.TableToggled(self._message.id))

    def on_click(self, event: Click) -> None:
        """Copy message text to the clipboard when clicked."""
        event.stop()
        if self._message.text:
            copy_text(self.app, self._message.text, "Message")


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat transcript kept in step with the session's messages."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[str, MessageView] = {}

    def sync(self, messages: list[Message], expanded: set[str]) -> None:
        """Mount, update and remove message views to match the transcript.

        Args:
            messages: Current transcript in order
            expanded: Ids of messages whose table is expanded
        """
        current = {message.id for message in messages}
        for message_id in list(self._views):
            if message_id not in current:
                self._views.pop(message_id).remove()

        added = False
        for message in messages:
            view = self._views.get(message.id)
            if view is None:
                view = MessageView(message, expanded=message.id in expanded)
                self._views[message.id] = view
                self.mount(view)
                added = True
            elif view.is_mounted:
                view.update_message(message, message.id in expanded)

        count = len(messages)
        self.border_subtitle = f"{count} messages" if count else "Conversation history"
        if added or any(message.streaming for message in messages):
            self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the text of the last completed agent message."""
        for view in reversed(list(self._views.values())):
            message = view.message
            if message.role is Role.BOT and not message.streaming and message.text:
                return message.text
        return None

    def clear_history(self) -> None:
        """Remove every message view."""
        self._views.clear()
        self.remove_children()
        self.border_subtitle = "Conversation history"


class SheetPanel(Vertical):
    """Live view of the inventory sheet."""

    BORDER_TITLE = "Inventory"
    BORDER_SUBTITLE = "Live sheet"

    def compose(self):
        yield Static(SHEET_LOADING_TEXT, id="sheet-status")
        yield DataTable(id="sheet-table", zebra_stripes=True)

    def on_mount(self) -> None:
        self.query_one("#sheet-table", DataTable).display = False

    def set_loading(self) -> None:
        status = self.query_one("#sheet-status", Static)
        status.update(f"[dim]{SHEET_LOADING_TEXT}[/]")
        status.display = True
        self.border_subtitle = "Loading"

    def set_message(self, text: str) -> None:
        """Show a notice instead of the table."""
        status = self.query_one("#sheet-status", Static)
        status.update(f"[dim]{text}[/]")
        status.display = True
        self.query_one("#sheet-table", DataTable).display = False
        self.border_subtitle = "Live sheet"

    def set_error(self, error: str) -> None:
        status = self.query_one("#sheet-status", Static)
        status.update(f"[red]{error}[/]")
        status.display = True
        self.query_one("#sheet-table", DataTable).display = False
        self.border_subtitle = "Error"

    def set_rows(self, rows: list[dict[str, Any]]) -> None:
        """Replace the table contents; columns come from the first row."""
        table = self.query_one("#sheet-table", DataTable)
        table.clear(columns=True)
        columns = table_columns(rows)
        table.add_columns(*columns)
        table.add_rows([[row.get(column, "") for column in columns] for row in rows])

        status = self.query_one("#sheet-status", Static)
        if rows:
            status.display = False
            table.display = True
        else:
            status.update("[dim]Sheet is empty[/]")
            status.display = True
            table.display = False
        self.border_subtitle = f"{len(rows)} rows"


class StatusIndicator(Static):
    """Agent server liveness, as last probed."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(STATUS_LABELS[HealthStatus.IDLE.value], *args, **kwargs)
        self._status = HealthStatus.IDLE

    @property
    def status(self) -> HealthStatus:
        return self._status

    def set_status(self, status: HealthStatus, detail: str | None = None) -> None:
        self._status = status
        label = STATUS_LABELS[status.value]
        self.update(f"{label} [dim]{detail}[/]" if detail else label)


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
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

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Stream, Session, Agent, Sheet, ...)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "TUI": "cyan",
            "Stream": "green",
            "Extract": "yellow",
            "Session": "magenta",
            "Agent": "blue",
            "Sheet": "bright_blue",
            "Memory": "bright_green",
        }
        level_color = level_colors.get(level, "white")
        comp_color = component_colors.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}][{component}][/] "
        )
        line.append(message)
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def route(self, level: str, component: str, message: str) -> None:
        """Debug callback entry point: Callable(level, component, message)."""
        self.log(component, message, LogLevel.from_string(level))

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        copy_text(self.app, text, "Log")
