"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - chat left, sheet right
   ============================================ */
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 3fr 2fr;
    grid-rows: 1fr auto;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 100%;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

.user-message {
    border-left: tall $success;
    background: $success 8%;

    & .message-header {
        color: $success;
        text-style: bold;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }

    &.error-message {
        border-left: tall $error;
        background: $error 8%;
    }
}

.message-header, .message-content, .message-table {
    height: auto;
}

/* Collapsed table toggle under an agent answer */
.table-toggle {
    width: auto;
    height: 1;
    min-width: 0;
    margin: 1 0 0 0;
    border: none;
    background: $accent 20%;
    color: $accent;

    &:hover {
        background: $accent 35%;
    }
}

/* ============================================
   Right Panel - status, sheet, log
   ============================================ */
#right-panel {
    height: 100%;
}

#server-status {
    height: 1;
    padding: 0 1;
    background: $surface;
}

#sheet-panel {
    height: 1fr;
    background: $panel;
    border: round $accent 60%;
    border-title-color: $accent;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

#sheet-status {
    padding: 1;
}

#sheet-table {
    height: 1fr;
}

#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 14;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    margin-top: 1;
}

/* ============================================
   Bottom Bar - Input
   ============================================ */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    border: tall $success;
    background: $success;
    color: $background;
    text-style: bold;
}

DataTable > .datatable--header {
    background: $panel;
    color: $accent;
    text-style: bold;
}
"""
