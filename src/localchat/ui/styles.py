"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Main Area - chat with optional log below
   ============================================ */
#main-panel {
    height: 1fr;
}

#chat-history {
    height: 1fr;
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

#debug-panel {
    height: 12;
    background: $panel;
    border: round $border;
    border-title-color: $secondary;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

/* ============================================
   Bubbles - user on the right, assistant on the left
   ============================================ */
.bubble-row {
    width: 100%;
    height: auto;
    margin: 1 0 0 0;

    &.user-row {
        align-horizontal: right;
    }

    &.assistant-row {
        align-horizontal: left;
    }
}

.bubble {
    width: auto;
    max-width: 80%;
    height: auto;
    padding: 0 2;

    &.user-bubble {
        background: $primary;
        color: $background;
    }

    &.assistant-bubble {
        background: $surface;
        border-left: outer $secondary;
    }

    &.pending {
        border-left: outer $accent;
        text-style: italic;
    }

    & .bubble-header {
        width: auto;
        color: $text-muted;
        text-style: dim;
    }

    &.user-bubble .bubble-header {
        color: $background 70%;
    }

    & .bubble-text {
        width: auto;
    }
}

/* ============================================
   Input Bar
   ============================================ */
#chat-input-bar {
    height: auto;
    max-height: 10;
    padding: 0 1;

    #chat-input {
        width: 1fr;
        height: auto;
        min-height: 3;
        max-height: 8;
        border: round $border;

        &:focus {
            border: round $primary;
        }

        &:disabled {
            border: round $border-blurred;
            color: $text-disabled;
        }
    }

    #send-btn {
        width: 10;
        margin-left: 1;
    }
}
"""
