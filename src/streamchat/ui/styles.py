"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Layout: a single chat column, an optional log panel below it and the
input bar at the bottom. User prompts sit on the right, replies on the left.
"""

APP_CSS = """
/* ============================================
   CSS Variables - Design Tokens
   ============================================ */
$bubble-user: $primary 18%;
$bubble-assistant: $surface;
$code-background: $background;

Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat History - Primary Focus Area
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* ============================================
   Messages
   ============================================ */
.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
}

.user-message {
    width: 80%;
    margin-left: 20%;
    background: $bubble-user;
    border-left: thick $primary;
}

.assistant-message {
    width: 100%;
    background: $bubble-assistant;
    border-left: thick $secondary;
}

.message-header {
    height: 1;
    text-style: bold;
    color: $text-muted;

    &:hover {
        color: $accent;
    }
}

.prose {
    height: auto;
}

ThinkingIndicator {
    height: 1;
    width: 12;
    color: $secondary;
}

/* ============================================
   Code Blocks
   ============================================ */
.code-block {
    height: auto;
    margin: 1 0;
    background: $code-background;
    border: round $border;
}

.code-header {
    height: 1;
    padding: 0 1;
    background: $surface;
}

.code-language {
    width: 1fr;
    color: $text-muted;
}

Button.copy-btn {
    min-width: 0;
    width: auto;
    height: 1;
    border: none;
    padding: 0 1;
    background: transparent;
    color: $text-muted;

    &:hover {
        color: $accent;
        background: $boost;
    }
}

.code-body {
    height: auto;
    padding: 0 1;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    display: none;
    height: 10;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

/* ============================================
   Chat Input Bar - Text Entry + Send
   ============================================ */
ChatInputBar {
    height: 3;
    margin: 0 0 1 0;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 1;
    border: none;
    padding: 0 1;
    background: transparent;

    &:disabled {
        color: $text-disabled;
    }
}

#send-btn {
    min-width: 8;
    height: 1;
    border: none;
    margin: 0 1;
}
"""
