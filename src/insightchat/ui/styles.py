"""Textual CSS for the chat widget app.

Hides layout and styling decisions from the application logic.
"""

APP_CSS = """
Screen {
    layout: vertical;
}

Transcript {
    height: 1fr;
    border: round $primary 50%;
    border-title-color: $primary;
    border-subtitle-color: $text-muted;
    padding: 0 1;

    &.-maximized {
        height: 1fr;
    }
}

MessageCard {
    height: auto;
    margin-top: 1;
    padding: 0 1;

    &.-user {
        border-left: wide $accent;
    }

    &.-bot {
        border-left: wide $success;
    }

    .author {
        color: $text-muted;
        text-style: bold;
    }

    .controls {
        height: 1;
        margin-top: 1;
    }

    .controls Button {
        height: 1;
        min-width: 6;
        border: none;
        margin-right: 1;
    }

    .controls Button.-chosen {
        background: $success 50%;
        text-style: bold;
    }
}

#typing {
    color: $warning;
    text-style: italic;
    margin-top: 1;
}

LogPanel {
    height: 10;
    border: round $warning 50%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
}

#footer-area {
    height: auto;
}

StatusLine {
    height: 1;
    padding: 0 1;
}

Composer {
    height: 6;
    border: round $primary 50%;

    &:focus-within {
        border: round $primary;
    }

    &.-busy {
        border: round $warning;
        opacity: 70%;
    }

    MarkupEditor {
        width: 1fr;
        border: none;
    }

    #send {
        width: 14;
        height: 3;
        margin: 1 1 0 1;
    }
}
"""
