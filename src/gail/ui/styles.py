"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Sizes are relative (fr units and percentages), so Textual recomputes
them from the window dimensions on every layout pass.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Transcript - conversation history
   ============================================ */
#transcript {
    height: 1fr;
    background: $panel;
    border: round $border;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus {
        border: round $primary;
    }
}

/* ============================================
   Log panel - hidden until ctrl+l
   ============================================ */
#log-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-x: auto;
}

/* ============================================
   Prompt input
   ============================================ */
#prompt-input {
    height: 20%;
    min-height: 5;
    border: round $border;
    border-title-color: $text-muted;
    border-title-align: left;
    background: $panel;
    padding: 0 1;

    &:focus {
        border: round $primary;
    }

    &:disabled {
        opacity: 60%;
    }
}

/* ============================================
   Status bar
   ============================================ */
StatusBar {
    height: 3;
    border: round $border;
    padding: 0 1;
    color: $primary;
    background: $surface;

    &.-error {
        color: $error;
    }

    &.-loading {
        color: $warning;
    }
}
"""
