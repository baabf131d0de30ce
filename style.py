"""Visual style constants — edit here to tweak the app's appearance."""

from PySide6.QtGui import QColor, QPalette
from PySide6.QtCore import Qt

# ── Window ────────────────────────────────────────────────────────────────────
WINDOW_WIDTH = 640
WINDOW_HEIGHT = 760

# ── Item drag handle ──────────────────────────────────────────────────────────
ITEM_HANDLE_WIDTH = 12            # px wide strip on the left of each item
ITEM_HANDLE_COLOR = "#b0c4de"
ITEM_HANDLE_HOVER_COLOR = "#4682b4"

# ── Item text editor ──────────────────────────────────────────────────────────
ITEM_EDIT_FOCUS_BORDER = "#aaa"
COMPLETED_TEXT_COLOR = "#9e9e9e"
OVERDUE_COLOR = "#e53935"

# ── Tags ──────────────────────────────────────────────────────────────────────
TAG_CHIP_BG = "#e3f2fd"
TAG_CHIP_FG = "#1565c0"
TAG_CHIP_BG_DARK = "#1e3a5f"
TAG_CHIP_FG_DARK = "#90caf9"

# ── List widget ───────────────────────────────────────────────────────────────
ITEM_BORDER = "#ddd"
ITEM_BORDER_DARK = "#444"
DROP_TARGET_BG = QColor(79, 70, 229, 40)    # highlight under the dragged row
EMPTY_TEXT_COLOR = "#888"

# ── Theme palettes ────────────────────────────────────────────────────────────
LIGHT = {
    QPalette.ColorRole.Window: "#f5f5f5",
    QPalette.ColorRole.Base: "#ffffff",
    QPalette.ColorRole.AlternateBase: "#fafafa",
    QPalette.ColorRole.Text: "#212121",
    QPalette.ColorRole.WindowText: "#212121",
    QPalette.ColorRole.Button: "#eeeeee",
    QPalette.ColorRole.ButtonText: "#212121",
    QPalette.ColorRole.Highlight: "#3b82f6",
    QPalette.ColorRole.HighlightedText: "#ffffff",
    QPalette.ColorRole.PlaceholderText: "#9e9e9e",
}

DARK = {
    QPalette.ColorRole.Window: "#111827",
    QPalette.ColorRole.Base: "#1f2937",
    QPalette.ColorRole.AlternateBase: "#273244",
    QPalette.ColorRole.Text: "#f3f4f6",
    QPalette.ColorRole.WindowText: "#f3f4f6",
    QPalette.ColorRole.Button: "#374151",
    QPalette.ColorRole.ButtonText: "#e5e7eb",
    QPalette.ColorRole.Highlight: "#2563eb",
    QPalette.ColorRole.HighlightedText: "#ffffff",
    QPalette.ColorRole.PlaceholderText: "#6b7280",
}


def palette(dark: bool) -> QPalette:
    pal = QPalette()
    for role, color in (DARK if dark else LIGHT).items():
        pal.setColor(role, QColor(color))
    return pal


def apply_theme(app, dark: bool) -> None:
    app.setPalette(palette(dark))


def system_prefers_dark(app) -> bool:
    return app.styleHints().colorScheme() == Qt.ColorScheme.Dark


def tag_chip_css(dark: bool) -> str:
    bg, fg = (TAG_CHIP_BG_DARK, TAG_CHIP_FG_DARK) if dark else (TAG_CHIP_BG, TAG_CHIP_FG)
    return (
        f"QLabel {{ background: {bg}; color: {fg}; border-radius: 8px;"
        "  padding: 1px 6px; }"
    )
