"""Widget builders — time readout, control buttons, presets and toolbar.

Each builder returns a (container, widget_dict) tuple.  The widget_dict maps
logical names to sub-widgets so MainWindow can update them later.
"""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMenu,
    QPushButton,
    QToolButton,
    QWidget,
)

from sw.core.export import ExportFormat
from sw.core.timer_state import EntryKind

DISPLAY_FIELDS = ("hours", "minutes", "seconds", "centiseconds")


def preset_label(ms):
    """Short button caption for a preset, e.g. 30s, 5 min, 1h 30m."""
    seconds = ms // 1000
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}h {m}m" if m else f"{h}h"
    if m:
        return f"{m} min" if not s else f"{m}m {s}s"
    return f"{s}s"


def entry_text(entry):
    """List row text for one lap or split."""
    if entry.kind is EntryKind.LAP:
        return f"{entry.number}    {entry.total_text}    (Segment: {entry.segment_text})"
    return f"{entry.number}    {entry.total_text}    (Total from start)"


def _transparent(name):
    w = QWidget()
    w.setObjectName(name)
    w.setStyleSheet(f"#{name} {{ background: transparent; }}")
    lay = QHBoxLayout(w)
    lay.setContentsMargins(0, 0, 0, 0)
    return w, lay


def build_display(font_family, size):
    """Four two-digit fields separated by colons.

    Returns (container, widget_dict) keyed by DISPLAY_FIELDS.
    """
    container, lay = _transparent("display")
    lay.setSpacing(0)
    lay.addStretch()

    font = QFont(font_family, size["display"])
    font.setBold(True)
    font.setStyleHint(QFont.StyleHint.Monospace)

    labels = {}
    for i, key in enumerate(DISPLAY_FIELDS):
        if i:
            colon = QLabel(":")
            colon.setFont(font)
            lay.addWidget(colon)
        lbl = QLabel("00")
        lbl.setFont(font)
        lbl.setAlignment(Qt.AlignCenter)
        lbl.setAccessibleName(key.capitalize())
        lay.addWidget(lbl)
        labels[key] = lbl

    lay.addStretch()
    return container, labels


def build_controls(font_family, size, on_start, on_pause, on_reset,
                   on_lap, on_split):
    """Start / Pause / Reset / Lap / Split row."""
    container, lay = _transparent("controls")
    lay.setSpacing(size["padding"])
    font = QFont(font_family, size["label"])

    buttons = {}
    for key, text, tip, handler in (
            ("start", "Start", "Start (S)", on_start),
            ("pause", "Pause", "Pause (S)", on_pause),
            ("reset", "Reset", "Reset (R)", on_reset),
            ("lap", "Lap", "Record lap (L)", on_lap),
            ("split", "Split", "Record split (P)", on_split)):
        btn = QPushButton(text)
        btn.setFont(font)
        btn.setToolTip(tip)
        btn.clicked.connect(lambda _=False, h=handler: h())
        lay.addWidget(btn)
        buttons[key] = btn

    buttons["pause"].setEnabled(False)
    buttons["lap"].setEnabled(False)
    buttons["split"].setEnabled(False)
    return container, buttons


def build_preset_row(font_family, size, presets_ms, on_preset, on_custom):
    """Countdown preset buttons plus a Custom... button.

    Returns (container, {"presets": {ms: button}, "custom": button}).
    """
    container, lay = _transparent("presets")
    lay.setSpacing(max(1, size["padding"] // 2))
    font = QFont(font_family, size["action"])

    lbl = QLabel("Countdown:")
    lbl.setFont(font)
    lay.addWidget(lbl)

    preset_btns = {}
    for ms in presets_ms:
        btn = QPushButton(preset_label(ms))
        btn.setFont(font)
        btn.setCheckable(True)
        btn.clicked.connect(lambda _=False, v=ms: on_preset(v))
        lay.addWidget(btn)
        preset_btns[ms] = btn

    custom_btn = QPushButton("Custom...")
    custom_btn.setFont(font)
    custom_btn.setCheckable(True)
    custom_btn.clicked.connect(lambda _=False: on_custom())
    lay.addWidget(custom_btn)
    lay.addStretch()

    return container, {"presets": preset_btns, "custom": custom_btn}


def build_toolbar(font_family, size, on_export, on_theme, on_fullscreen):
    """Export menu, theme toggle and fullscreen toggle.

    on_export is called with the chosen ExportFormat.
    """
    container, lay = _transparent("toolbar")
    lay.setSpacing(max(1, size["padding"] // 2))
    font = QFont(font_family, size["action"])

    export_btn = QToolButton()
    export_btn.setText("Export")
    export_btn.setFont(font)
    export_btn.setToolTip("Export lap times (E)")
    export_btn.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
    menu = QMenu(export_btn)
    actions = {}
    for fmt, text in ((ExportFormat.DELIMITED, "CSV"),
                      (ExportFormat.STRUCTURED, "JSON"),
                      (ExportFormat.PLAIN, "Text")):
        action = menu.addAction(text)
        action.triggered.connect(lambda _=False, f=fmt: on_export(f))
        actions[fmt] = action
    export_btn.setMenu(menu)
    lay.addWidget(export_btn)
    lay.addStretch()

    theme_btn = QPushButton("☾")
    theme_btn.setFont(font)
    theme_btn.setCheckable(True)
    theme_btn.setToolTip("Toggle dark mode")
    theme_btn.clicked.connect(lambda _=False: on_theme())
    lay.addWidget(theme_btn)

    fullscreen_btn = QPushButton("⛶")
    fullscreen_btn.setFont(font)
    fullscreen_btn.setCheckable(True)
    fullscreen_btn.setToolTip("Enter fullscreen")
    fullscreen_btn.clicked.connect(lambda _=False: on_fullscreen())
    lay.addWidget(fullscreen_btn)

    return container, {
        "export": export_btn,
        "export_menu": menu,
        "export_actions": actions,
        "theme": theme_btn,
        "fullscreen": fullscreen_btn,
    }
