import sys
from pathlib import Path
from PySide6.QtCore import Qt, QEvent, QTimer
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)
from sw.common.logger import log
from sw.common.setup import PATHS
from sw.core import config
from sw.core.engine import TimingEngine
from sw.core.export import EmptyLogError, ExportFormat, save_export, serialize
from sw.core.timer_state import Mode, TimerState, format_time
from sw.ui.theme import SIZES, build_stylesheet, display_color, theme_name
from sw.ui.ticker import QtTicker
from sw.ui.widgets import (
    build_controls,
    build_display,
    build_preset_row,
    build_toolbar,
    entry_text,
)
from sw.util import parse_duration

FONT_FAMILY = "Segoe UI" if sys.platform == "win32" else "Sans Serif"

_TEXT_INPUTS = (QLineEdit, QTextEdit, QPlainTextEdit)


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# The stopwatch window. Owns the engine (and through it the one TimerState), and turns engine callbacks into
# widget updates.
class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Stopwatch")

        # -- Settings --
        self.settings = config.load_settings()
        self.dark_mode = self.settings["dark_mode"]
        self.presets_ms = list(self.settings["presets_ms"])
        self._active_preset = None  # ms of the highlighted preset, or "custom"
        self._fullscreen = False

        if self.settings["always_on_top"]:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        # -- Engine --
        self.engine = TimingEngine(
            state=TimerState(),
            ticker=QtTicker(self),
            on_status=self._announce,
            on_display=self._on_display,
            on_complete=self._on_countdown_complete,
        )

        # -- Build UI --
        s = SIZES
        central = QWidget()
        self.setCentralWidget(central)
        lay = QVBoxLayout(central)
        lay.setContentsMargins(s["frame_pad"], s["frame_pad"], s["frame_pad"], s["frame_pad"])
        lay.setSpacing(s["padding"])

        toolbar, self._toolbar = build_toolbar(
            FONT_FAMILY, s,
            on_export=self._on_export,
            on_theme=self._toggle_theme,
            on_fullscreen=self._toggle_fullscreen,
        )
        lay.addWidget(toolbar)
        # Highlight the last used format whenever the menu opens, by click or by the E key
        self._toolbar["export_menu"].aboutToShow.connect(self._preselect_export_format)

        display, self._display = build_display(FONT_FAMILY, s)
        lay.addWidget(display)

        controls, self._buttons = build_controls(
            FONT_FAMILY, s,
            on_start=lambda: self._run(self.engine.start),
            on_pause=lambda: self._run(self.engine.pause),
            on_reset=self._on_reset,
            on_lap=lambda: self._run(self.engine.record_lap),
            on_split=lambda: self._run(self.engine.record_split),
        )
        lay.addWidget(controls)

        presets, pw = build_preset_row(
            FONT_FAMILY, s, self.presets_ms,
            on_preset=self._on_preset,
            on_custom=self._on_custom_preset,
        )
        self._preset_btns = pw["presets"]
        self._custom_btn = pw["custom"]
        lay.addWidget(presets)

        self._laps = QListWidget()
        self._laps.setFont(QFont(FONT_FAMILY, s["label"]))
        self._laps.setFocusPolicy(Qt.NoFocus)
        self._laps.setAccessibleName("Lap times")
        lay.addWidget(self._laps, 1)

        # Live region: one message at a time, newest replaces the last
        self._status = QLabel("")
        self._status.setObjectName("statusLabel")
        self._status.setFont(QFont(FONT_FAMILY, s["status"]))
        self._status.setAccessibleName("Status")
        lay.addWidget(self._status)

        self._apply_style()
        self._refresh()
        QTimer.singleShot(0, self.adjustSize)

    # ------------------------------------------------------------------ #
    #  Style                                                               #
    # ------------------------------------------------------------------ #

    def _apply_style(self):
        style = build_stylesheet(theme_name(self.dark_mode))
        self.setStyleSheet(style)
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(style)
        self._toolbar["theme"].setChecked(self.dark_mode)
        self._toolbar["theme"].setText("☀" if self.dark_mode else "☾")
        self._update_display_color()

    def _update_display_color(self):
        st = self.engine.state
        color = display_color(theme_name(self.dark_mode), st.running, st.mode is Mode.COUNTDOWN)
        for lbl in self._display.values():
            lbl.setStyleSheet(f"color: {color};")

    def _toggle_theme(self):
        self.dark_mode = not self.dark_mode
        self._apply_style()
        self._announce("Dark mode activated" if self.dark_mode else "Light mode activated")
        self.settings["dark_mode"] = self.dark_mode
        self._save_settings()

    # ------------------------------------------------------------------ #
    #  Fullscreen                                                          #
    # ------------------------------------------------------------------ #

    def _toggle_fullscreen(self):
        if not self._fullscreen:
            self.showFullScreen()
            self._announce("Entered fullscreen mode")
        else:
            self.showNormal()
            self._announce("Exited fullscreen mode")

    def changeEvent(self, event):
        # Keeps our flag honest when the window manager (or Esc/F11) changes the state behind our back
        if event.type() == QEvent.WindowStateChange:
            self._fullscreen = bool(self.windowState() & Qt.WindowFullScreen)
            btn = self._toolbar["fullscreen"]
            btn.setChecked(self._fullscreen)
            btn.setToolTip("Exit fullscreen" if self._fullscreen else "Enter fullscreen")
        super().changeEvent(event)

    # ------------------------------------------------------------------ #
    #  Engine callbacks                                                    #
    # ------------------------------------------------------------------ #

    def _announce(self, message):
        self._status.setText(message)
        self._status.setAccessibleDescription(message)

    def _on_display(self, parts):
        self._display["hours"].setText(f"{parts.hours:02d}")
        self._display["minutes"].setText(f"{parts.minutes:02d}")
        self._display["seconds"].setText(f"{parts.seconds:02d}")
        self._display["centiseconds"].setText(f"{parts.centiseconds:02d}")

    def _on_countdown_complete(self):
        QApplication.beep()
        self._refresh()

    # ------------------------------------------------------------------ #
    #  Button handlers                                                     #
    # ------------------------------------------------------------------ #

    def _run(self, operation):
        """Invoke an engine operation, then bring buttons and the list in line."""
        result = operation()
        self._refresh()
        return result

    def _on_reset(self):
        self.engine.reset()
        self._set_active_preset(None)

    def _on_preset(self, preset_ms):
        self.engine.arm_countdown(preset_ms)
        self._set_active_preset(preset_ms)

    def _on_custom_preset(self):
        current = format_time(self.engine.state.preset_ms)[:8]
        text, ok = QInputDialog.getText(
            self, "Custom Countdown", "Enter duration (HH:MM:SS):", text=current)
        ms = parse_duration(text) if ok and text.strip() else None
        if not ms:
            # Dialog cancelled or nonsense typed - put the highlight back where it was
            self._set_active_preset(self._active_preset)
            if ok:
                self._announce("Invalid countdown duration")
            return
        self.engine.arm_countdown(ms)
        self._set_active_preset("custom")

    def _set_active_preset(self, which):
        self._active_preset = which
        for ms, btn in self._preset_btns.items():
            btn.setChecked(which == ms)
        self._custom_btn.setChecked(which == "custom")
        self._refresh()

    def _preselect_export_format(self):
        fmt = ExportFormat.parse(self.settings["export_format"])
        self._toolbar["export_menu"].setActiveAction(self._toolbar["export_actions"][fmt])

    def _on_export(self, fmt):
        fmt = ExportFormat.parse(fmt)
        try:
            result = serialize(self.engine.state.entries, fmt)
        except EmptyLogError:
            self._announce("No lap times to export")
            return

        export_dir = Path(self.settings["export_dir"] or PATHS.exports)
        suggested = str(export_dir / result.filename)
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Lap Times", suggested,
            f"{fmt.extension.upper()} files (*.{fmt.extension});;All files (*)")
        if not path:
            return
        try:
            written = save_export(result, path=path)
        except OSError as e:
            log.warning(f"Failed to export lap times to '{path}'", exc_info=True)
            QMessageBox.warning(self, "Export Error", f"Failed to export lap times:\n{e}")
            return

        self.settings["export_dir"] = str(written.parent)
        self.settings["export_format"] = fmt.extension
        self._save_settings()
        self._announce(f"Lap times exported as {fmt.extension.upper()}")

    # ------------------------------------------------------------------ #
    #  Keyboard shortcuts                                                  #
    # ------------------------------------------------------------------ #

    def keyPressEvent(self, event):
        if isinstance(QApplication.focusWidget(), _TEXT_INPUTS) or event.isAutoRepeat():
            super().keyPressEvent(event)
            return

        st = self.engine.state
        key = event.key()
        if key == Qt.Key_S:
            self._run(self.engine.pause if st.running else self.engine.start)
        elif key == Qt.Key_R:
            self._on_reset()
        elif key == Qt.Key_L:
            self._run(self.engine.record_lap)
        elif key == Qt.Key_P:
            self._run(self.engine.record_split)
        elif key == Qt.Key_E:
            self._toolbar["export"].showMenu()
        else:
            super().keyPressEvent(event)

    # ------------------------------------------------------------------ #
    #  Display helpers                                                     #
    # ------------------------------------------------------------------ #

    # Enables/disables controls for the engine's current state and redraws the lap list from its entries.
    def _refresh(self):
        st = self.engine.state
        finished_countdown = st.mode is Mode.COUNTDOWN and st.elapsed_ms <= 0
        self._buttons["start"].setEnabled(not st.running and not finished_countdown)
        self._buttons["pause"].setEnabled(st.running)
        self._buttons["lap"].setEnabled(st.has_time)
        self._buttons["split"].setEnabled(st.has_time)

        self._laps.clear()
        for entry in st.entries:
            self._laps.addItem(entry_text(entry))

        self._update_display_color()

    # ------------------------------------------------------------------ #
    #  Persistence helpers                                                 #
    # ------------------------------------------------------------------ #

    def _save_settings(self):
        try:
            config.save_settings(self.settings)
        except OSError:
            log.warning("Failed to save settings", exc_info=True)

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        self.engine.reset()
        try:
            config.save_settings(self.settings)
        except Exception as e:
            QMessageBox.warning(self, "Save Error",
                                f"Failed to save settings:\n{e}")
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
