"""
main_window.py — MainWindow: assembles toolbar and bubble menu canvas,
                 owns the engine and the trace recorder.
"""

import logging

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QFileDialog, QMessageBox,
)

from canvas import BubbleMenuScene, BubbleMenuView
from engine import BubbleMenuEngine
from toolbar import MenuToolbar
from version import __version__, __app_name__

import export as exporter

logger = logging.getLogger(__name__)

DEFAULT_ITEMS = [
    {"id": "home",    "text": "Home",    "radius": 70},
    {"id": "diets",   "text": "Diets"},
    {"id": "recipes", "text": "Recipes"},
    {"id": "tips",    "text": "Tips"},
    {"id": "profile", "text": "Profile"},
]


class MainWindow(QMainWindow):

    def __init__(self, items=None, config=None):
        super().__init__()
        self.setWindowTitle(f"{__app_name__} v{__version__}")
        self.setMinimumSize(640, 560)
        self.resize(960, 720)

        self.engine   = BubbleMenuEngine(items if items is not None else DEFAULT_ITEMS,
                                         width=960, height=680, config=config,
                                         parent=self)
        self.recorder = exporter.TraceRecorder(self.engine)

        self._build_ui()
        self._connect_signals()
        self.engine.start()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self):
        self.toolbar = MenuToolbar(self)
        self.addToolBar(self.toolbar)

        self.scene = BubbleMenuScene(self.engine, self)
        self.view  = BubbleMenuView(self.scene)

        central = QWidget()
        self.setCentralWidget(central)
        vbox = QVBoxLayout(central)
        vbox.setContentsMargins(0, 0, 0, 0)
        vbox.setSpacing(0)
        vbox.addWidget(self.view, stretch=1)

    # ------------------------------------------------------------------
    # Signal wiring
    # ------------------------------------------------------------------

    def _connect_signals(self):
        tb = self.toolbar
        tb.reset_requested.connect(self.engine.reset)
        tb.record_toggled.connect(self._on_record_toggled)
        tb.snapshot_requested.connect(self._on_snapshot)
        tb.export_requested.connect(self._on_export)

        self.engine.scheduler.frame_ready.connect(self._on_frame)
        self.scene.bubble_pressed.connect(self._on_bubble_pressed)

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def _on_frame(self, frame: dict):
        if self.recorder.recording:
            self.recorder.record(frame)
            self.toolbar.set_frames_recorded(len(self.recorder))

    def _on_record_toggled(self, enabled: bool):
        if enabled:
            self.recorder.start()
        else:
            self.recorder.stop()
        self.toolbar.set_frames_recorded(len(self.recorder))

    def _on_bubble_pressed(self, bubble_id: str):
        payload = self.engine.store.get(bubble_id).payload
        callback = payload.get("on_press") if isinstance(payload, dict) else None
        if callable(callback):
            callback()
        self.toolbar.set_status(f"Pressed: {bubble_id}")

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def _on_snapshot(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Snapshot", exporter.default_filename("bubble-menu", ".png"),
            "PNG (*.png)")
        if not path:
            return
        try:
            exporter.save_snapshot(self.engine, path)
        except (OSError, ValueError) as exc:
            QMessageBox.critical(self, "Snapshot", f"Failed to save:\n{path}\n\n{exc}")

    def _on_export(self):
        self.recorder.stop()
        self.toolbar.set_record_checked(False)
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Trace", exporter.default_filename("bubble-trace", ".mp4"),
            "MP4 (*.mp4);;AVI (*.avi)")
        if not path:
            return
        try:
            count = exporter.export_trace_video(self.recorder, self.engine, path)
        except (OSError, ValueError) as exc:
            QMessageBox.critical(self, "Export Trace", f"Failed to export:\n{path}\n\n{exc}")
            return
        QMessageBox.information(self, "Export Trace",
                                f"{count} frame(s) saved to:\n{path}")

    # ------------------------------------------------------------------

    def closeEvent(self, event):
        self.engine.unmount()
        super().closeEvent(event)
