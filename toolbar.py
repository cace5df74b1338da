"""
toolbar.py — Top toolbar: Reset, Record, Snapshot, Export Trace.
"""

from PyQt6.QtWidgets import QToolBar, QWidget, QSizePolicy, QLabel
from PyQt6.QtGui import QAction
from PyQt6.QtCore import pyqtSignal, QSize


class MenuToolbar(QToolBar):

    reset_requested     = pyqtSignal()
    record_toggled      = pyqtSignal(bool)
    snapshot_requested  = pyqtSignal()
    export_requested    = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__("Main Toolbar", parent)
        self.setMovable(False)
        self.setIconSize(QSize(20, 20))
        self._build_actions()

    def _build_actions(self):
        # Reset
        act = QAction("Reset", self)
        act.setShortcut("Ctrl+R")
        act.setToolTip("Put every bubble back at its rest position (Ctrl+R)")
        act.triggered.connect(self.reset_requested)
        self.addAction(act)

        self.addSeparator()

        # Record
        self.act_record = QAction("Record", self)
        self.act_record.setCheckable(True)
        self.act_record.setToolTip("Record rendered frames for trace export")
        self.act_record.toggled.connect(self.record_toggled)
        self.addAction(self.act_record)

        # Export trace
        self.act_export = QAction("Export Trace", self)
        self.act_export.setShortcut("Ctrl+E")
        self.act_export.setToolTip("Write recorded frames to a video (Ctrl+E)")
        self.act_export.setEnabled(False)
        self.act_export.triggered.connect(self.export_requested)
        self.addAction(self.act_export)

        self.addSeparator()

        # Snapshot
        act_snap = QAction("Snapshot", self)
        act_snap.setShortcut("Ctrl+S")
        act_snap.setToolTip("Save the current frame as PNG (Ctrl+S)")
        act_snap.triggered.connect(self.snapshot_requested)
        self.addAction(act_snap)

        # Status — right-aligned
        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding,
                             QSizePolicy.Policy.Preferred)
        self.addWidget(spacer)

        self._status = QLabel("")
        self._status.setStyleSheet("color: #999; padding-right: 8px;")
        self.addWidget(self._status)

    # ------------------------------------------------------------------

    def set_frames_recorded(self, count: int):
        self.act_export.setEnabled(count > 0)
        self._status.setText(f"{count} frame(s)" if count else "")

    def set_record_checked(self, checked: bool):
        self.act_record.blockSignals(True)
        self.act_record.setChecked(checked)
        self.act_record.blockSignals(False)

    def set_status(self, text: str):
        self._status.setText(text)
