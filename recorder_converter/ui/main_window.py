from __future__ import annotations

import logging
import os
from typing import List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from recorder_converter.core.config import AppSettings, SettingsStore
from recorder_converter.core.logging_setup import QtLogHandler
from recorder_converter.core.workers import ConversionQueue

logger = logging.getLogger(__name__)

WINDOW_SIZE = 200
FALLBACK_POS = (100, 100)


class DropTarget(QtWidgets.QFrame):
    clicked = QtCore.Signal()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        if event.button() == QtCore.Qt.LeftButton:
            event.accept()
            self.clicked.emit()
        else:
            super().mousePressEvent(event)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        queue: ConversionQueue,
        store: SettingsStore,
        settings: AppSettings,
        log_handler: Optional[QtLogHandler] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Recorder Converter")
        self.setAcceptDrops(True)

        self.queue = queue
        self.store = store
        self.settings = settings

        central = QtWidgets.QWidget(self)
        self.setCentralWidget(central)
        self.vbox = QtWidgets.QVBoxLayout(central)

        self._build_drop_target()
        self._build_log()

        self.queue.depth_changed.connect(self._on_depth_changed)
        self.queue.busy_changed.connect(self._on_busy_changed)
        if log_handler is not None:
            log_handler.bridge.message.connect(self.log.appendPlainText)

        self._on_busy_changed(False)
        self._restore_position()

    def _build_drop_target(self) -> None:
        self.target = DropTarget()
        self.target.setFrameShape(QtWidgets.QFrame.StyledPanel)
        self.target.setCursor(QtCore.Qt.PointingHandCursor)
        self.target.setMinimumSize(WINDOW_SIZE, WINDOW_SIZE // 2)
        self.target.clicked.connect(self._choose_files)

        box = QtWidgets.QVBoxLayout(self.target)
        self.await_label = QtWidgets.QLabel("Drop MOV files here\nor click to choose")
        self.await_label.setAlignment(QtCore.Qt.AlignCenter)
        self.progress_label = QtWidgets.QLabel("Converting…")
        self.progress_label.setAlignment(QtCore.Qt.AlignCenter)
        self.queue_label = QtWidgets.QLabel("0")
        self.queue_label.setAlignment(QtCore.Qt.AlignCenter)
        font = self.queue_label.font()
        font.setPointSize(font.pointSize() * 2)
        self.queue_label.setFont(font)
        box.addWidget(self.await_label)
        box.addWidget(self.progress_label)
        box.addWidget(self.queue_label)

        self.vbox.addWidget(self.target, 1)

    def _build_log(self) -> None:
        self.log = QtWidgets.QPlainTextEdit()
        self.log.setReadOnly(True)
        self.log.setMaximumBlockCount(10000)
        self.vbox.addWidget(self.log)

    # Window position
    def _restore_position(self) -> None:
        x, y = self.settings.window_x, self.settings.window_y
        # External displays may have been disconnected since the last run
        if not self._position_visible(x, y):
            x, y = FALLBACK_POS
        self.move(x, y)
        self._store_position(x, y)

    @staticmethod
    def _position_visible(x: int, y: int) -> bool:
        rect = QtCore.QRect(x, y, WINDOW_SIZE, WINDOW_SIZE)
        return any(s.geometry().contains(rect) for s in QtGui.QGuiApplication.screens())

    def _store_position(self, x: int, y: int) -> None:
        self.settings.window_x = x
        self.settings.window_y = y
        try:
            self.store.save(self.settings)
        except OSError as e:
            logger.warning(f"cannot save settings: {e}")

    def moveEvent(self, event: QtGui.QMoveEvent) -> None:  # noqa: N802
        super().moveEvent(event)
        pos = self.pos()
        self._store_position(pos.x(), pos.y())

    # Drag & Drop
    def dragEnterEvent(self, event: QtGui.QDragEnterEvent) -> None:  # noqa: N802
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            super().dragEnterEvent(event)

    def dragMoveEvent(self, event: QtGui.QDragMoveEvent) -> None:  # noqa: N802
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            super().dragMoveEvent(event)

    def dropEvent(self, event: QtGui.QDropEvent) -> None:  # noqa: N802
        paths = [url.toLocalFile() for url in event.mimeData().urls() if url.isLocalFile()]
        event.acceptProposedAction()
        self._add_paths(paths)

    # Actions
    def _choose_files(self) -> None:
        files, _ = QtWidgets.QFileDialog.getOpenFileNames(
            self, "Choose Recorder Output Files", "", "MOV (*.mov)"
        )
        self._add_paths(files)

    def _add_paths(self, paths: List[str]) -> None:
        for p in paths:
            self.queue.enqueue(os.path.abspath(p))

    # Queue slots
    def _on_depth_changed(self, depth: int) -> None:
        self.queue_label.setText(str(depth))

    def _on_busy_changed(self, busy: bool) -> None:
        self.await_label.setVisible(not busy)
        self.progress_label.setVisible(busy)
