from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional, Protocol, Tuple

from PySide6 import QtCore

logger = logging.getLogger(__name__)


class Converter(Protocol):
    def convert(self, source: str) -> Optional[str]: ...


class WorkerSignals(QtCore.QObject):
    finished = QtCore.Signal(str, bool, str)  # path, success, message


class ConversionWorker(QtCore.QRunnable):
    """Runs the blocking conversion of one file in a background thread."""

    def __init__(self, pipeline: Converter, path: str) -> None:
        super().__init__()
        self.pipeline = pipeline
        self.path = path
        self.signals = WorkerSignals()

    @QtCore.Slot()
    def run(self) -> None:  # type: ignore[override]
        try:
            result = self.pipeline.convert(self.path)
        except Exception as e:
            # a crashed job still has to leave the queue
            logger.exception(f"unexpected failure converting {self.path}")
            result = f"unexpected error: {e}"
        self.signals.finished.emit(self.path, result is None, result or "")


class ConversionQueue(QtCore.QObject):
    """FIFO job queue drained strictly one conversion at a time."""

    depth_changed = QtCore.Signal(int)
    busy_changed = QtCore.Signal(bool)
    job_finished = QtCore.Signal(str, bool, str)  # path, success, message
    queue_finished = QtCore.Signal()

    def __init__(self, pipeline: Converter, pool: Optional[QtCore.QThreadPool] = None) -> None:
        super().__init__()
        self.pipeline = pipeline
        self.pool = pool or QtCore.QThreadPool.globalInstance()
        self._queue: Deque[str] = deque()
        self._draining = False
        # held until finished so the runnable and its signals object stay alive
        self._current_worker: Optional[ConversionWorker] = None

    @property
    def depth(self) -> int:
        return len(self._queue)

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def pending(self) -> Tuple[str, ...]:
        return tuple(self._queue)

    def enqueue(self, path: str) -> None:
        self._queue.append(path)
        self.depth_changed.emit(len(self._queue))
        logger.info(f"add {path} to queue ({len(self._queue)} items now in queue)")
        if not self._draining:
            self._start_drain()

    def _start_drain(self) -> None:
        self._draining = True
        self.busy_changed.emit(True)
        self._dispatch_head()

    def _dispatch_head(self) -> None:
        worker = ConversionWorker(self.pipeline, self._queue[0])
        worker.signals.finished.connect(self._on_finished)
        self._current_worker = worker
        self.pool.start(worker)

    @QtCore.Slot(str, bool, str)
    def _on_finished(self, path: str, ok: bool, message: str) -> None:
        self._current_worker = None
        logger.info(f"converting {path} " + ("succeeded" if ok else f"failed ({message})"))
        self._queue.popleft()
        self.depth_changed.emit(len(self._queue))
        logger.info(f"removed {path} from queue ({len(self._queue)} items now in queue)")
        self.job_finished.emit(path, ok, message)

        if self._queue:
            self._dispatch_head()
            return
        self._draining = False
        self.busy_changed.emit(False)
        self.queue_finished.emit()
