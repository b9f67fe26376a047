from __future__ import annotations

import logging
import sys
from PySide6 import QtWidgets
from pathlib import Path
import sys as _sys

# Support running as `python -m recorder_converter.main` and `python recorder_converter/main.py`
if __package__ in (None, ""):
    _this_dir = Path(__file__).resolve().parent
    _parent = _this_dir.parent
    if str(_parent) not in _sys.path:
        _sys.path.insert(0, str(_parent))
    from recorder_converter.core.config import SettingsStore  # type: ignore
    from recorder_converter.core.errors import EngineNotFoundError  # type: ignore
    from recorder_converter.core.ffmpeg import FFmpeg, which_ffmpeg  # type: ignore
    from recorder_converter.core.logging_setup import QtLogHandler, setup_logging  # type: ignore
    from recorder_converter.core.pipeline import ConversionPipeline  # type: ignore
    from recorder_converter.core.workers import ConversionQueue  # type: ignore
    from recorder_converter.ui.main_window import MainWindow  # type: ignore
else:
    from .core.config import SettingsStore
    from .core.errors import EngineNotFoundError
    from .core.ffmpeg import FFmpeg, which_ffmpeg
    from .core.logging_setup import QtLogHandler, setup_logging
    from .core.pipeline import ConversionPipeline
    from .core.workers import ConversionQueue
    from .ui.main_window import MainWindow

logger = logging.getLogger("recorder_converter")


def _log_unhandled(exc_type, exc, tb) -> None:
    logger.error("main: ERROR: unhandled exception", exc_info=(exc_type, exc, tb))


def main() -> int:
    """Entry point to start the Qt application."""
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("Recorder Converter")
    app.setOrganizationName("RecorderConverter")

    setup_logging()
    sys.excepthook = _log_unhandled
    logger.info("main: starting up")

    store = SettingsStore()
    settings = store.load()

    try:
        ffmpeg_path = which_ffmpeg(settings.ffmpeg_path)
    except EngineNotFoundError as e:
        logger.error(f"main: ERROR: {e}")
        QtWidgets.QMessageBox.critical(None, "FFmpeg not found", str(e))
        return 1

    ffmpeg = FFmpeg(ffmpeg_path, log=logger.info)
    queue = ConversionQueue(ConversionPipeline(ffmpeg))

    log_handler = QtLogHandler()
    logging.getLogger().addHandler(log_handler)

    window = MainWindow(queue, store, settings, log_handler)
    window.resize(320, 360)
    window.show()
    logger.info("main: UI ready")
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
