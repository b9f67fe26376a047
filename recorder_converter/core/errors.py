from __future__ import annotations

from typing import Optional, Sequence


class ConverterError(Exception):
    """Base class for conversion failures."""


class EngineExecutionError(ConverterError):
    """An ffmpeg invocation exited non-zero or could not be started."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class FilesystemError(ConverterError):
    """An intermediate artifact could not be removed."""


class EngineNotFoundError(ConverterError, FileNotFoundError):
    """No runnable ffmpeg executable could be located."""
