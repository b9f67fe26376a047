from __future__ import annotations

import os
import re
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import EngineExecutionError, EngineNotFoundError

LogCallback = Callable[[str], None]

_WHITESPACE = re.compile(r"\s")

FFMPEG_EXE = "ffmpeg.exe" if sys.platform == "win32" else "ffmpeg"


def _normalize_exe(path: str | None, name: str) -> Optional[str]:
    if not path:
        return None
    p = Path(path)
    if p.is_dir():
        cand = p / name
        return str(cand) if cand.exists() else None
    return str(p) if p.exists() else None


def which_ffmpeg(explicit: str | None = None) -> str:
    """Resolve a runnable ffmpeg executable once at startup."""
    # 1) Explicit path from settings
    cand = _normalize_exe(explicit, FFMPEG_EXE)
    if cand:
        return cand
    # 2) Environment override
    cand = _normalize_exe(os.environ.get("FFMPEG_PATH"), FFMPEG_EXE)
    if cand:
        return cand
    # 3) PATH
    exe = shutil.which("ffmpeg")
    if exe:
        return exe
    # 4) Bundled next to the interpreter / frozen executable
    here = Path(sys.executable).parent
    for rel in ["ffmpeg", "ffmpeg/bin", "bin", "ffmpeg.d"]:
        p = _normalize_exe(str(here / rel), FFMPEG_EXE)
        if p:
            return p
    raise EngineNotFoundError("ffmpeg not found. Set FFMPEG_PATH env or install FFmpeg.")


def quote_arg(arg: str) -> str:
    """Render one argument for display; never used for execution."""
    if _WHITESPACE.search(arg):
        return '"' + arg.replace('"', '\\"') + '"'
    return arg


class FFmpeg:
    """Runs one ffmpeg process per call with an exact argument vector."""

    def __init__(self, ffmpeg: str, log: Optional[LogCallback] = None) -> None:
        self.ffmpeg = ffmpeg
        self.log: LogCallback = log or (lambda msg: None)

    def render_command(self, args: Sequence[str]) -> str:
        return " ".join([self.ffmpeg, *(quote_arg(a) for a in args)])

    def exec(self, *args: str) -> subprocess.CompletedProcess:
        argv: List[str] = [self.ffmpeg, *args]
        self.log(f"executing: {self.render_command(args)}")
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise EngineExecutionError(f"failed to start ffmpeg: {e}", command=argv) from e

        if proc.returncode != 0:
            detail = proc.stderr if (proc.stderr or "").strip() else (proc.stdout or "")
            raise EngineExecutionError(
                detail if detail.strip() else f"ffmpeg exited with code {proc.returncode}",
                command=argv,
                returncode=proc.returncode,
                stdout=proc.stdout or "",
                stderr=proc.stderr or "",
            )
        return proc
