from __future__ import annotations

import json
import stat
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional

import pytest
from PySide6 import QtCore

_ENGINE_TEMPLATE = """#!{python}
import json
import sys
import time
from pathlib import Path

TRACE = Path({trace!r})
FAIL_ON = {fail_on!r}
STDERR = {stderr!r}
DELAY = {delay!r}
CREATE_OUTPUTS = {create_outputs!r}

with TRACE.open("a", encoding="utf-8") as fp:
    fp.write(json.dumps(sys.argv[1:]) + "\\n")
count = len(TRACE.read_text(encoding="utf-8").splitlines())
if DELAY:
    time.sleep(DELAY)
if FAIL_ON is not None and count == FAIL_ON:
    sys.stderr.write(STDERR)
    sys.exit(1)
if CREATE_OUTPUTS:
    Path(sys.argv[-1]).write_bytes(b"fake media")
"""


class FakeEngine:
    """Executable stand-in for ffmpeg that records every argv it receives."""

    def __init__(self, path: Path, trace: Path) -> None:
        self.path = str(path)
        self.trace = trace

    def calls(self) -> List[List[str]]:
        if not self.trace.exists():
            return []
        return [json.loads(line) for line in self.trace.read_text(encoding="utf-8").splitlines()]


@pytest.fixture(scope="session")
def qapp():
    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication([])
    yield app


@pytest.fixture
def wait_until(qapp) -> Callable[..., bool]:
    def _wait(predicate: Callable[[], bool], timeout: float = 10.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            QtCore.QCoreApplication.processEvents(QtCore.QEventLoop.AllEvents, 50)
            if predicate():
                return True
            time.sleep(0.005)
        QtCore.QCoreApplication.processEvents()
        return predicate()

    return _wait


@pytest.fixture
def make_engine(tmp_path: Path) -> Callable[..., FakeEngine]:
    if sys.platform == "win32":
        pytest.skip("fake engine relies on a shebang script")

    counter = {"n": 0}

    def _make(
        fail_on: Optional[int] = None,
        stderr: str = "boom",
        delay: float = 0.0,
        create_outputs: bool = True,
    ) -> FakeEngine:
        counter["n"] += 1
        engine_dir = tmp_path / f"engine{counter['n']}"
        engine_dir.mkdir()
        trace = engine_dir / "trace.jsonl"
        script = engine_dir / "ffmpeg"
        script.write_text(
            _ENGINE_TEMPLATE.format(
                python=sys.executable,
                trace=str(trace),
                fail_on=fail_on,
                stderr=stderr,
                delay=delay,
                create_outputs=create_outputs,
            ),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return FakeEngine(script, trace)

    return _make


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    d = tmp_path / "media"
    d.mkdir()
    return d
