from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

SOURCE_SUFFIX = ".mov"
TARGET_SUFFIX = ".m4v"


@dataclass(frozen=True)
class ConversionPaths:
    """Files touched while converting a single source recording."""

    source: Path
    audio_raw: Path
    audio_final: Path
    video_final: Path
    output: Path

    @classmethod
    def for_source(cls, source: str | Path) -> "ConversionPaths":
        name = str(source)
        base = name[: -len(SOURCE_SUFFIX)] if name.endswith(SOURCE_SUFFIX) else name
        return cls(
            source=Path(name),
            audio_raw=Path(f"{base}-tmp-audio.wav"),
            audio_final=Path(f"{base}-tmp-audio.m4a"),
            video_final=Path(f"{base}-tmp-video.m4v"),
            output=Path(f"{base}{TARGET_SUFFIX}"),
        )
