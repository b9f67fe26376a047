from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .errors import ConverterError, FilesystemError
from .ffmpeg import FFmpeg
from .models import ConversionPaths

logger = logging.getLogger(__name__)

# Fixed encoding policy
AUDIO_RAW_CODEC = "pcm_f32le"
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "96k"
VIDEO_CODEC = "libx264"
VIDEO_BITRATE = "5000k"
PIXEL_FORMAT = "yuv420p"


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except OSError as e:
        raise FilesystemError(f"cannot remove {path}: {e}") from e


class ConversionPipeline:
    """Converts one MOV recording into an M4V through four ffmpeg runs.

    Audio is decoded to float PCM before the AAC encode. Video goes to
    H.264, 8-bit 4:2:0. The final remux copies both streams and stops at
    the shorter one.

    A failing stage aborts the remaining ones. Intermediates from stages
    that already completed are left on disk in that case.
    """

    def __init__(self, ffmpeg: FFmpeg) -> None:
        self.ffmpeg = ffmpeg

    def convert(self, source: str | Path) -> Optional[str]:
        """Return None on success, otherwise the error text of the failing step."""
        paths = ConversionPaths.for_source(source)
        try:
            self._run(paths)
        except ConverterError as e:
            result = str(e)
            logger.info(f"error converting file: {result.rstrip()}")
            return result
        return None

    def _run(self, paths: ConversionPaths) -> None:
        src = str(paths.source)

        # 1) extract audio as uncompressed float PCM
        self.ffmpeg.exec(
            "-v", "error", "-i", src,
            "-vn", "-c:a", AUDIO_RAW_CODEC,
            "-y", str(paths.audio_raw),
        )

        # 2) encode audio to AAC
        self.ffmpeg.exec(
            "-v", "error", "-i", str(paths.audio_raw),
            "-c:a", AUDIO_CODEC, "-b:a", AUDIO_BITRATE,
            "-y", str(paths.audio_final),
        )
        _remove(paths.audio_raw)

        # 3) encode video to H.264
        self.ffmpeg.exec(
            "-v", "error", "-i", src,
            "-an", "-c:v", VIDEO_CODEC, "-b:v", VIDEO_BITRATE, "-pix_fmt", PIXEL_FORMAT,
            "-y", str(paths.video_final),
        )

        # 4) merge both streams without re-encoding
        self.ffmpeg.exec(
            "-v", "error",
            "-i", str(paths.video_final), "-i", str(paths.audio_final),
            "-c:v", "copy", "-c:a", "copy", "-shortest",
            "-y", str(paths.output),
        )
        _remove(paths.audio_final)
        _remove(paths.video_final)
