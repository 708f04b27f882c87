"""Stage 2: turn any input into a 16 kHz mono 16-bit PCM WAV file."""

from __future__ import annotations

import logging
import os
from typing import Optional

from ...exceptions import ExternalCallError, UnsupportedInputError
from ...filesystem import rename_aside, WAV_EXTENSION
from ...utils.process import run_command
from ...utils.retry import retry_with_exponential_backoff, RetryPolicy

logger = logging.getLogger(__name__)

SUPPORTED_MEDIA_TYPES = frozenset(
    ["wav", "mp3", "m4a", "aac", "ogg", "flac", "mp4", "mkv", "avi", "mov", "webm"]
)
# ffprobe demuxer names that differ from the file type they identify
FFPROBE_FORMAT_ALIASES = {"matroska": "mkv", "3gp": "mp4", "3g2": "mp4"}
SAMPLE_RATE = "16000"
CHANNELS = "1"


def _ytdlp_download_args(url: str, output_path: str) -> list[str]:
    return [
        "yt-dlp",
        "--no-warnings",
        "--restrict-filenames",
        "--extract-audio",
        "--audio-format",
        "wav",
        "--postprocessor-args",
        f"ffmpeg:-ar {SAMPLE_RATE} -ac {CHANNELS}",
        "--no-playlist",
        "-o",
        output_path,
        url,
    ]


def download_audio(url: str, output_path: str, policy: RetryPolicy) -> str:
    """Download and extract a remote source's audio as canonical WAV.

    Raises:
        ExternalCallError: If every download attempt failed
    """
    retry_with_exponential_backoff(
        lambda: run_command(_ytdlp_download_args(url, output_path)),
        policy,
        description=f"yt-dlp download {url}",
    )
    return output_path


def detect_media_type(path: str) -> Optional[str]:
    """Return the file type ffprobe detects for ``path``, or None if it finds none.

    ffprobe reports a comma-separated list of demuxer names (for example
    ``mov,mp4,m4a,3gp,3g2,mj2``). The file's own extension wins when it is in
    that list; otherwise the first supported name is returned.
    """
    try:
        output = run_command(
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=format_name",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                path,
            ]
        )
    except ExternalCallError as exc:
        logger.debug("ffprobe could not identify %s: %s", path, exc)
        return None

    names = [n.strip().lower() for n in output.strip().split(",") if n.strip()]
    names = [FFPROBE_FORMAT_ALIASES.get(n, n) for n in names]
    if not names:
        return None
    extension = os.path.splitext(path)[1].lstrip(".").lower()
    if extension in names:
        return extension
    return next((n for n in names if n in SUPPORTED_MEDIA_TYPES), names[0])


def transcode_local_file(path: str, output_path: str) -> str:
    """Validate a local media file and transcode it to canonical WAV.

    Raises:
        UnsupportedInputError: If the file is missing, unidentifiable, or not allowed
        ExternalCallError: If ffmpeg fails
    """
    if not os.path.isfile(path):
        raise UnsupportedInputError(f"Input file not found: {path}", path=path)

    detected = detect_media_type(path)
    if detected is None:
        raise UnsupportedInputError("Unable to determine file type", path=path)
    if detected not in SUPPORTED_MEDIA_TYPES:
        raise UnsupportedInputError(
            f"Unsupported file type: {detected}",
            path=path,
            detected_type=detected,
            suggestion=f"Supported types: {', '.join(sorted(SUPPORTED_MEDIA_TYPES))}",
        )

    logger.debug("Transcoding %s (%s) to %s", path, detected, output_path)
    run_command(
        [
            "ffmpeg",
            "-i",
            path,
            "-ar",
            SAMPLE_RATE,
            "-ac",
            CHANNELS,
            "-c:a",
            "pcm_s16le",
            output_path,
        ]
    )
    return output_path


def acquire_audio(source: str, source_kind: str, base_path: str, policy: RetryPolicy) -> str:
    """Produce ``<base_path>.wav`` from a remote URL or a local file.

    An existing file at the target path is renamed aside first so neither
    tool stalls on an overwrite.

    Returns:
        Path of the canonical WAV file
    """
    output_path = f"{base_path}{WAV_EXTENSION}"
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    rename_aside(output_path)
    if source_kind == "file":
        return transcode_local_file(source, output_path)
    return download_audio(source, output_path, policy)
