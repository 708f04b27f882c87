"""Filesystem utilities for show_notes."""

from __future__ import annotations

import logging
import os
import re
import time
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir, user_documents_dir

logger = logging.getLogger(__name__)

MAX_TITLE_CHARS = 200
WAV_EXTENSION = ".wav"
PROMPT_SUFFIX = "-prompt.md"
SHOWNOTES_SUFFIX = "-shownotes.md"
_PLATFORMDIR_APP_NAMES = ("show_notes", "show-notes")

_NON_WORD_RE = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATOR_RE = re.compile(r"[\s_]+", re.ASCII)
_HYPHEN_RUN_RE = re.compile(r"-+")


def _platformdirs_safe_roots() -> set[Path]:
    """Return resolved platformdirs locations considered safe for outputs."""
    roots: set[Path] = set()
    for app_name in _PLATFORMDIR_APP_NAMES:
        try:
            location = user_data_dir(app_name)
        except Exception:  # nosec B112 - fall back to next candidate
            continue
        if location:
            try:
                roots.add(Path(location).expanduser().resolve())
            except (OSError, RuntimeError):
                continue
    try:
        roots.add(Path(user_documents_dir()).expanduser().resolve())
    except (OSError, RuntimeError):
        pass
    return roots


_PLATFORMDIR_SAFE_ROOTS = _platformdirs_safe_roots()


def sanitize_title(title: str) -> str:
    """Turn a title into a lowercase, hyphenated, filesystem-safe base name.

    Characters other than ASCII word characters, whitespace and hyphens are
    removed; runs of whitespace and underscores become one hyphen; hyphen runs
    collapse; the result is lowercased and cut to 200 characters.

    Example:
        >>> sanitize_title("Episode 42: The Answer (Part_1)")
        'episode-42-the-answer-part-1'
    """
    cleaned = _NON_WORD_RE.sub("", title).strip()
    cleaned = _SEPARATOR_RE.sub("-", cleaned)
    cleaned = _HYPHEN_RUN_RE.sub("-", cleaned)
    return cleaned.lower()[:MAX_TITLE_CHARS]


def validate_and_normalize_output_dir(path: str) -> str:
    """Validate an output directory path and return an absolute, normalized version."""
    if not path or not path.strip():
        raise ValueError("Output directory path cannot be empty")

    path_obj = Path(path).expanduser()
    try:
        resolved = path_obj.resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid output directory path: {path} ({exc})")

    safe_roots = {Path.cwd().resolve(), Path.home().resolve(), *_PLATFORMDIR_SAFE_ROOTS}
    if not any(resolved == root or resolved.is_relative_to(root) for root in safe_roots):
        logger.warning(
            f"Output directory {resolved} is outside recommended locations (home or app data)."
        )
    return str(resolved)


def write_text_file(path: str, content: str) -> None:
    """Write text to disk, creating parent directories as needed."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(content)


def rename_aside(path: str) -> Optional[str]:
    """Move an existing file out of the way so a tool can write a fresh one.

    Returns:
        The new path of the moved file, or None if nothing existed at ``path``.
    """
    if not os.path.exists(path):
        return None
    stem, ext = os.path.splitext(path)
    target = f"{stem}-{time.strftime('%Y%m%d-%H%M%S')}{ext}"
    counter = 1
    while os.path.exists(target):
        target = f"{stem}-{time.strftime('%Y%m%d-%H%M%S')}-{counter}{ext}"
        counter += 1
    os.replace(path, target)
    logger.info("Existing file %s renamed to %s", path, target)
    return target


def remove_intermediate(path: str) -> bool:
    """Delete an intermediate file.

    A missing file is not an error. Any other failure is logged and does not
    propagate.

    Returns:
        True if the file was removed.
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug("Intermediate file %s already gone", path)
        return False
    except OSError as exc:
        logger.error(f"Failed to remove intermediate file {path}: {exc}")
        return False
    logger.debug("Removed intermediate file %s", path)
    return True


__all__ = [
    "MAX_TITLE_CHARS",
    "PROMPT_SUFFIX",
    "SHOWNOTES_SUFFIX",
    "WAV_EXTENSION",
    "remove_intermediate",
    "rename_aside",
    "sanitize_title",
    "validate_and_normalize_output_dir",
    "write_text_file",
]
