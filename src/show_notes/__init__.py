"""Show Notes - Turn videos, audio files and podcast feeds into show notes.

Each item is run through five ordered stages: front matter generation, audio
acquisition (converted to 16kHz mono WAV), transcription, prompt selection and
an optional LLM call. The result is written as markdown and stored as a show
note record.

Programmatic API Example:
    >>> import show_notes
    >>>
    >>> cfg = show_notes.Config(output_dir="./content")
    >>> options = show_notes.ProcessingOptions(
    ...     rss=["https://example.com/feed.xml"], last=2, chatgpt=True
    ... )
    >>> count, summary = show_notes.run_pipeline(cfg, options)
    >>> print(summary)

CLI Usage:
    $ show-notes --video https://www.youtube.com/watch?v=abc --claude
    $ show-notes --rss https://example.com/feed.xml --lastDays 7 --deepgram
    $ python -m show_notes --config show-notes.yaml
"""

from __future__ import annotations

__version__ = "1.0.0"

from .config import Config, load_config_file  # noqa: E402
from .options import ProcessingOptions  # noqa: E402
from .workflow import run_pipeline  # noqa: E402

__all__ = [
    "Config",
    "ProcessingOptions",
    "load_config_file",
    "run_pipeline",
    "__version__",
]
