"""Allow ``python -m show_notes``."""

from .cli import main

raise SystemExit(main())
