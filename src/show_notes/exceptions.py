"""Custom exceptions for show_notes.

This module defines structured exceptions for option validation, provider
resolution, external tool and API calls, input handling, and persistence.
Using typed exceptions improves:
- Error messages with actionable suggestions
- Test assertions on specific failure causes
- Per-item error reporting in batch runs

Exception Hierarchy:
    ShowNotesError (base)
    ├── ValidationError - Bad or conflicting options (fatal for the run)
    ├── ProviderResolutionError - Unknown service, missing API key, unknown model
    ├── ExternalCallError - Process or network failure after all retry attempts
    ├── UnsupportedInputError - Unrecognized or disallowed input file type
    ├── PersistenceError - Show note store write failure
    └── StageError - A pipeline stage failed for one item
"""

from typing import Optional


class ShowNotesError(Exception):
    """Base exception for all show_notes errors.

    Attributes:
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
    """

    def __init__(self, message: str, suggestion: Optional[str] = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        parts = [self.message]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " ".join(parts)


class ValidationError(ShowNotesError):
    """Raised when processing options are invalid or conflict with each other.

    Example:
        >>> raise ValidationError(
        ...     "The --last option cannot be used with --skip or --order.",
        ...     option_name="last",
        ... )
    """

    def __init__(
        self,
        message: str,
        option_name: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.option_name = option_name
        super().__init__(message=message, suggestion=suggestion)


class ProviderResolutionError(ShowNotesError):
    """Raised when a transcription or LLM service cannot be resolved.

    Common causes:
    - Unknown service name
    - Missing API key for a hosted service
    - Model id not present in the service's model list

    Example:
        >>> raise ProviderResolutionError(
        ...     "Missing OPENAI_API_KEY for OpenAI ChatGPT",
        ...     service="chatgpt",
        ...     suggestion="Set OPENAI_API_KEY environment variable",
        ... )
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        model_id: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.service = service
        self.model_id = model_id
        if service and service not in message:
            message = f"[{service}] {message}"
        super().__init__(message=message, suggestion=suggestion)


class ExternalCallError(ShowNotesError):
    """Raised when an external process or network call fails.

    When raised by the retry executor, ``attempts`` holds the number of
    attempts made and ``__cause__`` is the last underlying error.

    Example:
        >>> raise ExternalCallError(
        ...     "yt-dlp exited with status 1",
        ...     target="yt-dlp",
        ...     attempts=7,
        ... )
    """

    def __init__(
        self,
        message: str,
        target: Optional[str] = None,
        attempts: Optional[int] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.target = target
        self.attempts = attempts
        if attempts is not None and "attempt" not in message:
            message = f"{message} (after {attempts} attempts)"
        super().__init__(message=message, suggestion=suggestion)


class UnsupportedInputError(ShowNotesError):
    """Raised when a local input file has an unrecognized or disallowed type."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        detected_type: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.path = path
        self.detected_type = detected_type
        super().__init__(message=message, suggestion=suggestion)


class PersistenceError(ShowNotesError):
    """Raised when a show note record cannot be written to or read from the store."""


class StageError(ShowNotesError):
    """Raised when a pipeline stage fails for one item.

    The original error is available as ``__cause__``.

    Attributes:
        stage: Name of the failing stage (e.g., "transcribe")
        item: Identifier of the item being processed (URL or path)
    """

    def __init__(self, stage: str, item: str, reason: str) -> None:
        self.stage = stage
        self.item = item
        self.reason = reason
        super().__init__(message=f"Stage '{stage}' failed for {item}: {reason}")
