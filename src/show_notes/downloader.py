"""HTTP session management and fetch helpers for show_notes."""

from __future__ import annotations

import atexit
import logging
import threading
import time
from typing import cast, Dict, List, Optional

import requests
from requests.utils import requote_uri

from .utils.retry import DEFAULT_RETRY_POLICY, retry_with_exponential_backoff, RetryPolicy

logger = logging.getLogger(__name__)

RSS_ACCEPT_HEADER = "application/rss+xml, application/xml;q=0.9, */*;q=0.8"
FEED_CHUNK_SIZE = 64 * 1024

_urllib3_logs_suppressed = False
_THREAD_LOCAL = threading.local()
_SESSION_REGISTRY: List[requests.Session] = []
_SESSION_REGISTRY_LOCK = threading.Lock()


def _suppress_urllib3_debug_logs() -> None:
    """Suppress verbose urllib3 debug logs when root logger is DEBUG."""
    global _urllib3_logs_suppressed
    if _urllib3_logs_suppressed:
        return

    root_logger = logging.getLogger()
    root_level = root_logger.level if root_logger.level else logging.INFO
    if root_level <= logging.DEBUG:
        for logger_name in ("urllib3", "urllib3.connectionpool", "urllib3.connection"):
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    _urllib3_logs_suppressed = True


def normalize_url(url: str) -> str:
    """Normalize URLs while preserving already-encoded segments."""
    normalized = requote_uri(url)
    if normalized != url:
        logger.debug("Normalized URL %s -> %s", url, normalized)
    return cast(str, normalized)


def get_session() -> requests.Session:
    """Return the HTTP session for the current thread.

    Sessions do not retry on their own; callers wrap requests in
    ``retry_with_exponential_backoff`` so every network call shares one
    retry discipline.
    """
    _suppress_urllib3_debug_logs()

    session = getattr(_THREAD_LOCAL, "session", None)
    if session is None:
        session = requests.Session()
        setattr(_THREAD_LOCAL, "session", session)
        with _SESSION_REGISTRY_LOCK:
            _SESSION_REGISTRY.append(session)
        logger.debug("Created new thread-local HTTP session %s", hex(id(session)))
    return session


def _close_all_sessions() -> None:
    with _SESSION_REGISTRY_LOCK:
        for session in _SESSION_REGISTRY:
            try:
                session.close()
            # Best-effort cleanup; ignore shutdown errors
            except Exception:  # pragma: no cover  # nosec B110
                pass
        _SESSION_REGISTRY.clear()


atexit.register(_close_all_sessions)


def fetch_url(
    url: str,
    user_agent: str,
    timeout: float,
    *,
    headers: Optional[Dict[str, str]] = None,
    stream: bool = False,
) -> requests.Response:
    """Execute one HTTP GET request.

    Args:
        url: URL to fetch
        user_agent: User-Agent header value
        timeout: Timeout in seconds for this single attempt
        headers: Extra request headers
        stream: Defer reading the body so the caller can consume it in chunks

    Returns:
        The successful response

    Raises:
        requests.RequestException: On connection errors, timeouts, or non-2xx status
    """
    normalized_url = normalize_url(url)
    request_headers = {"User-Agent": user_agent}
    if headers:
        request_headers.update(headers)
    session = get_session()
    logger.debug("GET %s (timeout=%ss)", normalized_url, timeout)
    resp = session.get(normalized_url, headers=request_headers, timeout=timeout, stream=stream)
    resp.raise_for_status()
    logger.debug(
        "HTTP request to %s succeeded with status %s and Content-Length=%s",
        normalized_url,
        resp.status_code,
        resp.headers.get("Content-Length"),
    )
    return resp


def fetch_feed_bytes(
    url: str,
    user_agent: str,
    timeout: float,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
) -> bytes:
    """Fetch an RSS feed body, retrying each timed-out or failed attempt.

    ``timeout`` bounds the whole attempt, not only each connect or read: the
    body is streamed and the attempt is abandoned once ``timeout`` seconds
    have passed since the request started. An abandoned attempt counts as a
    failure and is retried under ``policy``.

    Raises:
        ExternalCallError: When every attempt failed
    """

    def _attempt() -> bytes:
        deadline = time.monotonic() + timeout
        resp = fetch_url(
            url, user_agent, timeout, headers={"Accept": RSS_ACCEPT_HEADER}, stream=True
        )
        try:
            chunks = []
            for chunk in resp.iter_content(chunk_size=FEED_CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise requests.Timeout(f"Feed download exceeded {timeout}s: {url}")
                chunks.append(chunk)
            return b"".join(chunks)
        finally:
            resp.close()

    return retry_with_exponential_backoff(
        _attempt,
        policy,
        description=f"Fetch RSS feed {url}",
    )
