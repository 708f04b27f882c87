"""Shared fixtures for show_notes tests.

Constants, factories and fake providers live in ``helpers.py``.
"""

import os

# Keep .env files out of test runs
os.environ.setdefault("TESTING", "1")

import pytest  # noqa: E402

from helpers import create_test_config  # noqa: E402


@pytest.fixture
def test_config(tmp_path):
    """Config writing into a temporary directory with an in-memory store."""
    return create_test_config(output_dir=str(tmp_path / "content"))


@pytest.fixture(autouse=True)
def silent_progress():
    """Reset the progress factory so tqdm never draws during tests."""
    from show_notes import progress

    progress.set_progress_factory(None)
    yield
    progress.set_progress_factory(None)
