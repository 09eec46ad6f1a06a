"""
Shared test fixtures for minquote tests.
"""

import shutil

import pytest

from minquote.core.config import Config, configure_logging


@pytest.fixture(autouse=True)
def reset_logging():
    """Turn logging back off after each test."""
    yield
    configure_logging(Config())


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no user, project or env config visible. Returns the cwd."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.setattr("minquote.core.config.USER_CONFIG", tmp_path / "nonexistent")
    monkeypatch.delenv("MINQUOTE_CONFIG", raising=False)
    monkeypatch.chdir(cwd)
    return cwd


@pytest.fixture
def bash():
    """Path to bash, or skip."""
    path = shutil.which("bash")
    if path is None:
        pytest.skip("bash not available")
    return path


@pytest.fixture
def sh():
    """Path to a POSIX sh, or skip."""
    path = shutil.which("sh")
    if path is None:
        pytest.skip("sh not available")
    return path
