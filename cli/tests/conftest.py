"""
Pytest fixtures for Kyoto CLI tests.
"""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point ~ at a temp dir so tests never touch the real config."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("KYOTO_API_URL", raising=False)
    return tmp_path
