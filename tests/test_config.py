"""Tests for settings normalization and the persistence factory."""
import logging

import pytest

from sheetsync.config import Settings, settings
from sheetsync.persistence import get_persistence
from sheetsync.persistence.http_impl import HttpSheetPersistence
from sheetsync.persistence.local_impl import LocalSheetPersistence


@pytest.mark.parametrize("raw,expected", [
    ("debug", "DEBUG"),
    (" warning ", "WARNING"),
    ("verbose", "INFO"),
    ("", "INFO"),
])
def test_log_level_normalized(raw, expected):
    """LOG_LEVEL is upper-cased; unknown values fall back to INFO."""
    s = Settings(log_level=raw)
    assert s.log_level == expected
    assert s.log_level_number == getattr(logging, expected)


def test_snapshot_key_default():
    """Default snapshot key."""
    assert Settings().snapshot_key == "codolio-sheet-data"


def test_factory_picks_http():
    """PERSISTENCE_BACKEND=http (any case) gives the HTTP client."""
    client = get_persistence("HTTP")
    assert isinstance(client, HttpSheetPersistence)


@pytest.mark.parametrize("backend", ["local", "carrier-pigeon"])
def test_factory_falls_back_to_local(tmp_path, monkeypatch, backend):
    """Local and unknown backends give the in-process service."""
    monkeypatch.setattr(settings, "snapshot_database_url", f"sqlite:///{tmp_path / 'snap.db'}")
    service = get_persistence(backend)
    assert isinstance(service, LocalSheetPersistence)


def test_debug_forces_debug_logging():
    """DEBUG=true wins over LOG_LEVEL."""
    assert Settings(log_level="error", debug=True).log_level_number == logging.DEBUG
    assert Settings(log_level="error", debug=False).log_level_number == logging.ERROR
