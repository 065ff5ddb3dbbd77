"""Shared fixtures for the VirusTotal checker tests."""

import io
import json
from unittest.mock import MagicMock

import pytest
from rich.console import Console

import manifest
import vt_api
import vt_scanner


@pytest.fixture
def output(monkeypatch):
    """Capture console output of the scanner and manifest modules as plain text."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=400, color_system=None)
    monkeypatch.setattr(vt_scanner, "console", console)
    monkeypatch.setattr(manifest, "console", console)
    monkeypatch.setattr(vt_api, "console", console)
    return buffer


@pytest.fixture
def client():
    """VTClient double; every method must be configured by the test."""
    return MagicMock(spec=vt_api.VTClient)


@pytest.fixture
def buckets_dir(tmp_path):
    path = tmp_path / "buckets"
    path.mkdir()
    return path


@pytest.fixture
def write_manifest(buckets_dir):
    """Write <buckets>/<bucket>/bucket/<app>.json and return its path."""

    def _write(app, data, bucket="main", nested=True):
        bucket_dir = buckets_dir / bucket
        if nested:
            bucket_dir = bucket_dir / "bucket"
        bucket_dir.mkdir(parents=True, exist_ok=True)
        path = bucket_dir / f"{app}.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
