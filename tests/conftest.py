"""Test fixtures for machineimages tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from machineimages.models.domain.machineimage import MachineImage

from .support.data import make_image, read_input_yaml


@pytest.fixture
def tmp_root() -> Iterator[Path]:
    with TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MACHINEIMAGES_CONFIG_FILE", raising=False)
    monkeypatch.delenv("MACHINEIMAGES_OUTPUT_FORMAT", raising=False)
    monkeypatch.delenv("MACHINEIMAGES_DEBUG", raising=False)
    monkeypatch.delenv("MACHINEIMAGES_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MACHINEIMAGES_ALERT_HOOK", raising=False)


@pytest.fixture
def provider_images() -> list[MachineImage]:
    """Global provider configuration for the standard test catalogs."""
    return [
        make_image(
            "GardenLinux",
            {"version": "1.0", "image": "gl-1.0-global"},
            {"version": "2.0", "image": "gl-2.0-global"},
        ),
        make_image("Ubuntu", {"version": "1.0", "arch": "amd64"}),
    ]


@pytest.fixture
def request_data() -> dict:
    """Raw contents of the standard request document."""
    return read_input_yaml("request.yaml")
