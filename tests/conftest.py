"""
Shared test configuration and fixtures.

This file contains pytest configuration that applies to all tests,
both unit and integration. Test-type-specific fixtures are defined
in their respective conftest.py files:
- tests/unit/conftest.py - Mock fixtures for unit tests
- tests/integration/conftest.py - Real app fixtures with a stubbed provider
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.factories import CONFIG_YAML

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

# Environment variables the gateway reads; cleared so the host cannot leak in
GATEWAY_ENV_VARS = (
    "DATAZAPP_API_KEY",
    "DATAZAPP_USER",
    "DATAZAPP_PASSWORD",
    "DATAZAPP_ENDPOINT_URL",
    "PROXY_API_KEY",
    "PORT",
)


@pytest.fixture(autouse=True)
def test_config_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[Path, None, None]:
    """Point CONFIG_PATH at a fresh config file and reset the settings cache."""
    from append_gateway.config import clear_settings_cache  # noqa: PLC0415

    config_path = tmp_path / "config.yaml"
    config_path.write_text(CONFIG_YAML)

    monkeypatch.setenv("CONFIG_PATH", str(config_path))
    for name in GATEWAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    clear_settings_cache()
    yield config_path
    clear_settings_cache()
