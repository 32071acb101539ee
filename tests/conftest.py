"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides an isolated icon tree and index service per test.
"""

import os

os.environ.setdefault("D2_ICONS_ENVIRONMENT", "testing")

from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from d2_icon_resolver.config.settings import Settings
from d2_icon_resolver.core.icons.index import IconIndexService
from d2_icon_resolver.core.icons.resolver import IconResolver
from d2_icon_resolver.core.icons.rewriter import IconRewriter

from tests.utils.helpers import SAMPLE_ICON_PATHS, build_icon_tree


class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    log_level: str = "DEBUG"
    d2_binary: str = "d2"
    d2_timeout: float = 5.0


@pytest.fixture
def test_settings(tmp_path: Path) -> TestSettings:
    """Test settings pointing at a per-test icon directory."""
    return TestSettings(icons_dir=tmp_path / "icons")


@pytest.fixture
def override_settings(test_settings: TestSettings) -> Generator[TestSettings, None, None]:
    """Override application settings for modules that read them at construction."""
    with patch("d2_icon_resolver.core.compiler.d2_cli.get_settings", return_value=test_settings):
        yield test_settings


@pytest.fixture
def icons_dir(tmp_path: Path) -> Path:
    """Icon tree populated with a sample of the real catalog layout."""
    return build_icon_tree(tmp_path / "icons", SAMPLE_ICON_PATHS)


@pytest.fixture
def icon_service(icons_dir: Path) -> IconIndexService:
    """Fresh, unbuilt index service over the sample tree."""
    return IconIndexService(root=icons_dir)


@pytest.fixture
def resolver(icon_service: IconIndexService) -> IconResolver:
    """Resolver bound to the sample tree."""
    return IconResolver(icon_service)


@pytest.fixture
def rewriter(resolver: IconResolver) -> IconRewriter:
    """Rewriter bound to the sample tree."""
    return IconRewriter(resolver)
