"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, canvases, contexts and sample resources.
"""

import os

os.environ.setdefault("PIXELTREE_ENVIRONMENT", "testing")
os.environ.setdefault("PIXELTREE_LOG_LEVEL", "DEBUG")

import pytest
from pathlib import Path
from typing import List

from pixeltree.config.settings import Settings, get_settings
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.core.rendering.context import RenderContext
from pixeltree.core.rendering.resources import ResourceCache

from tests.utils.data_generators import write_png
from tests.utils.mocks import DrawCall, StubResourceLoader, solid_image


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings fixture."""
    return get_settings()


@pytest.fixture
def draw_log() -> List[DrawCall]:
    """Shared log for recording components."""
    return []


@pytest.fixture
def canvas() -> Canvas:
    """Transparent 800x600 canvas."""
    return Canvas(800, 600)


@pytest.fixture
def stub_loader() -> StubResourceLoader:
    """Loader serving a red 10x10 and a wide blue 40x20 image."""
    return StubResourceLoader(
        {
            "red.png": solid_image(10, 10, (255, 0, 0, 255)),
            "wide.png": solid_image(40, 20, (0, 0, 255, 255)),
        }
    )


@pytest.fixture
def context(stub_loader: StubResourceLoader) -> RenderContext:
    """Scale 1 context backed by the stub loader."""
    return RenderContext(scale_factor=1.0, resources=ResourceCache(stub_loader))


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Directory holding a valid PNG, a corrupt file and nothing else."""
    write_png(tmp_path / "green.png", (8, 4), (0, 255, 0, 255))
    (tmp_path / "corrupt.png").write_bytes(b"definitely not an image")
    return tmp_path


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on file paths."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
