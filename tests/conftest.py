"""Root-level pytest fixtures for the kymotools test suite.

Provides shared configuration fixtures and small synthetic volumes.
Tests should build configs through these fixtures instead of raw dicts.
"""

import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest

from kymotools.schemas import ParamConfig, UserConfig, resolve_config
from tests.helpers.fake_volume import (
    make_diagonal_volume,
    make_fake_volume,
    make_ramp_volume,
    make_random_volume,
)


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Examples
    --------
    >>> def test_custom_width(make_config):
    ...     config = make_config(WIDTH=5)
    ...     assert config.kymograph.width == 5
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


# =============================================================================
# Volume Fixtures
# =============================================================================

@pytest.fixture
def zero_volume():
    """4-frame, 20x20, single-channel uint8 volume of zeros."""
    return make_fake_volume()


@pytest.fixture
def diagonal_volume():
    """4-frame, 20x20 volume, zero except a 255 diagonal where y == x."""
    return make_diagonal_volume()


@pytest.fixture
def ramp_volume():
    """Float volume whose values encode their own (t, c, y, x) index."""
    return make_ramp_volume()


@pytest.fixture
def random_volume():
    """Seeded random float volume with two channels."""
    return make_random_volume()


@pytest.fixture
def constant_plane():
    return np.full((9, 11), 42, dtype=np.uint16)
