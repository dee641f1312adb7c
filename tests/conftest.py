from pathlib import Path

import pytest

from bundle_compare.bundle_analysis.utils import (
    DEFAULT_HASH_PATTERN,
    DEFAULT_HASH_PLACEHOLDER,
)
from bundle_compare.config import ConfigHelper

samples_path = Path(__file__).parent / "samples"


@pytest.fixture
def mock_configuration(mocker):
    m = mocker.patch("bundle_compare.config._get_config_instance")
    mock_config = ConfigHelper()
    m.return_value = mock_config
    our_config = {
        "setup": {"loglvl": "INFO", "sentry": {"dsn": None, "environment": None}},
        "comparison": {
            "hash_pattern": DEFAULT_HASH_PATTERN,
            "hash_placeholder": DEFAULT_HASH_PLACEHOLDER,
        },
        "comment": {
            "title": "Vite Bundle Size Comparison",
            "changeset_limit": 20,
            "details_limit": 50,
        },
    }
    mock_config.set_params(our_config)
    return mock_config


@pytest.fixture
def base_stats_path():
    return samples_path / "base_stats.json"


@pytest.fixture
def current_stats_path():
    return samples_path / "current_stats.json"
