from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from feature_status.infra import config_loader

# Property tests build pydantic models per example; keep them off the clock.
settings.register_profile(
    "feature_status_stable",
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)

settings.load_profile("feature_status_stable")


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    config_loader.reset_config_cache()
    yield
    config_loader.reset_config_cache()
