"""
Pytest configuration and shared fixtures.
"""

import pytest

from beamerdown.config.settings import AppSettings
from beamerdown.models import RunContext


@pytest.fixture
def settings():
    """Settings with defaults only (no environment or files consulted)"""
    return AppSettings.model_construct()


@pytest.fixture
def context(settings, tmp_path):
    """Fresh non-poster run context working in a temporary directory"""
    return RunContext.context_create(posterMode=False, basePath=tmp_path, settings=settings)


@pytest.fixture
def poster_context(settings, tmp_path):
    """Fresh poster-mode run context"""
    return RunContext.context_create(posterMode=True, basePath=tmp_path, settings=settings)
