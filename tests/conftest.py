"""Shared fixtures: isolated evaluation contexts for each test."""
import pytest

from primer_thermo.context import create_context


@pytest.fixture
def context():
    """Fresh context on the revised parameter set with empty caches."""
    return create_context(revised=True)


@pytest.fixture
def legacy_context():
    """Fresh context on the legacy parameter set with empty caches."""
    return create_context(revised=False)
