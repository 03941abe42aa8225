# tests/conftest.py
"""Shared test fixtures and Hypothesis configuration.

Fixtures:
- registry: SchemaRegistry loaded with the test catalog (tests/helpers/catalog.py)
- validator: FlowValidator over that registry with default settings
- index_for: builds a FlowIndex for a flow against the test catalog

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os
from collections.abc import Callable

import pytest
from hypothesis import Phase, Verbosity, settings

from flowguard.contracts import Flow
from flowguard.core.graph import FlowIndex
from flowguard.core.registry import SchemaRegistry
from flowguard.validation import FlowValidator
from tests.helpers.catalog import catalog_registry

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Catalog fixtures
# =============================================================================


@pytest.fixture
def registry() -> SchemaRegistry:
    return catalog_registry()


@pytest.fixture
def validator(registry: SchemaRegistry) -> FlowValidator:
    return FlowValidator(registry)


@pytest.fixture
def index_for(registry: SchemaRegistry) -> Callable[[Flow], FlowIndex]:
    def _build(flow: Flow) -> FlowIndex:
        return FlowIndex.build(flow, registry)

    return _build
