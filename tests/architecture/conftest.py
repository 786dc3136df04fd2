"""Architecture test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from pytestarch import EvaluableArchitecture, LayeredArchitecture, get_evaluable_architecture

# tests/architecture/conftest.py -> tests/ -> project root
_TESTS_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _TESTS_DIR.parent
_PACKAGE_DIR = _PROJECT_ROOT / "src" / "settlement_performer"


@pytest.fixture(scope="session")
def evaluable() -> EvaluableArchitecture:
    """Build the evaluable architecture graph for settlement_performer.

    Uses the package as both root and module path so module names are
    clean (e.g. 'settlement_performer.routers.tasks').
    """
    return get_evaluable_architecture(str(_PACKAGE_DIR), str(_PACKAGE_DIR))


@pytest.fixture(scope="session")
def layered_arch() -> LayeredArchitecture:
    """Define the performer's layered architecture.

    Layers (top to bottom):
        routers   - HTTP transport for the task worker
        core      - App state, lifespan, middleware, exception handlers
        services  - Envelope codec, settlement handlers, task worker
    """
    return (
        LayeredArchitecture()
        .layer("routers")
        .containing_modules(["settlement_performer.routers"])
        .layer("core")
        .containing_modules(["settlement_performer.core"])
        .layer("services")
        .containing_modules(["settlement_performer.services"])
    )
