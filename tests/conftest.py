"""Shared pytest fixtures for diwire-jobs tests."""

from collections.abc import Iterator

import pytest
from diwire import Container

from diwire_jobs import activator_context


@pytest.fixture()
def container() -> Container:
    """Container with autoregistration enabled."""
    return Container()


@pytest.fixture()
def strict_container() -> Container:
    """Container where every job must be registered explicitly."""
    return Container(
        autoregister_concrete_types=False,
        autoregister_dependencies=False,
    )


@pytest.fixture(autouse=True)
def _reset_activator_context() -> Iterator[None]:
    """Keep the process-global activator binding isolated between tests."""
    activator_context.reset()
    yield
    activator_context.reset()
