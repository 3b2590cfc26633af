from __future__ import annotations

from typing import Any

import pytest
from diwire import Container, Scope

from diwire_jobs import (
    ActivatorContext,
    DIWireJobActivator,
    DIWireJobActivatorArgumentError,
    DIWireJobScopeDisposedError,
    JobActivator,
    JobActivatorScope,
    JobActivatorSettings,
    JobContext,
    activator_context,
    use_diwire_activator,
)


class _PlainJob:
    pass


class _JobWithArguments:
    def __init__(self, value: int) -> None:
        self.value = value


class _CountingScope(JobActivatorScope):
    def __init__(self) -> None:
        super().__init__()
        self.disposals: list[tuple[Any, Any, Any]] = []

    def _resolve(self, job_type: Any) -> Any:
        return job_type()

    def _dispose(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.disposals.append((exc_type, exc_value, traceback))


def test_default_activator_calls_job_constructor() -> None:
    job = JobActivator().activate_job(_PlainJob)

    assert isinstance(job, _PlainJob)


def test_default_activator_returns_new_instance_per_call() -> None:
    activator = JobActivator()

    assert activator.activate_job(_PlainJob) is not activator.activate_job(_PlainJob)


def test_default_activator_propagates_constructor_errors() -> None:
    with pytest.raises(TypeError):
        JobActivator().activate_job(_JobWithArguments)


@pytest.mark.asyncio
async def test_default_activator_async_path_uses_constructor() -> None:
    job = await JobActivator().aactivate_job(_PlainJob)

    assert isinstance(job, _PlainJob)


def test_default_scope_activates_and_disposes_nothing() -> None:
    activator = JobActivator()
    context = JobContext(job_id="job-1", job_type=_PlainJob)

    with activator.begin_scope(context) as scope:
        job = scope.resolve(_PlainJob)

    assert isinstance(job, _PlainJob)
    assert scope.disposed
    with pytest.raises(DIWireJobScopeDisposedError):
        scope.resolve(_PlainJob)


@pytest.mark.asyncio
async def test_default_scope_async_resolution() -> None:
    async with JobActivator().begin_scope() as scope:
        job = await scope.aresolve(_PlainJob)

    assert isinstance(job, _PlainJob)
    assert scope.disposed


def test_custom_scope_dispose_is_idempotent() -> None:
    scope = _CountingScope()

    scope.dispose()
    scope.dispose()

    assert scope.disposals == [(None, None, None)]


@pytest.mark.asyncio
async def test_custom_scope_adispose_falls_back_to_sync_dispose() -> None:
    scope = _CountingScope()

    await scope.adispose()
    await scope.adispose()
    scope.dispose()

    assert scope.disposals == [(None, None, None)]


def test_job_context_defaults() -> None:
    context = JobContext(job_id="job-1", job_type=_PlainJob)

    assert context.method_name is None
    assert dict(context.items) == {}


def test_activator_context_defaults_to_constructor_activator() -> None:
    context = ActivatorContext()

    current = context.get_current()

    assert type(current) is JobActivator
    assert context.get_current() is current


def test_activator_context_set_current_and_reset(container: Container) -> None:
    context = ActivatorContext()
    activator = DIWireJobActivator(container)

    context.set_current(activator)
    assert context.get_current() is activator

    context.reset()
    assert type(context.get_current()) is JobActivator


def test_activator_context_rejects_none() -> None:
    with pytest.raises(DIWireJobActivatorArgumentError, match="'activator' must not be None"):
        ActivatorContext().set_current(None)  # type: ignore[arg-type]


def test_use_diwire_activator_binds_global_activator(container: Container) -> None:
    activator = use_diwire_activator(container)

    assert activator_context.get_current() is activator
    assert activator.container is container
    assert activator.scope == Scope.REQUEST


def test_use_diwire_activator_explicit_scope_wins_over_settings(container: Container) -> None:
    activator = use_diwire_activator(
        container,
        scope=Scope.STEP,
        settings=JobActivatorSettings(scope="action"),
    )

    assert activator.scope == Scope.STEP


def test_use_diwire_activator_uses_settings_scope(container: Container) -> None:
    activator = use_diwire_activator(container, settings=JobActivatorSettings(scope="session"))

    assert activator.scope == Scope.SESSION


def test_use_diwire_activator_rejects_none_without_rebinding(container: Container) -> None:
    previous = use_diwire_activator(container)

    with pytest.raises(DIWireJobActivatorArgumentError, match="use_diwire_activator"):
        use_diwire_activator(None)  # type: ignore[arg-type]

    assert activator_context.get_current() is previous


def test_global_activator_resolves_registered_job(strict_container: Container) -> None:
    the_job = _PlainJob()
    strict_container.add_instance(the_job, provides=_PlainJob)
    use_diwire_activator(strict_container)

    assert activator_context.get_current().activate_job(_PlainJob) is the_job
