from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, TypeVar, overload

from diwire import BaseScope, Scope

from diwire_jobs.activator import (
    JobActivator,
    JobActivatorScope,
    JobContext,
    JobResolverProtocol,
)
from diwire_jobs.activator_context import activator_context
from diwire_jobs.exceptions import DIWireJobActivatorArgumentError
from diwire_jobs.settings import JobActivatorSettings

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _ensure_container(container: JobResolverProtocol | None, *, owner: str) -> None:
    if container is None:
        msg = f"{owner} parameter 'container' must not be None."
        raise DIWireJobActivatorArgumentError(msg)


def _build_scope_context(context: JobContext | None) -> dict[Any, Any] | None:
    if context is None:
        return None
    scope_context: dict[Any, Any] = dict(context.items)
    scope_context[JobContext] = context
    return scope_context


class DIWireJobActivator(JobActivator):
    """Activate jobs by resolving them from a diwire container.

    The activator holds a reference to a container it does not own: it never
    closes it, never caches what it resolves, and never translates resolution
    errors. Whatever the container returns for a job type is handed back as-is,
    and whatever it raises (for example ``DIWireDependencyNotRegisteredError``)
    propagates unchanged.

    ``begin_scope`` enters ``scope`` on the container for one job run, so
    scoped providers are shared within the run and cleaned up when the scope is
    disposed.

    Examples:
        .. code-block:: python

            container = Container()
            container.add_instance(ReportJob(), provides=ReportJob)

            activator = DIWireJobActivator(container)
            job = activator.activate_job(ReportJob)

    """

    def __init__(
        self,
        container: JobResolverProtocol,
        *,
        scope: BaseScope = Scope.REQUEST,
    ) -> None:
        """Bind the activator to ``container``.

        Args:
            container: Container (or any resolver) that creates job instances.
            scope: Scope entered by ``begin_scope`` for each job run.

        Raises:
            DIWireJobActivatorArgumentError: If ``container`` is ``None``.

        """
        _ensure_container(container, owner="DIWireJobActivator()")
        self._container = container
        self._scope = scope

    @classmethod
    def from_settings(
        cls,
        container: JobResolverProtocol,
        settings: JobActivatorSettings | None = None,
    ) -> DIWireJobActivator:
        """Build an activator configured by ``JobActivatorSettings``.

        Args:
            container: Container that creates job instances.
            settings: Explicit settings. ``None`` loads them from the
                ``DIWIRE_JOBS_*`` environment variables.

        Raises:
            DIWireJobActivatorArgumentError: If ``container`` is ``None``.
            pydantic.ValidationError: If the environment holds invalid values.

        """
        _ensure_container(container, owner="DIWireJobActivator.from_settings()")
        if settings is None:
            settings = JobActivatorSettings()
        return cls(container, scope=settings.scope_level())

    @property
    def container(self) -> JobResolverProtocol:
        """Container the activator resolves jobs from."""
        return self._container

    @property
    def scope(self) -> BaseScope:
        """Scope entered for each job run."""
        return self._scope

    @overload
    def activate_job(self, job_type: type[T]) -> T: ...

    @overload
    def activate_job(self, job_type: Any) -> Any: ...

    def activate_job(self, job_type: Any) -> Any:
        """Resolve ``job_type`` from the container.

        Args:
            job_type: Dependency key of the job, usually its class.

        Returns:
            The exact object the container resolves.

        """
        logger.debug("Resolving job %r from %s", job_type, type(self._container).__name__)
        return self._container.resolve(job_type)

    @overload
    async def aactivate_job(self, job_type: type[T]) -> T: ...

    @overload
    async def aactivate_job(self, job_type: Any) -> Any: ...

    async def aactivate_job(self, job_type: Any) -> Any:
        """Asynchronously resolve ``job_type`` from the container."""
        logger.debug(
            "Resolving job %r asynchronously from %s",
            job_type,
            type(self._container).__name__,
        )
        return await self._container.aresolve(job_type)

    def begin_scope(self, context: JobContext | None = None) -> DIWireJobActivatorScope:
        """Enter the job scope on the container for one job run.

        When ``context`` is given, it is bound under the ``JobContext`` key
        together with ``context.items``, so providers can depend on
        ``FromContext[JobContext]``.

        Args:
            context: Description of the job being performed, if known.

        Returns:
            A scope whose disposal runs the container's scoped cleanups.

        Raises:
            DIWireScopeMismatchError: If the container cannot enter ``scope``.

        """
        resolver = self._container.enter_scope(
            self._scope,
            context=_build_scope_context(context),
        )
        logger.debug(
            "Entered %r for job %s",
            self._scope,
            context.job_id if context is not None else "<unknown>",
        )
        return DIWireJobActivatorScope(resolver.__enter__(), context=context)


class DIWireJobActivatorScope(JobActivatorScope):
    """Job scope backed by a diwire scoped resolver.

    Resolution delegates to the resolver returned by ``enter_scope``.
    Disposal exits that resolver, which runs generator and context-manager
    cleanups registered for the scope. Use ``adispose`` (or ``async with``)
    when any scoped provider needs async cleanup.
    """

    def __init__(
        self,
        resolver: JobResolverProtocol,
        *,
        context: JobContext | None = None,
    ) -> None:
        super().__init__()
        self._resolver = resolver
        self._context = context

    @property
    def resolver(self) -> JobResolverProtocol:
        """Scoped resolver backing this job scope."""
        return self._resolver

    @property
    def context(self) -> JobContext | None:
        """Job context the scope was opened with."""
        return self._context

    def _resolve(self, job_type: Any) -> Any:
        return self._resolver.resolve(job_type)

    async def _aresolve(self, job_type: Any) -> Any:
        return await self._resolver.aresolve(job_type)

    def _dispose(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        logger.debug("Disposing job scope for %s", self._job_id())
        self._resolver.__exit__(exc_type, exc_value, traceback)

    async def _adispose(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        logger.debug("Disposing job scope for %s asynchronously", self._job_id())
        await self._resolver.__aexit__(exc_type, exc_value, traceback)

    def _job_id(self) -> str:
        return self._context.job_id if self._context is not None else "<unknown>"


def use_diwire_activator(
    container: JobResolverProtocol,
    *,
    scope: BaseScope | None = None,
    settings: JobActivatorSettings | None = None,
) -> DIWireJobActivator:
    """Make a ``DIWireJobActivator`` the process-wide current activator.

    An explicit ``scope`` wins over ``settings``. Without either, jobs run in
    ``Scope.REQUEST``.

    Args:
        container: Container that creates job instances.
        scope: Scope entered for each job run.
        settings: Settings providing the scope when ``scope`` is omitted.

    Returns:
        The activator now returned by ``activator_context.get_current()``.

    Raises:
        DIWireJobActivatorArgumentError: If ``container`` is ``None``.

    """
    _ensure_container(container, owner="use_diwire_activator()")
    if scope is None:
        scope = settings.scope_level() if settings is not None else Scope.REQUEST
    activator = DIWireJobActivator(container, scope=scope)
    activator_context.set_current(activator)
    return activator


__all__ = ["DIWireJobActivator", "DIWireJobActivatorScope", "use_diwire_activator"]
