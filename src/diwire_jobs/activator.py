from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType, TracebackType
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, overload

from diwire_jobs.exceptions import DIWireJobScopeDisposedError

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class JobContext:
    """Describe the job a scope is opened for.

    Job runners build one context per performed job and pass it to
    ``JobActivator.begin_scope``. Scoped diwire activators bind it so job
    dependencies can request ``FromContext[JobContext]``.

    Args:
        job_id: Runner-assigned identifier of the job being performed.
        job_type: Job class that will be activated inside the scope.
        method_name: Optional name of the job method the runner will invoke.
        items: Extra context values, keyed the way ``FromContext[...]`` looks
            them up.

    """

    job_id: str
    job_type: type[Any]
    method_name: str | None = None
    items: Mapping[Any, Any] = field(default_factory=lambda: MappingProxyType({}))


class JobResolverProtocol(Protocol):
    """Resolution contract consumed by diwire job activators.

    ``diwire.Container`` and the scoped resolvers returned by its
    ``enter_scope`` satisfy this protocol.
    """

    @overload
    def resolve(self, dependency: type[T]) -> T: ...

    @overload
    def resolve(self, dependency: Any) -> Any: ...

    def resolve(self, dependency: Any) -> Any:
        """Resolve the given dependency and return its instance."""

    @overload
    async def aresolve(self, dependency: type[T]) -> T: ...

    @overload
    async def aresolve(self, dependency: Any) -> Any: ...

    async def aresolve(self, dependency: Any) -> Any:
        """Resolve the given dependency asynchronously and return its instance."""

    def enter_scope(
        self,
        scope: Any = None,
        *,
        context: Mapping[Any, Any] | None = None,
    ) -> JobResolverProtocol:
        """Enter a new scope and return a resolver bound to it."""

    def __enter__(self) -> Self:
        """Enter the resolver context."""

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Exit the resolver context and run its cleanup callbacks."""

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Asynchronously exit the resolver context and run its cleanup callbacks."""


class JobActivatorScope(ABC):
    """Own the activation of a single job run.

    A scope is returned by ``JobActivator.begin_scope`` and lives for one job
    execution. Dispose it exactly when the job finishes, either explicitly or
    through ``with``/``async with``. Disposal is idempotent; resolving after
    disposal raises ``DIWireJobScopeDisposedError``.
    """

    def __init__(self) -> None:
        self._disposed = False

    @property
    def disposed(self) -> bool:
        """Whether ``dispose`` or ``adispose`` already ran."""
        return self._disposed

    def resolve(self, job_type: Any) -> Any:
        """Return an instance of ``job_type`` for this job run.

        Raises:
            DIWireJobScopeDisposedError: If the scope was disposed.

        """
        self._ensure_not_disposed()
        return self._resolve(job_type)

    async def aresolve(self, job_type: Any) -> Any:
        """Asynchronously return an instance of ``job_type`` for this job run.

        Raises:
            DIWireJobScopeDisposedError: If the scope was disposed.

        """
        self._ensure_not_disposed()
        return await self._aresolve(job_type)

    def dispose(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        """Release everything the scope created.

        The exception context, when given, is forwarded to cleanup callbacks.
        Subsequent calls are no-ops.
        """
        if self._disposed:
            return
        self._disposed = True
        self._dispose(exc_type, exc_value, traceback)

    async def adispose(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        """Asynchronously release everything the scope created."""
        if self._disposed:
            return
        self._disposed = True
        await self._adispose(exc_type, exc_value, traceback)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose(exc_type, exc_value, traceback)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.adispose(exc_type, exc_value, traceback)

    @abstractmethod
    def _resolve(self, job_type: Any) -> Any: ...

    async def _aresolve(self, job_type: Any) -> Any:
        return self._resolve(job_type)

    def _dispose(  # noqa: B027
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        return None

    async def _adispose(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._dispose(exc_type, exc_value, traceback)

    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            msg = (
                f"{type(self).__name__} is disposed; "
                "resolve job dependencies before leaving the scope."
            )
            raise DIWireJobScopeDisposedError(msg)


class JobActivator:
    """Create job instances for a job runner.

    The base implementation calls ``job_type()`` with no arguments. It is the
    activator returned by ``activator_context.get_current()`` until another one
    is bound. Subclasses override ``activate_job`` (and usually ``aactivate_job``
    and ``begin_scope``) to source instances from a container.
    """

    def activate_job(self, job_type: Any) -> Any:
        """Return a new instance of ``job_type``.

        Args:
            job_type: Job class to instantiate.

        Returns:
            Whatever ``job_type()`` returns.

        """
        logger.debug("Activating job %r with its default constructor", job_type)
        return job_type()

    async def aactivate_job(self, job_type: Any) -> Any:
        """Asynchronously return an instance of ``job_type``."""
        return self.activate_job(job_type)

    def begin_scope(self, context: JobContext | None = None) -> JobActivatorScope:
        """Open a scope for one job run.

        The base scope activates through ``activate_job`` and has nothing to
        release on disposal.

        Args:
            context: Description of the job being performed, if known.

        """
        return _ActivatorJobScope(self)


class _ActivatorJobScope(JobActivatorScope):
    def __init__(self, activator: JobActivator) -> None:
        super().__init__()
        self._activator = activator

    def _resolve(self, job_type: Any) -> Any:
        return self._activator.activate_job(job_type)

    async def _aresolve(self, job_type: Any) -> Any:
        return await self._activator.aactivate_job(job_type)


__all__ = [
    "JobActivator",
    "JobActivatorScope",
    "JobContext",
    "JobResolverProtocol",
]
