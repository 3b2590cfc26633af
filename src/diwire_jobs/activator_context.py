from __future__ import annotations

import logging

from diwire_jobs.activator import JobActivator
from diwire_jobs.exceptions import DIWireJobActivatorArgumentError

logger = logging.getLogger(__name__)


class ActivatorContext:
    """Hold the activator a job runner uses when none is passed explicitly.

    The binding is process-global for this instance (not task-local or
    thread-local). Bind it once during application startup; tests that swap
    activators should call ``reset`` afterwards.
    """

    def __init__(self) -> None:
        self._activator: JobActivator | None = None
        self._default = JobActivator()

    def set_current(self, activator: JobActivator) -> None:
        """Bind ``activator`` as the current activator.

        Raises:
            DIWireJobActivatorArgumentError: If ``activator`` is ``None``.

        """
        if activator is None:
            msg = "ActivatorContext.set_current() parameter 'activator' must not be None."
            raise DIWireJobActivatorArgumentError(msg)
        self._activator = activator
        logger.info("Bound %s as the current job activator", type(activator).__name__)

    def get_current(self) -> JobActivator:
        """Return the bound activator, or the default constructor-based one."""
        if self._activator is None:
            return self._default
        return self._activator

    def reset(self) -> None:
        """Drop the bound activator so ``get_current`` returns the default again."""
        self._activator = None


activator_context = ActivatorContext()
"""Process-global activator holder consulted by job runners."""

__all__ = ["ActivatorContext", "activator_context"]
