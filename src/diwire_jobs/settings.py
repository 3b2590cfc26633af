from __future__ import annotations

from typing import Literal

from diwire import BaseScope, Scope
from pydantic_settings import BaseSettings, SettingsConfigDict

JobScopeName = Literal["session", "request", "action", "step"]

_SCOPES_BY_NAME: dict[str, BaseScope] = {
    "session": Scope.SESSION,
    "request": Scope.REQUEST,
    "action": Scope.ACTION,
    "step": Scope.STEP,
}


class JobActivatorSettings(BaseSettings):
    """Configure diwire job activators from the environment.

    Values are read from ``DIWIRE_JOBS_*`` variables, for example
    ``DIWIRE_JOBS_SCOPE=action``.

    Examples:
        .. code-block:: python

            settings = JobActivatorSettings(scope="action")
            activator = DIWireJobActivator.from_settings(container, settings)

    """

    model_config = SettingsConfigDict(env_prefix="DIWIRE_JOBS_")

    scope: JobScopeName = "request"
    """Scope entered by ``DIWireJobActivator.begin_scope`` for every job run."""

    def scope_level(self) -> BaseScope:
        """Return the ``diwire.Scope`` member named by ``scope``."""
        return _SCOPES_BY_NAME[self.scope]


__all__ = ["JobActivatorSettings", "JobScopeName"]
