from diwire_jobs.activator import JobActivator, JobActivatorScope, JobContext, JobResolverProtocol
from diwire_jobs.activator_context import ActivatorContext, activator_context
from diwire_jobs.diwire_activator import (
    DIWireJobActivator,
    DIWireJobActivatorScope,
    use_diwire_activator,
)
from diwire_jobs.exceptions import (
    DIWireJobActivatorArgumentError,
    DIWireJobScopeDisposedError,
    DIWireJobsError,
)
from diwire_jobs.settings import JobActivatorSettings

__all__ = [
    "ActivatorContext",
    "DIWireJobActivator",
    "DIWireJobActivatorArgumentError",
    "DIWireJobActivatorScope",
    "DIWireJobScopeDisposedError",
    "DIWireJobsError",
    "JobActivator",
    "JobActivatorScope",
    "JobActivatorSettings",
    "JobContext",
    "JobResolverProtocol",
    "activator_context",
    "use_diwire_activator",
]
