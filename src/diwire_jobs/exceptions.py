class DIWireJobsError(Exception):
    """Represent a base class for all diwire-jobs failures.

    Catch this type when you want to handle any activation error raised by
    this package. Errors raised by the container itself while resolving a job
    (for example ``DIWireDependencyNotRegisteredError``) are never wrapped and
    do not derive from this class.
    """


class DIWireJobActivatorArgumentError(DIWireJobsError, ValueError):
    """Signal that an activator was built without a container.

    Raised by ``DIWireJobActivator(...)``, ``DIWireJobActivator.from_settings``
    and ``use_diwire_activator`` when ``container`` is ``None``, and by
    ``ActivatorContext.set_current`` when ``activator`` is ``None``.

    Typical fix is passing the application container that owns the job
    registrations.
    """


class DIWireJobScopeDisposedError(DIWireJobsError):
    """Signal use of a job scope after it was disposed.

    Raised by ``JobActivatorScope.resolve``/``aresolve`` once ``dispose`` or
    ``adispose`` has run, including implicit disposal on ``with`` exit.

    Typical fix is resolving every job dependency before leaving the scope
    block.
    """
