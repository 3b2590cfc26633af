"""Bind a diwire activator process-wide for job runners.

Job runners ask ``activator_context.get_current()`` for the activator. Until
one is bound they get the default activator, which just calls the job class.
"""

from __future__ import annotations

from diwire import Container, Scope

from diwire_jobs import JobActivatorSettings, activator_context, use_diwire_activator


class CleanupJob:
    pass


def main() -> None:
    default_activator = activator_context.get_current()
    print(f"default={type(default_activator).__name__}")  # => default=JobActivator

    container = Container()
    activator = use_diwire_activator(container, settings=JobActivatorSettings(scope="action"))

    current = activator_context.get_current()
    print(f"current={type(current).__name__}")  # => current=DIWireJobActivator
    print(f"action_scope={activator.scope == Scope.ACTION}")  # => action_scope=True
    print(f"activated={type(current.activate_job(CleanupJob)).__name__}")  # => activated=CleanupJob


if __name__ == "__main__":
    main()
