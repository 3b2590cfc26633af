"""Per-job scopes: share scoped resources inside one run, clean them up after.

``begin_scope`` enters ``Scope.REQUEST`` (or the scope the activator was
configured with) for a single job run. The ``JobContext`` passed in is
available to providers through ``FromContext[JobContext]``.
"""

from __future__ import annotations

from collections.abc import Generator

from diwire import Container, FromContext, Lifetime, Scope

from diwire_jobs import DIWireJobActivator, JobContext


class UnitOfWork:
    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        self.committed = False


class ImportJob:
    def __init__(self, unit_of_work: UnitOfWork) -> None:
        self.unit_of_work = unit_of_work


state = {"closed": 0}


def provide_unit_of_work(context: FromContext[JobContext]) -> Generator[UnitOfWork, None, None]:
    unit_of_work = UnitOfWork(job_id=context.job_id)
    try:
        yield unit_of_work
    finally:
        unit_of_work.committed = True
        state["closed"] += 1


def main() -> None:
    container = Container(autoregister_concrete_types=False)
    container.add_generator(
        provide_unit_of_work,
        provides=UnitOfWork,
        scope=Scope.REQUEST,
        lifetime=Lifetime.SCOPED,
    )
    container.add_concrete(
        ImportJob,
        scope=Scope.REQUEST,
        lifetime=Lifetime.TRANSIENT,
    )

    activator = DIWireJobActivator(container)
    context = JobContext(job_id="import-7", job_type=ImportJob, method_name="run")

    with activator.begin_scope(context) as scope:
        first = scope.resolve(ImportJob)
        second = scope.resolve(ImportJob)
        closed_inside = state["closed"]

    print(f"shared_unit_of_work={first.unit_of_work is second.unit_of_work}")  # => shared_unit_of_work=True
    print(f"job_id={first.unit_of_work.job_id}")  # => job_id=import-7
    print(f"closed_inside={closed_inside}")  # => closed_inside=0
    print(f"closed_after={state['closed']}")  # => closed_after=1
    print(f"committed={first.unit_of_work.committed}")  # => committed=True


if __name__ == "__main__":
    main()
