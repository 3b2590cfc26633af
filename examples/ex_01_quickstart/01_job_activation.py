"""Quickstart: resolve background jobs from a diwire container.

Register the job (or let autoregistration build it), hand the container to
``DIWireJobActivator``, and let the job runner call ``activate_job``.
"""

from __future__ import annotations

from diwire import Container
from diwire.exceptions import DIWireDependencyNotRegisteredError

from diwire_jobs import DIWireJobActivator, DIWireJobActivatorArgumentError


class Mailer:
    def send(self, to: str) -> str:
        return f"sent:{to}"


class WelcomeEmailJob:
    def __init__(self, mailer: Mailer) -> None:
        self.mailer = mailer

    def run(self, to: str) -> str:
        return self.mailer.send(to)


class UnregisteredJob:
    pass


def main() -> None:
    container = Container(autoregister_concrete_types=False)
    container.add_instance(Mailer())
    the_job = WelcomeEmailJob(mailer=container.resolve(Mailer))
    container.add_instance(the_job, provides=WelcomeEmailJob)

    activator = DIWireJobActivator(container)
    job = activator.activate_job(WelcomeEmailJob)

    print(f"same_instance={job is the_job}")  # => same_instance=True
    print(f"result={job.run('ada@example.com')}")  # => result=sent:ada@example.com

    try:
        activator.activate_job(UnregisteredJob)
    except DIWireDependencyNotRegisteredError as error:
        print(f"unregistered={type(error).__name__}")  # => unregistered=DIWireDependencyNotRegisteredError

    try:
        DIWireJobActivator(None)  # type: ignore[arg-type]
    except DIWireJobActivatorArgumentError as error:
        print(f"missing_container={type(error).__name__}")  # => missing_container=DIWireJobActivatorArgumentError


if __name__ == "__main__":
    main()
