"""Class decorators that register the decorated class on a container.

They are a thin layer over `Container.register`; the container itself does
not know how a registration was made.

Example:
    container = Container()

    @scoped(container, dependencies=(Database,))
    class Repository:
        def __init__(self, db: Database) -> None:
            self.db = db
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from ._errors import InvalidRegistrationError
from ._providers import ClassProvider, Lifetime, as_provider, validate


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from ._container import Container
    from ._providers import Provider, Registration

C = TypeVar("C", bound=type)


def injectable(
    container: Container,
    *,
    token: Hashable | None = None,
    dependencies: Iterable[Hashable] = (),
    lifetime: Lifetime = Lifetime.TRANSIENT,
) -> Callable[[C], C]:
    """Register the decorated class under `token` (default: the class itself)."""
    deps = tuple(dependencies)

    def decorator(cls: C) -> C:
        container.register(cls if token is None else token, ClassProvider(cls, deps), lifetime=lifetime)
        return cls

    return decorator


def singleton(
    container: Container,
    *,
    token: Hashable | None = None,
    dependencies: Iterable[Hashable] = (),
) -> Callable[[C], C]:
    return injectable(container, token=token, dependencies=dependencies, lifetime=Lifetime.SINGLETON)


def scoped(
    container: Container,
    *,
    token: Hashable | None = None,
    dependencies: Iterable[Hashable] = (),
) -> Callable[[C], C]:
    return injectable(container, token=token, dependencies=dependencies, lifetime=Lifetime.SCOPED)


def registry(
    container: Container,
    entries: Iterable[tuple[Hashable, Provider | type] | tuple[Hashable, Provider | type, Lifetime]],
) -> list[Registration]:
    """Register `(token, provider[, lifetime])` entries in order.

    Every entry is validated before the first one is registered, so a bad
    entry leaves the container untouched.
    """
    pending = []
    for entry in entries:
        if len(entry) == 2:  # noqa: PLR2004
            token, provider = entry
            lifetime = Lifetime.TRANSIENT
        elif len(entry) == 3:  # noqa: PLR2004
            token, provider, lifetime = entry  # type: ignore[misc]
        else:
            msg = f"Registry entries are (token, provider[, lifetime]) tuples, got {entry!r}"
            raise InvalidRegistrationError(msg)
        provider = as_provider(provider)
        validate(token, provider, lifetime)
        pending.append((token, provider, lifetime))

    return [container.register(token, provider, lifetime=lifetime) for token, provider, lifetime in pending]
