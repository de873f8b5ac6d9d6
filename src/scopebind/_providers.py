from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ._errors import InvalidRegistrationError


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable


class Lifetime(Enum):
    TRANSIENT = "transient"
    SINGLETON = "singleton"
    SCOPED = "scoped"


@dataclass(frozen=True)
class ClassProvider:
    """Construct `cls`, passing the resolved `dependencies` positionally, in order."""

    cls: type
    dependencies: tuple[Hashable, ...] = field(default=())

    def __post_init__(self) -> None:
        if not inspect.isclass(self.cls):
            msg = f"ClassProvider expects a class, got {self.cls!r}"
            raise InvalidRegistrationError(msg)
        # Accept any iterable (list, generator) but store it immutably.
        object.__setattr__(self, "dependencies", tuple(self.dependencies))


@dataclass(frozen=True)
class ValueProvider:
    value: Any


@dataclass(frozen=True)
class FactoryProvider:
    """Call `factory(context)` where `context` is the container or scope resolving."""

    factory: Callable[[Any], Any]

    def __post_init__(self) -> None:
        if not callable(self.factory):
            msg = f"FactoryProvider expects a callable, got {self.factory!r}"
            raise InvalidRegistrationError(msg)


@dataclass(frozen=True)
class TokenProvider:
    """Forward resolution to `token`'s own active registration."""

    token: Hashable


Provider = ClassProvider | ValueProvider | FactoryProvider | TokenProvider

PROVIDER_TYPES = (ClassProvider, ValueProvider, FactoryProvider, TokenProvider)


@dataclass(frozen=True)
class Registration:
    id: int
    token: Hashable
    provider: Provider
    lifetime: Lifetime = Lifetime.TRANSIENT


def as_provider(source: object, dependencies: tuple[Hashable, ...] = ()) -> Provider:
    """Normalize a registration source into a provider variant.

    A provider is used as is; a bare class becomes a `ClassProvider`. Anything
    else is a registration error.
    """
    if isinstance(source, PROVIDER_TYPES):
        if dependencies:
            msg = "`dependencies` only applies when registering a bare class"
            raise InvalidRegistrationError(msg)
        return source

    if inspect.isclass(source):
        return ClassProvider(source, tuple(dependencies))

    msg = f"Expected a provider or a class, got {source!r}"
    raise InvalidRegistrationError(msg)


def validate(token: Hashable, provider: Provider, lifetime: Lifetime) -> None:
    if not isinstance(lifetime, Lifetime):
        msg = f"Unknown lifetime: {lifetime!r}"
        raise InvalidRegistrationError(msg)

    try:
        hash(token)
    except TypeError as e:
        msg = f"Token {token!r} is not hashable"
        raise InvalidRegistrationError(msg) from e

    if isinstance(provider, TokenProvider):
        if lifetime is not Lifetime.TRANSIENT:
            msg = (
                f"Alias registration for {token!r} cannot use lifetime {lifetime.value}; "
                "it follows the lifetime of its target"
            )
            raise InvalidRegistrationError(msg)
        if provider.token == token:
            msg = f"Token {token!r} cannot be an alias of itself"
            raise InvalidRegistrationError(msg)
