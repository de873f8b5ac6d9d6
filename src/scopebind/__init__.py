"""Dependency injection container with scoped lifetimes.

This package maps tokens (classes or plain strings) to providers and resolves
object graphs on demand, honoring a lifetime per registration.

Exports:
- `Container`: root container; register providers, resolve tokens, create scopes.
- `Scope`: child container sharing the registrations and singletons of its family
  while caching scoped instances privately. Created via `Container.create_scope()`.
- `Lifetime`: transient / singleton / scoped.
- `ClassProvider`, `ValueProvider`, `FactoryProvider`, `TokenProvider`: the
  provider variants a registration can carry.
- `injectable`, `singleton`, `scoped`, `registry`: registration helpers.
- Errors: `ContainerError` and its subclasses.
"""

from ._container import Container, Scope
from ._decorators import injectable, registry, scoped, singleton
from ._errors import (
    CircularDependencyError,
    ContainerError,
    InvalidRegistrationError,
    ResolutionError,
    UnregisteredTokenError,
)
from ._providers import (
    ClassProvider,
    FactoryProvider,
    Lifetime,
    Provider,
    Registration,
    TokenProvider,
    ValueProvider,
)


__all__ = [
    "CircularDependencyError",
    "ClassProvider",
    "Container",
    "ContainerError",
    "FactoryProvider",
    "InvalidRegistrationError",
    "Lifetime",
    "Provider",
    "Registration",
    "ResolutionError",
    "Scope",
    "TokenProvider",
    "UnregisteredTokenError",
    "ValueProvider",
    "injectable",
    "registry",
    "scoped",
    "singleton",
]
