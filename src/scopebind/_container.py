from __future__ import annotations

import inspect
import logging
import threading
import weakref
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._errors import CircularDependencyError, InvalidRegistrationError
from ._providers import (
    ClassProvider,
    FactoryProvider,
    Lifetime,
    TokenProvider,
    ValueProvider,
    as_provider,
)
from ._registry import Registry


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable, Iterator
    from types import TracebackType

    from ._providers import Provider, Registration

T = TypeVar("T")

_MISSING = object()


class Container:
    """Root of a container family.

    - registrations: class, value, factory or alias providers, many per token
    - lifetimes: transient / singleton / scoped
    - `create_scope()` returns a child that shares registrations and singletons
      but caches scoped instances privately.
    """

    def __init__(self) -> None:
        # Shared by reference with every scope of the family.
        self._registry = Registry()
        self._singletons: dict[int, object] = {}
        self._singleton_locks: dict[int, threading.RLock] = {}
        self._family_lock = threading.Lock()
        self._local = threading.local()
        self._members: weakref.WeakSet[Container] = weakref.WeakSet()

        # Private to this container.
        self._scoped: dict[int, object] = {}
        self._parent: Container | None = None
        self._members.add(self)

    @property
    def parent(self) -> Container | None:
        return self._parent

    @property
    def root(self) -> Container:
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def is_root(self) -> bool:
        return self._parent is None

    def register(
        self,
        token: Hashable,
        provider: Provider | type,
        *,
        lifetime: Lifetime = Lifetime.TRANSIENT,
        dependencies: Iterable[Hashable] = (),
    ) -> Registration:
        """Register a provider (or a bare class) for a token.

        Example:
          container.register(IFoo, Foo)
          container.register(Repo, ClassProvider(Repo, (Database,)), lifetime=Lifetime.SCOPED)
          container.register(Foo, TokenProvider("IBar"))

        """
        return self._registry.add(token, as_provider(provider, tuple(dependencies)), lifetime)

    def register_singleton(
        self,
        token: Hashable,
        source: Provider | type | None = None,
        *,
        dependencies: Iterable[Hashable] = (),
    ) -> Registration:
        return self._register_lifetime(token, source, dependencies, Lifetime.SINGLETON)

    def register_scoped(
        self,
        token: Hashable,
        source: Provider | type | None = None,
        *,
        dependencies: Iterable[Hashable] = (),
    ) -> Registration:
        return self._register_lifetime(token, source, dependencies, Lifetime.SCOPED)

    def register_instance(self, token: Hashable, instance: object) -> Registration:
        """Register a pre-built instance (always the same object)."""
        return self._registry.add(token, ValueProvider(instance))

    def register_factory(
        self,
        token: Hashable,
        factory: Callable[[Container], object],
        *,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> Registration:
        return self._registry.add(token, FactoryProvider(factory), lifetime)

    def register_alias(self, token: Hashable, target: Hashable) -> Registration:
        return self._registry.add(token, TokenProvider(target))

    def _register_lifetime(
        self,
        token: Hashable,
        source: Provider | type | None,
        dependencies: Iterable[Hashable],
        lifetime: Lifetime,
    ) -> Registration:
        if source is None:
            if not inspect.isclass(token):
                msg = f"Token {token!r} is not a class; pass an implementation to register it"
                raise InvalidRegistrationError(msg)
            source = token
        return self._registry.add(token, as_provider(source, tuple(dependencies)), lifetime)

    def is_registered(self, token: Hashable) -> bool:
        return token in self._registry

    def registrations(self, token: Hashable) -> tuple[Registration, ...]:
        return self._registry.registrations_for(token)

    @overload
    def resolve(self, token: type[T]) -> T: ...

    @overload
    def resolve(self, token: Hashable) -> Any: ...

    def resolve(self, token: Hashable) -> Any:
        """Resolve the active (most recently added) registration for `token`.

        Raises `UnregisteredTokenError` if nothing is registered and
        `CircularDependencyError` if the graph loops back on itself.
        """
        return self._resolve_registration(self._registry.active(token))

    @overload
    def resolve_all(self, token: type[T]) -> list[T]: ...

    @overload
    def resolve_all(self, token: Hashable) -> list[Any]: ...

    def resolve_all(self, token: Hashable) -> list[Any]:
        """Resolve every registration for `token`, in registration order."""
        regs = self._registry.registrations_for(token)
        if not regs:
            # Raise the same error a plain resolve would.
            self._registry.active(token)
        return [self._resolve_registration(reg) for reg in regs]

    def create_scope(self) -> Scope:
        scope = Scope(self, _from_parent=True)
        logger.debug("Created scope %#x (parent %#x)", id(scope), id(self))
        return scope

    def clear_instances(self) -> None:
        """Drop cached singletons and this container's scoped instances, keep registrations."""
        with self._family_lock:
            self._singletons.clear()
            self._singleton_locks.clear()
        self._scoped.clear()

    def reset(self) -> None:
        """Remove every registration and cached instance of the family.

        Scoped caches of every live scope in the family are emptied too.
        """
        if not self.is_root:
            logger.warning("reset() called on a scope; the whole family's registrations are cleared")
        with self._family_lock:
            self._registry.clear()
            self._singletons.clear()
            self._singleton_locks.clear()
            members = list(self._members)
        for member in members:
            member._scoped.clear()

    def _resolve_registration(self, reg: Registration) -> Any:
        provider = reg.provider

        if isinstance(provider, ValueProvider):
            return provider.value

        if isinstance(provider, TokenProvider):
            # No cache slot of its own; the target's registration decides.
            with self._constructing(reg):
                return self.resolve(provider.token)

        if isinstance(provider, (ClassProvider, FactoryProvider)):
            if reg.lifetime is Lifetime.SINGLETON:
                return self._resolve_singleton(reg)
            if reg.lifetime is Lifetime.SCOPED:
                return self._resolve_scoped(reg)
            return self._construct(reg)

        msg = f"Unknown provider type: {type(provider).__name__}"
        raise TypeError(msg)

    def _resolve_singleton(self, reg: Registration) -> Any:
        instance = self._singletons.get(reg.id, _MISSING)
        if instance is not _MISSING:
            return instance

        # One lock per registration: constructing one singleton never blocks another.
        with self._family_lock:
            lock = self._singleton_locks.setdefault(reg.id, threading.RLock())

        with lock:
            # Double-check after acquiring lock
            instance = self._singletons.get(reg.id, _MISSING)
            if instance is _MISSING:
                instance = self._construct(reg)
                self._singletons[reg.id] = instance
                logger.debug("Cached singleton for %r (#%d)", reg.token, reg.id)
            return instance

    def _resolve_scoped(self, reg: Registration) -> Any:
        instance = self._scoped.get(reg.id, _MISSING)
        if instance is _MISSING:
            # First write wins if two resolves in this scope race.
            instance = self._scoped.setdefault(reg.id, self._construct(reg))
        return instance

    def _construct(self, reg: Registration) -> Any:
        provider = reg.provider
        with self._constructing(reg):
            if isinstance(provider, ClassProvider):
                args = [self.resolve(dep) for dep in provider.dependencies]
                return provider.cls(*args)
            return provider.factory(self)  # type: ignore[union-attr]

    def _resolution_stack(self) -> list[Registration]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    @contextmanager
    def _constructing(self, reg: Registration) -> Iterator[None]:
        stack = self._resolution_stack()
        for index, pending in enumerate(stack):
            if pending.id == reg.id:
                path = [r.token for r in stack[index:]]
                path.append(reg.token)
                raise CircularDependencyError(path)

        stack.append(reg)
        try:
            yield
        finally:
            stack.pop()


class Scope(Container):
    """A child resolution context.

    Shares the registry and singleton cache of the container it was created
    from, owns an empty scoped cache. Leaving a `with` block drops the scoped
    instances.
    """

    def __init__(self, parent: Container, *, _from_parent: bool = False) -> None:  # noqa: PLW0231
        if not _from_parent:
            msg = "Scope instances must be created via Container.create_scope()"
            raise RuntimeError(msg)
        # Family state comes from the parent; Container.__init__ would allocate a new family.
        self._registry = parent._registry
        self._singletons = parent._singletons
        self._singleton_locks = parent._singleton_locks
        self._family_lock = parent._family_lock
        self._local = parent._local
        self._members = parent._members

        self._scoped: dict[int, object] = {}
        self._parent: Container | None = parent
        with self._family_lock:
            self._members.add(self)

    def __enter__(self) -> Scope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._scoped.clear()
