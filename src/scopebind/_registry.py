from __future__ import annotations

import itertools
import logging
import threading
from typing import TYPE_CHECKING

from ._errors import UnregisteredTokenError
from ._providers import Lifetime, Registration, validate


if TYPE_CHECKING:
    from collections.abc import Hashable, Iterator

    from ._providers import Provider


logger = logging.getLogger(__name__)


class Registry:
    """Append-only mapping of token -> registrations, in registration order.

    One registry is shared by reference by a root container and every scope
    created from it.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, list[Registration]] = {}
        # Ids are never reused, not even across clear().
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, token: Hashable, provider: Provider, lifetime: Lifetime = Lifetime.TRANSIENT) -> Registration:
        validate(token, provider, lifetime)

        with self._lock:
            reg = Registration(id=next(self._ids), token=token, provider=provider, lifetime=lifetime)
            self._entries.setdefault(token, []).append(reg)

        logger.debug("Registered %r as #%d (%s, %s)", token, reg.id, type(provider).__name__, lifetime.value)
        return reg

    def registrations_for(self, token: Hashable) -> tuple[Registration, ...]:
        with self._lock:
            return tuple(self._entries.get(token, ()))

    def active(self, token: Hashable) -> Registration:
        """Return the most recently added registration for `token`."""
        with self._lock:
            regs = self._entries.get(token)
            if not regs:
                raise UnregisteredTokenError(token)
            return regs[-1]

    def tokens(self) -> Iterator[Hashable]:
        with self._lock:
            return iter(list(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, token: object) -> bool:
        try:
            return bool(self._entries.get(token))  # type: ignore[call-overload]
        except TypeError:
            return False

    def __len__(self) -> int:
        with self._lock:
            return sum(len(regs) for regs in self._entries.values())
