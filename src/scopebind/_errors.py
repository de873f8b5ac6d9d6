from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Hashable, Sequence


def _token_repr(token: object) -> str:
    return getattr(token, "__name__", None) or repr(token)


class ContainerError(Exception):
    pass


class ResolutionError(ContainerError, RuntimeError):
    pass


class UnregisteredTokenError(ResolutionError, KeyError):
    """No registration exists for the requested token."""

    def __init__(self, token: Hashable) -> None:
        self.token = token
        super().__init__(f"No registration found for token: {_token_repr(token)}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class CircularDependencyError(ResolutionError):
    """A registration was requested again while it was still being constructed."""

    def __init__(self, path: Sequence[Hashable]) -> None:
        self.path = tuple(path)
        chain = " -> ".join(_token_repr(t) for t in self.path)
        super().__init__(f"Circular dependency detected: {chain}")


class InvalidRegistrationError(ContainerError, ValueError):
    pass
