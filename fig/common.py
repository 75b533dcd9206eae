"""Common types shared by the fig containers.

This module holds the small mixins both containers build on, the key-value
entry type, and the exceptions raised when a caller breaks a precondition.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

__all__ = [
    "Entry",
    "Iterating",
    "NullPredicateError",
    "PreconditionError",
    "Sized",
    "require_predicate",
]


class PreconditionError(Exception):
    """Raised when an argument an operation requires is unusable.

    Raised before the operation touches any state, so nothing has been
    mutated when a caller sees it.
    """

    pass


class NullPredicateError(PreconditionError):
    """Raised when an in-place filtering operation is given no predicate."""

    def __init__(self, op: str):
        super().__init__(f"{op} requires a predicate, got None")
        self.op = op


def require_predicate[P: Callable[..., Any]](op: str, cond: Optional[P]) -> P:
    if cond is None:
        raise NullPredicateError(op)
    return cond


class Sized(metaclass=ABCMeta):
    @abstractmethod
    def size(self) -> int: ...

    def null(self) -> bool:
        return self.size() == 0

    def __bool__(self) -> bool:
        return not self.null()

    def __len__(self) -> int:
        return self.size()


class Iterating[U](metaclass=ABCMeta):
    @abstractmethod
    def iter(self) -> Iterator[U]: ...

    def list(self) -> List[U]:
        return list(self.iter())

    def __iter__(self) -> Iterator[U]:
        return self.iter()


@dataclass(frozen=True)
class Entry[K, V]:
    """A key-value pair as seen while walking a container.

    Unlike a plain tuple the fields are named, but an entry still unpacks
    like one:

        >>> key, value = Entry("a", 1)
        >>> (key, value)
        ('a', 1)
    """

    key: K
    value: V

    def pair(self) -> tuple[K, V]:
        return (self.key, self.value)

    def __iter__(self) -> Iterator[Any]:
        yield self.key
        yield self.value
