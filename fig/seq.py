"""Ordered sequences used to hand back keys, values and entries.

Two flavours are provided. ``Seq`` is a mutable, insertion-ordered sequence
that supports appending. ``SeqView`` is a lazy view over some other
iterable source; it recomputes its elements every time it is walked, so it
can be iterated any number of times and always reflects the current state
of whatever it was built from.

Neither type is safe for concurrent mutation from multiple threads.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Optional,
    Type,
    override,
)

from fig.common import Iterating, Sized

__all__ = ["Seq", "SeqView"]


class SeqLike[T](Sized, Iterating[T]):
    """Operations shared by materialised sequences and lazy views."""

    @abstractmethod
    def iter(self) -> Iterator[T]: ...

    def filter(self, pred: Callable[[T], bool]) -> SeqView[T]:
        """Lazily keep the elements satisfying the predicate.

        Args:
            pred: Predicate applied to each element.

        Returns:
            A restartable view; nothing is evaluated until it is iterated.
        """
        return SeqView(lambda: (v for v in self.iter() if pred(v)))

    def map[U](self, fn: Callable[[T], U]) -> SeqView[U]:
        """Lazily apply a function to every element.

        Args:
            fn: Function applied to each element.

        Returns:
            A restartable view of the results.
        """
        return SeqView(lambda: (fn(v) for v in self.iter()))

    def contains_any(self, pred: Callable[[T], bool]) -> bool:
        """Check whether any element satisfies the predicate.

        Stops at the first match.
        """
        return any(pred(v) for v in self.iter())

    def first(self) -> Optional[T]:
        """Get the first element, or None if there is none."""
        return next(self.iter(), None)

    def to_seq(self) -> Seq[T]:
        """Materialise the elements into a new ``Seq``."""
        return Seq.mk(self.iter())

    def contains(self, value: Any) -> bool:
        """Check whether some element equals the value."""
        return any(v == value for v in self.iter())

    def __contains__(self, value: Any) -> bool:
        """Alias for contains()."""
        return self.contains(value)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SeqLike):
            return NotImplemented
        mine = self.iter()
        theirs = other.iter()
        while True:
            a = next(mine, _END)
            b = next(theirs, _END)
            if a is _END or b is _END:
                return a is b
            if a != b:
                return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.list()!r})"


class Seq[T](SeqLike[T]):
    """A mutable sequence that preserves insertion order.

    Appending returns the sequence itself so calls can be chained:

        >>> Seq.empty().append(1).append(2).list()
        [1, 2]
    """

    def __init__(self, items: Optional[List[T]] = None) -> None:
        self._items: List[T] = items if items is not None else []

    @staticmethod
    def empty(_ty: Optional[Type[T]] = None) -> Seq[T]:
        """Create a new empty sequence.

        Args:
            _ty: Optional element type hint (unused).
        """
        return Seq()

    @staticmethod
    def singleton(value: T) -> Seq[T]:
        return Seq([value])

    @staticmethod
    def mk(values: Iterable[T]) -> Seq[T]:
        """Create a sequence holding the given values in order."""
        return Seq(list(values))

    @override
    def size(self) -> int:
        return len(self._items)

    @override
    def iter(self) -> Iterator[T]:
        return iter(self._items)

    def reversed(self) -> Iterator[T]:
        return reversed(self._items)

    def append(self, value: T) -> Seq[T]:
        """Add an element to the end of the sequence.

        Returns:
            This sequence.
        """
        self._items.append(value)
        return self

    def extend(self, values: Iterable[T]) -> Seq[T]:
        """Add every element of an iterable to the end of the sequence.

        Returns:
            This sequence.
        """
        self._items.extend(values)
        return self

    def get(self, ix: int) -> T:
        """Get the element at the specified index.

        Raises:
            KeyError: If the index is out of bounds.
        """
        if ix < 0 or ix >= len(self._items):
            raise KeyError(ix)
        return self._items[ix]

    def lookup(self, ix: int) -> Optional[T]:
        """Get the element at the specified index, or None if out of bounds."""
        try:
            return self.get(ix)
        except KeyError:
            return None

    def last(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def __getitem__(self, ix: int) -> T:
        """Alias for get()."""
        return self.get(ix)

    def __reversed__(self) -> Iterator[T]:
        """Alias for reversed()."""
        return self.reversed()

    def __rshift__(self, value: T) -> Seq[T]:
        """Alias for append()."""
        return self.append(value)


class SeqView[T](SeqLike[T]):
    """A lazy, restartable sequence.

    The view holds a zero-argument callable producing a fresh iterator,
    and calls it on every traversal. A view over a live container
    therefore sees entries added or removed after the view was made.
    """

    def __init__(self, source: Callable[[], Iterable[T]]) -> None:
        self._source = source

    @staticmethod
    def of(values: Iterable[T]) -> SeqView[T]:
        """Create a view over a re-iterable collection such as a list."""
        return SeqView(lambda: values)

    @override
    def iter(self) -> Iterator[T]:
        return iter(self._source())

    @override
    def size(self) -> int:
        """Count the elements. Walks the whole source."""
        return sum(1 for _ in self.iter())

    @override
    def null(self) -> bool:
        return next(self.iter(), _END) is _END


_END = object()
