"""Associative container with Ruby-style derived operations.

A ``Hash`` wraps an ordinary mutable mapping (a ``dict`` unless told
otherwise) and layers filtering, inversion, merging and value-to-key lookup
on top of it. Most operations come in two flavours: one that returns a new,
independent ``Hash`` and leaves the receiver alone, and an ``_in_place``
variant that mutates the receiver and returns it for chaining.

    >>> h = Hash.of({"a": 1, "b": 2, "c": 1})
    >>> h.keys_of(1).list()
    ['a', 'c']
    >>> h.filter(lambda k, v: v > 1)
    Hash({'b': 2})
    >>> h.reject_in_place(lambda k, v: v == 1) is h
    True

Iteration order is whatever the backing mapping provides; for ``dict`` that
is insertion order. A ``Hash`` takes no locks and must not be mutated from
several threads without external synchronization.
"""

from __future__ import annotations

import logging
from collections.abc import ItemsView, Mapping, MutableMapping
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    Optional,
    Tuple,
    Type,
    override,
)

from fig.common import Entry, Sized, require_predicate
from fig.seq import Seq, SeqView

__all__ = ["Hash", "MapFactory"]

_logger = logging.getLogger(__name__)

type MapFactory = Callable[[], MutableMapping[Any, Any]]
"""Zero-argument callable producing the mapping that backs a ``Hash``."""


def _same_value(a: Any, b: Any) -> bool:
    # None only ever matches None; identical objects (NaN included) always match
    if a is None or b is None:
        return a is b
    return a is b or bool(a == b)


class Hash[K, V](Sized, MutableMapping[K, V]):
    """A mutable key-value container with declarative bulk operations.

    Args:
        factory: Produces the backing mapping. Every ``Hash`` derived from
            this one by a copying operation is backed by a fresh mapping
            from the same factory.
    """

    def __init__(self, factory: MapFactory = dict) -> None:
        self._factory = factory
        self._map: MutableMapping[K, V] = factory()

    @staticmethod
    def empty(
        _kty: Optional[Type[K]] = None,
        _vty: Optional[Type[V]] = None,
        *,
        factory: MapFactory = dict,
    ) -> Hash[K, V]:
        """Create an empty hash.

        Args:
            _kty: Optional key type hint (unused).
            _vty: Optional value type hint (unused).
            factory: Produces the backing mapping.

        Returns:
            A new empty hash.
        """
        return Hash(factory)

    @staticmethod
    def of(
        mapping: Mapping[K, V], *, factory: Optional[MapFactory] = None
    ) -> Hash[K, V]:
        """Create a hash holding a snapshot of an existing mapping.

        The entries are copied, so later changes to ``mapping`` are not
        seen by the result and vice versa.

        Args:
            mapping: The mapping to copy.
            factory: Produces the backing mapping. Defaults to the factory of
                ``mapping`` when it is itself a ``Hash``, else ``dict``.

        Returns:
            A new hash with the same entries in the same order.
        """
        if factory is None:
            factory = mapping._factory if isinstance(mapping, Hash) else dict
        result: Hash[K, V] = Hash(factory)
        result.put_all(mapping)
        return result

    @staticmethod
    def mk(
        pairs: Iterable[Tuple[K, V]], *, factory: MapFactory = dict
    ) -> Hash[K, V]:
        """Create a hash from an iterable of key-value pairs.

        Later pairs replace earlier ones with the same key.
        """
        result: Hash[K, V] = Hash(factory)
        for key, value in pairs:
            result._map[key] = value
        return result

    def _spawn(self) -> Hash[Any, Any]:
        return Hash(self._factory)

    # Underlying map contract

    @override
    def size(self) -> int:
        return len(self._map)

    def is_empty(self) -> bool:
        """Alias for null()."""
        return self.null()

    @override
    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Get the value for a key, or ``default`` if it is absent."""
        return self._map.get(key, default)

    def put(self, key: K, value: V) -> Optional[V]:
        """Associate a value with a key.

        Returns:
            The value previously associated with the key, or None.
        """
        previous = self._map.get(key)
        self._map[key] = value
        return previous

    def remove(self, key: K) -> Optional[V]:
        """Remove a key if present.

        Returns:
            The value that was removed, or None if the key was absent.
        """
        if key not in self._map:
            return None
        value = self._map[key]
        del self._map[key]
        return value

    def put_all(self, other: Optional[Mapping[K, V]]) -> None:
        """Copy every entry of ``other`` into this hash, overwriting on collision.

        Does nothing when ``other`` is None.
        """
        if other is None:
            return
        for key, value in other.items():
            self._map[key] = value

    def contains_key(self, key: Any) -> bool:
        return key in self._map

    def contains_value(self, value: Any) -> bool:
        return any(_same_value(v, value) for v in self._map.values())

    @override
    def clear(self) -> None:
        self._map.clear()

    @override
    def items(self) -> ItemsView[K, V]:
        """Return a live view of the key-value pairs in iteration order."""
        return self._map.items()

    def for_each(self, fn: Callable[[K, V], Any]) -> None:
        """Call ``fn(key, value)`` for every entry in iteration order."""
        for key, value in self._map.items():
            fn(key, value)

    def copy(self) -> Hash[K, V]:
        """Return an independent shallow copy."""
        return Hash.of(self)

    def __copy__(self) -> Hash[K, V]:
        return self.copy()

    # Derived operations

    def contains_any(self, cond: Callable[[K, V], bool]) -> bool:
        """Check whether any entry satisfies the condition.

        Stops at the first entry that does. An empty hash never matches.
        """
        for key, value in self._map.items():
            if cond(key, value):
                return True
        return False

    def entry_seq(self) -> SeqView[Entry[K, V]]:
        """Return a lazy sequence of the entries.

        The view reads the live hash each time it is iterated, so it may be
        walked repeatedly and reflects mutations made in between.
        """
        return SeqView(lambda: (Entry(k, v) for k, v in self._map.items()))

    @override
    def keys(self) -> Seq[K]:  # type: ignore[override]
        """Return the keys in iteration order.

        The result is a ``Seq`` snapshot rather than a ``KeysView``, so set
        operators such as ``h.keys() & other.keys()`` are not available;
        build a ``set`` from it when those are needed.
        """
        return Seq.mk(self._map.keys())

    @override
    def values(self) -> Seq[V]:  # type: ignore[override]
        """Return the values in iteration order."""
        return Seq.mk(self._map.values())

    def invert(self) -> Hash[V, K]:
        """Return a new hash using the values as keys and the keys as values.

        When several keys share a value, the one visited last wins, so
        inverting twice does not in general give back the original hash.

            >>> Hash.of({"a": 1, "b": 1}).invert()
            Hash({1: 'b'})
        """
        result: Hash[V, K] = self._spawn()
        for key, value in self._map.items():
            result._map[value] = key
        return result

    def reject(self, cond: Callable[[K, V], bool]) -> Hash[K, V]:
        """Return a new hash of the entries for which the condition is false."""
        result: Hash[K, V] = self._spawn()
        for key, value in self._map.items():
            if not cond(key, value):
                result._map[key] = value
        return result

    def filter(self, cond: Callable[[K, V], bool]) -> Hash[K, V]:
        """Return a new hash of the entries for which the condition is true."""
        result: Hash[K, V] = self._spawn()
        for key, value in self._map.items():
            if cond(key, value):
                result._map[key] = value
        return result

    def set(self, key: K, value: V) -> Hash[K, V]:
        """Associate a value with a key and return this hash for chaining."""
        self._map[key] = value
        return self

    def reject_in_place(
        self, cond: Optional[Callable[[K, V], bool]]
    ) -> Hash[K, V]:
        """Remove every entry that satisfies the condition.

        Args:
            cond: Called with each key and value; entries for which it returns
                True are removed.

        Returns:
            This hash.

        Raises:
            NullPredicateError: If ``cond`` is None. Nothing is removed.
        """
        test = require_predicate("reject_in_place", cond)
        return self._remove_where(test)

    def filter_in_place(
        self, cond: Optional[Callable[[K, V], bool]]
    ) -> Hash[K, V]:
        """Remove every entry that does not satisfy the condition.

        Args:
            cond: Called with each key and value; entries for which it returns
                False are removed.

        Returns:
            This hash.

        Raises:
            NullPredicateError: If ``cond`` is None. Nothing is removed.
        """
        test = require_predicate("filter_in_place", cond)
        return self._remove_where(lambda k, v: not test(k, v))

    def _remove_where(self, doomed: Callable[[K, V], bool]) -> Hash[K, V]:
        # No removal happens until every entry has been visited
        to_remove: Seq[K] = Seq.empty()
        for key, value in self._map.items():
            if doomed(key, value):
                to_remove.append(key)
        if not to_remove.null():
            for key in to_remove:
                del self._map[key]
            _logger.debug(
                "removed %d entries, %d remain", to_remove.size(), self.size()
            )
        return self

    def keys_of(self, value: Optional[V]) -> Seq[K]:
        """Return every key mapped to the given value, in iteration order.

        Values are compared with ``==``, except that None matches only None.
        """
        result: Seq[K] = Seq.empty()
        for key, v in self._map.items():
            if _same_value(v, value):
                result.append(key)
        return result

    def merge(self, other: Optional[Mapping[K, V]]) -> Hash[K, V]:
        """Return a new hash with the entries of this one overlaid by ``other``.

        On a key collision the value from ``other`` wins. Neither input is
        modified. When ``other`` is None the result is a plain copy.
        """
        result = Hash.of(self)
        result.put_all(other)
        return result

    def merge_in_place(self, other: Optional[Mapping[K, V]]) -> Hash[K, V]:
        """Overlay the entries of ``other`` onto this hash.

        Same collision rule as merge(). Does nothing when ``other`` is None.

        Returns:
            This hash.
        """
        if other is not None:
            self.put_all(other)
            _logger.debug("merged %d entries in place", len(other))
        return self

    # Python mapping protocol

    @override
    def __getitem__(self, key: K) -> V:
        return self._map[key]

    @override
    def __setitem__(self, key: K, value: V) -> None:
        self._map[key] = value

    @override
    def __delitem__(self, key: K) -> None:
        del self._map[key]

    @override
    def __iter__(self) -> Iterator[K]:
        return iter(self._map)

    @override
    def __contains__(self, key: Any) -> bool:
        return key in self._map

    @override
    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, Mapping):
            return NotImplemented
        if len(self._map) != len(other):
            return False
        return dict(self._map.items()) == dict(other.items())

    def __repr__(self) -> str:
        return f"Hash({dict(self._map.items())!r})"
