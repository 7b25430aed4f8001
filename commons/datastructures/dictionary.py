from __future__ import annotations
import logging
from itertools import chain as _concat
from typing import Any, Callable, Generic, Iterator, List, Optional, Tuple, TypeVar, Union

from .chain import Chain, Entry
from .errors import ConcurrentModificationError, DictionaryDestroyedError
from .hashing import one_at_a_time

V = TypeVar("V")

KeyLike = Union[str, bytes, bytearray, memoryview]

logger = logging.getLogger(__name__)

_HASH_MASK = 0xFFFFFFFF
_MISSING: Any = object()


class Dictionary(Generic[V]):
    """A separate-chaining hash table mapping byte-string keys to opaque values.

    Implementation notes
    --------------------
    • Buckets are lazily created :class:`Chain` objects; an empty bucket is None.
    • Growth doubles the capacity once the number of *occupied buckets* (not
      entries) reaches the capacity. The table never shrinks.
    • ``put`` never replaces: duplicate keys produce duplicate entries and
      lookups/removals act on the earliest one in chain order.
    • Keys are copied to immutable ``bytes`` on insertion; text keys are
      encoded as UTF-8. Embedded NUL bytes are rejected.
    • The optional *destructor* is called with a value whenever its entry is
      destroyed (``remove_and_destroy``, ``clean``, ``destroy``). ``remove``
      hands the value back instead and never calls it.
    • Iterators are fail-fast: a structural change while one is active makes
      it raise :class:`ConcurrentModificationError`.
    """

    __slots__ = (
        "_buckets",
        "_cap",
        "_occupied",
        "_size",
        "_destructor",
        "_hash",
        "_compare_keys",
        "_version",
    )

    # Bucket count of a freshly created dictionary.
    DEFAULT_INITIAL_CAPACITY = 20

    def __init__(
        self,
        destructor: Optional[Callable[[V], Any]] = None,
        *,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
        hash_function: Callable[[bytes], int] = one_at_a_time,
        compare_keys: bool = True,
    ) -> None:
        if destructor is not None and not callable(destructor):
            raise TypeError("destructor must be callable or None")
        if not callable(hash_function):
            raise TypeError("hash_function must be callable")
        if initial_capacity < 1:
            raise ValueError("initial_capacity must be at least 1")
        self._destructor = destructor
        self._hash = hash_function
        self._compare_keys = compare_keys
        self._cap: int = initial_capacity
        self._buckets: Optional[List[Optional[Chain[V]]]] = [None] * self._cap
        self._occupied: int = 0
        self._size: int = 0
        self._version: int = 0

    # -----------------------------
    # Internal helpers
    # -----------------------------
    @staticmethod
    def _key_bytes(key: KeyLike) -> bytes:
        """Normalize *key* into an owned ``bytes`` copy."""
        if isinstance(key, str):
            data = key.encode("utf-8")
        elif isinstance(key, (bytes, bytearray, memoryview)):
            data = bytes(key)
        else:
            raise TypeError(f"key must be str or bytes, not {type(key).__name__}")
        if b"\x00" in data:
            raise ValueError("key must not contain NUL bytes")
        return data

    def _alive(self) -> List[Optional[Chain[V]]]:
        if self._buckets is None:
            raise DictionaryDestroyedError("dictionary has been destroyed")
        return self._buckets

    def _locate(self, key: KeyLike) -> Tuple[bytes, int, int]:
        """Return (key bytes, key hash, bucket index) for *key*."""
        data = self._key_bytes(key)
        key_hash = self._hash(data) & _HASH_MASK
        return data, key_hash, key_hash % self._cap

    def _find(self, key: KeyLike) -> Optional[Entry[V]]:
        buckets = self._alive()
        data, key_hash, idx = self._locate(key)
        bucket = buckets[idx]
        if bucket is None:
            return None
        return bucket.find(key_hash, data, self._compare_keys)

    def _unlink(self, key: KeyLike) -> Optional[Entry[V]]:
        buckets = self._alive()
        data, key_hash, idx = self._locate(key)
        bucket = buckets[idx]
        if bucket is None:
            return None
        entry = bucket.unlink(key_hash, data, self._compare_keys)
        if entry is None:
            return None
        if not bucket:
            buckets[idx] = None
            self._occupied -= 1
        self._size -= 1
        self._version += 1
        return entry

    def _destroy_value(self, value: V) -> None:
        if self._destructor is not None:
            self._destructor(value)

    def _entries(self) -> Iterator[Entry[V]]:
        """Walk buckets then chains, failing fast on structural changes."""
        buckets = self._alive()
        version = self._version
        for bucket in buckets:
            if bucket is None:
                continue
            for entry in bucket:
                yield entry
                if self._version != version:
                    raise ConcurrentModificationError("dictionary changed during iteration")

    def _allocate_table(self, capacity: int, pending: Entry[V]) -> List[Optional[Chain[V]]]:
        """Build the empty bucket array (and its chains) a resize will fill.

        Everything the resize needs is allocated here, before any entry is
        moved, so running out of memory leaves the current table intact.
        """
        table: List[Optional[Chain[V]]] = [None] * capacity
        for entry in _concat(self._entries(), (pending,)):
            idx = entry.key_hash % capacity
            if table[idx] is None:
                table[idx] = Chain()
        return table

    def _rehash(self, table: List[Optional[Chain[V]]]) -> None:
        """Move every entry into *table* and make it the live bucket array."""
        old_cap = self._cap
        new_cap = len(table)
        occupied = 0
        for bucket in self._alive():
            if bucket is None:
                continue
            for entry in bucket.drain():
                target = table[entry.key_hash % new_cap]
                if not target:
                    occupied += 1
                target.append(entry)  # type: ignore[union-attr]
        self._buckets = table
        self._cap = new_cap
        self._occupied = occupied
        logger.debug("resized dictionary %d -> %d buckets (%d entries)", old_cap, new_cap, self._size)

    # -----------------------------
    # Core operations
    # -----------------------------
    def put(self, key: KeyLike, value: V) -> None:
        """Append a (key, value) entry; existing entries for *key* are kept."""
        buckets = self._alive()
        data, key_hash, idx = self._locate(key)
        entry = Entry(data, key_hash, value)
        bucket = buckets[idx]

        table = None
        if bucket is None and self._occupied + 1 >= self._cap:
            table = self._allocate_table(self._cap * 2, entry)

        if bucket is None:
            buckets[idx] = Chain(entry)
            self._occupied += 1
        else:
            bucket.append(entry)
        self._size += 1
        self._version += 1

        if table is not None:
            self._rehash(table)

    def get(self, key: KeyLike, default: Optional[V] = None) -> Optional[V]:
        """Return the value of the first entry for *key*, or *default*."""
        entry = self._find(key)
        return default if entry is None else entry.value

    def remove(self, key: KeyLike, default: Any = _MISSING) -> Any:
        """Detach the first entry for *key* and return its value.

        The destructor is not called: ownership of the value goes back to the
        caller. Raises KeyError when *key* is absent and no *default* is given.
        """
        entry = self._unlink(key)
        if entry is None:
            if default is _MISSING:
                raise KeyError(key)
            return default
        return entry.value

    def remove_and_destroy(self, key: KeyLike) -> bool:
        """Remove the first entry for *key*, passing its value to the destructor."""
        entry = self._unlink(key)
        if entry is None:
            return False
        self._destroy_value(entry.value)
        return True

    def iterate(self, closure: Callable[[V], Any]) -> None:
        """Call *closure* with every stored value."""
        if not callable(closure):
            raise TypeError("closure must be callable")
        for entry in self._entries():
            closure(entry.value)

    def clean(self) -> None:
        """Destroy every entry; the capacity is left as it is.

        Every bucket is detached before the first destructor runs, so the
        table is empty even if a destructor raises. An ordinary exception is
        re-raised once every value has been passed to the destructor.
        """
        buckets = self._alive()
        destroyed = self._size
        detached = [bucket for bucket in buckets if bucket is not None]
        buckets[:] = [None] * len(buckets)
        self._occupied = 0
        self._size = 0
        self._version += 1

        first_error: Optional[Exception] = None
        for bucket in detached:
            for entry in bucket.drain():
                try:
                    self._destroy_value(entry.value)
                except Exception as exc:
                    if first_error is None:
                        first_error = exc
                    else:
                        logger.error("destructor failed for key %r", entry.key, exc_info=exc)
        logger.debug("cleaned dictionary (%d entries destroyed)", destroyed)
        if first_error is not None:
            raise first_error

    def destroy(self) -> None:
        """Clean the dictionary and release its bucket array for good."""
        try:
            self.clean()
        finally:
            self._buckets = None
            self._version += 1
            logger.debug("destroyed dictionary")

    # -----------------------------
    # Queries
    # -----------------------------
    def is_empty(self) -> bool:
        self._alive()
        return self._size == 0

    def size(self) -> int:
        self._alive()
        return self._size

    @property
    def capacity(self) -> int:
        self._alive()
        return self._cap

    @property
    def occupied_buckets(self) -> int:
        self._alive()
        return self._occupied

    @property
    def destroyed(self) -> bool:
        return self._buckets is None

    # -----------------------------
    # Iteration helpers
    # -----------------------------
    # These are generators: on a destroyed dictionary the error surfaces on
    # the first next(), not when the method is called.
    def items(self) -> Iterator[Tuple[bytes, V]]:
        """Yield (key, value) pairs in bucket order, then chain order."""
        for entry in self._entries():
            yield entry.key, entry.value

    def keys(self) -> Iterator[bytes]:
        """Yield stored keys as bytes; raises lazily once destroyed."""
        for entry in self._entries():
            yield entry.key

    def values(self) -> Iterator[V]:
        """Yield stored values; raises lazily once destroyed."""
        for entry in self._entries():
            yield entry.value

    # -----------------------------
    # Standard magic methods
    # -----------------------------
    def __getitem__(self, key: KeyLike) -> V:
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __setitem__(self, key: KeyLike, value: V) -> None:
        self.put(key, value)

    def __delitem__(self, key: KeyLike) -> None:
        if not self.remove_and_destroy(key):
            raise KeyError(key)

    def __contains__(self, key: KeyLike) -> bool:
        return self._find(key) is not None

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[bytes]:
        return self.keys()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        if self._buckets is None:
            return "Dictionary(<destroyed>)"
        pairs = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"Dictionary({{{pairs}}})"
