from __future__ import annotations
from typing import Generic, Iterator, Optional, TypeVar

V = TypeVar("V")


class Entry(Generic[V]):
    """One stored association: an owned key copy, its cached hash and the value."""

    __slots__ = ("key", "value", "key_hash", "next")

    def __init__(self, key: bytes, key_hash: int, value: V) -> None:
        self.key = key
        self.key_hash = key_hash
        self.value = value
        self.next: Optional[Entry[V]] = None

    def matches(self, key_hash: int, key: bytes, compare_keys: bool = True) -> bool:
        """Hash equality is the pre-filter; *compare_keys* also checks the bytes."""
        if self.key_hash != key_hash:
            return False
        return not compare_keys or self.key == key

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"Entry({self.key!r}, 0x{self.key_hash:08x}, {self.value!r})"


class Chain(Generic[V]):
    """Singly-linked collision chain for one bucket of a :class:`Dictionary`.

    New entries go to the tail, so a walk from the head visits entries in the
    order they were placed into this bucket.
    """

    __slots__ = ("head",)

    def __init__(self, head: Optional[Entry[V]] = None) -> None:
        self.head = head

    def append(self, entry: Entry[V]) -> None:
        """Link *entry* after the current tail (O(chain length))."""
        entry.next = None
        if self.head is None:
            self.head = entry
            return
        n = self.head
        while n.next is not None:
            n = n.next
        n.next = entry

    def find(self, key_hash: int, key: bytes, compare_keys: bool = True) -> Optional[Entry[V]]:
        """Return the first matching entry, or None."""
        n = self.head
        while n is not None:
            if n.matches(key_hash, key, compare_keys):
                return n
            n = n.next
        return None

    def unlink(self, key_hash: int, key: bytes, compare_keys: bool = True) -> Optional[Entry[V]]:
        """Detach the first matching entry and return it; None if nothing matched."""
        prev: Optional[Entry[V]] = None
        cur = self.head
        while cur is not None:
            if cur.matches(key_hash, key, compare_keys):
                if prev is None:
                    self.head = cur.next
                else:
                    prev.next = cur.next
                cur.next = None
                return cur
            prev, cur = cur, cur.next
        return None

    def drain(self) -> Iterator[Entry[V]]:
        """Detach every entry, yielding each one with its link cleared."""
        n = self.head
        self.head = None
        while n is not None:
            nxt = n.next
            n.next = None
            yield n
            n = nxt

    def __iter__(self) -> Iterator[Entry[V]]:
        n = self.head
        while n is not None:
            yield n
            n = n.next

    def __bool__(self) -> bool:
        return self.head is not None

    def __len__(self) -> int:
        return sum(1 for _ in self)
