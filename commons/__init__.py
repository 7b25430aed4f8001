from .datastructures import (
    ConcurrentModificationError,
    Dictionary,
    DictionaryDestroyedError,
    DictionaryError,
    one_at_a_time,
)

__all__ = [
    "Dictionary",
    "DictionaryError",
    "DictionaryDestroyedError",
    "ConcurrentModificationError",
    "one_at_a_time",
]
