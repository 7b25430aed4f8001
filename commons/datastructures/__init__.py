from .chain import Chain, Entry
from .dictionary import Dictionary
from .errors import ConcurrentModificationError, DictionaryDestroyedError, DictionaryError
from .hashing import one_at_a_time

__all__ = [
    "Chain",
    "Entry",
    "Dictionary",
    "DictionaryError",
    "DictionaryDestroyedError",
    "ConcurrentModificationError",
    "one_at_a_time",
]
