class DictionaryError(Exception):
    """Base class for errors raised by :class:`~commons.datastructures.Dictionary`."""


class DictionaryDestroyedError(DictionaryError):
    """Raised when a dictionary is used after :meth:`Dictionary.destroy`."""


class ConcurrentModificationError(DictionaryError, RuntimeError):
    """Raised when a dictionary is mutated while it is being iterated."""
