"""Call-scoped naming prefixes."""

import threading

from cwise.cwise_config import DEFAULT_PREFIX_STEM


class PrefixSequence:
    """
    Monotonic source of call-scoped naming prefixes.

    Every call to next_prefix() consumes one number, so two compilations that
    draw from the same sequence can never generate the same synthetic names.
    Safe to share between threads.
    """

    def __init__(self, start: int = 0):
        """
        Initialize the sequence.

        Args:
            start: First number handed out
        """
        if start < 0:
            raise ValueError(f"Sequence start must be non-negative: {start}")

        self._next = start
        self._lock = threading.Lock()

    def next_number(self) -> int:
        """Consume and return the next number."""
        with self._lock:
            number = self._next
            self._next += 1

        return number

    def next_prefix(self, stem: str = DEFAULT_PREFIX_STEM) -> str:
        """Consume the next number and return it as a prefix, e.g. `_inline_3_`."""
        return f"{stem}{self.next_number()}_"

    def peek(self) -> int:
        """Return the number the next call will consume."""
        with self._lock:
            return self._next


DEFAULT_SEQUENCE = PrefixSequence()
