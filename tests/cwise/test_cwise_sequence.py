"""Tests for the prefix sequence."""

import threading

import pytest

from cwise.cwise_sequence import PrefixSequence


class TestPrefixSequence:
    """Test call-scoped prefix generation."""

    def test_starts_at_zero(self):
        """Test the default first prefix."""
        sequence = PrefixSequence()

        assert sequence.next_prefix() == "_inline_0_"
        assert sequence.next_prefix() == "_inline_1_"

    def test_custom_start_and_stem(self):
        """Test a custom start number and stem."""
        sequence = PrefixSequence(start=41)

        assert sequence.next_prefix("_k_") == "_k_41_"

    def test_peek_does_not_consume(self):
        """Test that peek leaves the sequence unchanged."""
        sequence = PrefixSequence()

        assert sequence.peek() == 0
        assert sequence.peek() == 0
        assert sequence.next_number() == 0
        assert sequence.peek() == 1

    def test_negative_start_rejected(self):
        """Test that a negative start is refused."""
        with pytest.raises(ValueError):
            PrefixSequence(start=-1)

    def test_concurrent_callers_get_distinct_numbers(self):
        """Test that numbers stay unique under concurrent use."""
        sequence = PrefixSequence()
        results = []
        results_lock = threading.Lock()

        def worker():
            taken = [sequence.next_number() for _ in range(200)]
            with results_lock:
                results.extend(taken)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()

        for thread in threads:
            thread.join()

        assert len(results) == 1600
        assert len(set(results)) == 1600
        assert sequence.peek() == 1600
