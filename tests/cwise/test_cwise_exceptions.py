"""Tests for routine compiler exceptions."""

import pytest

from cwise.cwise_exceptions import (
    CwiseConfigError,
    CwiseEditError,
    CwiseError,
    CwiseRangeError,
    CwiseSyntaxError,
    CwiseUnsupportedError,
)


class TestCwiseError:
    """Test base CwiseError exception."""

    def test_create_simple_error(self):
        """Test creating a simple error without details."""
        error = CwiseError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.error_details is None

    def test_create_error_with_details(self):
        """Test creating an error with details."""
        error = CwiseError("Rejected", error_details={'construct': 'with', 'range': [3, 9]})

        assert error.error_details['construct'] == 'with'
        assert error.error_details['range'] == [3, 9]


class TestCwiseErrorSubclasses:
    """Test the exception hierarchy."""

    @pytest.mark.parametrize("error_class", [
        CwiseSyntaxError,
        CwiseUnsupportedError,
        CwiseRangeError,
        CwiseEditError,
        CwiseConfigError,
    ])
    def test_inherits_from_cwise_error(self, error_class):
        """Test that every specific error can be caught as CwiseError."""
        with pytest.raises(CwiseError) as exc_info:
            raise error_class("failed", {'phase': 'test'})

        assert exc_info.value.error_details == {'phase': 'test'}
        assert str(exc_info.value) == "failed"
