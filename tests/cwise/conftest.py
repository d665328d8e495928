"""Shared fixtures and utilities for routine compiler tests."""

import pytest
from typing import Callable, Dict, Optional

from cwise.cwise_compiler import RoutineCompiler
from cwise.cwise_config import CwiseConfig
from cwise.cwise_sequence import PrefixSequence
from cwise.cwise_types import CompiledRoutine


@pytest.fixture
def compiler():
    """Create a compiler with its own sequence, so the first prefix is `_inline_0_`."""
    return RoutineCompiler(sequence=PrefixSequence())


@pytest.fixture
def compiler_factory():
    """Factory for compilers with custom configuration."""
    def _create_compiler(
        config: Optional[CwiseConfig] = None,
        sequence: Optional[PrefixSequence] = None,
        is_global: Optional[Callable[[str], bool]] = None
    ) -> RoutineCompiler:
        return RoutineCompiler(
            config=config,
            sequence=sequence if sequence is not None else PrefixSequence(),
            is_global=is_global
        )
    return _create_compiler


class CwiseTestHelpers:
    """Helper utilities for routine compiler testing."""

    @staticmethod
    def restore(body: str, replacements: Dict[str, str]) -> str:
        """Substitute synthetic names back to their source forms, longest first."""
        for synthetic in sorted(replacements, key=len, reverse=True):
            body = body.replace(synthetic, replacements[synthetic])

        return body

    @staticmethod
    def call_scoped_names(routine: CompiledRoutine) -> set:
        """Every argument and local name a routine generated."""
        names = {arg.name for arg in routine.args}
        names.update(routine.local_vars)
        return names


@pytest.fixture
def helpers():
    """Provide helper utilities."""
    return CwiseTestHelpers
