"""Shared dataclasses for routine compilation."""

from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Dict, Tuple


class Usage(IntFlag):
    """How a single identifier occurrence uses its binding."""

    NONE = 0
    WRITE = 1
    READ = 2


@dataclass(frozen=True)
class ArgumentUsage:
    """Accumulated usage of one declared parameter."""

    name: str  # Synthetic name the parameter is renamed to
    is_written: bool
    is_read: bool
    occurrence_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Return the interchange form consumed by kernel generators."""
        return {
            'name': self.name,
            'lvalue': self.is_written,
            'rvalue': self.is_read,
            'count': self.occurrence_count
        }


@dataclass(frozen=True)
class CompiledRoutine:
    """A rewritten function body plus its usage metadata."""

    body: str
    args: Tuple[ArgumentUsage, ...]
    this_vars: Tuple[str, ...]  # Unique, order carries no meaning
    local_vars: Tuple[str, ...]  # Unique, order carries no meaning

    @property
    def arity(self) -> int:
        """Number of declared parameters."""
        return len(self.args)

    def to_dict(self) -> Dict[str, Any]:
        """Return the interchange form consumed by kernel generators."""
        return {
            'body': self.body,
            'args': [arg.to_dict() for arg in self.args],
            'thisVars': list(self.this_vars),
            'localVars': list(self.local_vars)
        }


@dataclass(frozen=True)
class TextEdit:
    """Replacement of the source text in [start, end)."""

    start: int
    end: int
    replacement: str
