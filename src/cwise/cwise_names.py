"""Synthetic name generation and escaping."""

import re
from typing import Iterable, List, Tuple


def escape_identifier(name: str) -> str:
    """Double every underscore so no escaped name can contain a lone `_`."""
    return name.replace('_', '__')


def escape_string(value: str) -> str:
    """
    Render a string value as a single-quoted JavaScript literal.

    Underscores are written as `\\_`, which JavaScript reads back as a plain
    underscore, so the literal text never resembles a generated name.

    Args:
        value: The literal's decoded value

    Returns:
        Quoted literal source text
    """
    escaped = (
        value.replace('\\', '\\\\')
        .replace("'", "\\'")
        .replace('\n', '\\n')
        .replace('\r', '\\r')
        .replace('\u2028', '\\u2028')
        .replace('\u2029', '\\u2029')
        .replace('_', '\\_')
    )
    return f"'{escaped}'"


def unique_names(names: Iterable[str]) -> Tuple[str, ...]:
    """Drop repeated names, keeping the first occurrence of each."""
    return tuple(dict.fromkeys(names))


class RoutineNamer:
    """Generates the synthetic names used by one compilation."""

    def __init__(self, prefix: str, prefix_stem: str):
        """
        Initialize the namer.

        Args:
            prefix: Call-scoped prefix, e.g. `_inline_7_`
            prefix_stem: Stem all prefixes share, e.g. `_inline_`
        """
        self.prefix = prefix
        self._synthetic_re = re.compile(rf'^(?:{re.escape(prefix_stem)}\d+_|this_)')
        self._local_names: List[str] = []
        self._this_names: List[str] = []

    def argument(self, index: int) -> str:
        """Name for the parameter at position `index`."""
        return f"{self.prefix}arg{index}_"

    def local(self, name: str) -> str:
        """Name for a routine-local variable; recorded in local_names()."""
        synthetic = self.prefix + escape_identifier(name)
        self._local_names.append(synthetic)
        return synthetic

    def this_property(self, name: str) -> str:
        """
        Name for a `this.name` access; recorded in this_names().

        Carries no call prefix: every routine compiled against the same context
        refers to one shared variable per property.
        """
        synthetic = f"this_{escape_identifier(name)}"
        self._this_names.append(synthetic)
        return synthetic

    def looks_synthetic(self, name: str) -> bool:
        """True if `name` matches the shape of a generated name."""
        return self._synthetic_re.match(name) is not None

    def local_names(self) -> Tuple[str, ...]:
        return unique_names(self._local_names)

    def this_names(self) -> Tuple[str, ...]:
        return unique_names(self._this_names)
