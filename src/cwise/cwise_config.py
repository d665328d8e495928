"""
Configuration for the routine compiler.

The set of ambient globals decides which free identifiers in a routine body
are left alone; every other free identifier is treated as routine-local and
renamed.
"""

import os
import re
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List

import yaml

from cwise.cwise_exceptions import CwiseConfigError


# ECMAScript standard built-ins plus the host globals routines commonly touch.
DEFAULT_GLOBALS: FrozenSet[str] = frozenset({
    'Array', 'ArrayBuffer', 'BigInt', 'BigInt64Array', 'BigUint64Array', 'Boolean',
    'DataView', 'Date', 'Error', 'EvalError', 'Float32Array', 'Float64Array',
    'Function', 'Infinity', 'Int8Array', 'Int16Array', 'Int32Array', 'Intl', 'JSON',
    'Map', 'Math', 'NaN', 'Number', 'Object', 'Promise', 'Proxy', 'RangeError',
    'ReferenceError', 'Reflect', 'RegExp', 'Set', 'String', 'Symbol', 'SyntaxError',
    'TypeError', 'URIError', 'Uint8Array', 'Uint8ClampedArray', 'Uint16Array',
    'Uint32Array', 'WeakMap', 'WeakSet', 'console', 'decodeURI',
    'decodeURIComponent', 'encodeURI', 'encodeURIComponent', 'globalThis',
    'isFinite', 'isNaN', 'parseFloat', 'parseInt', 'undefined'
})

DEFAULT_PREFIX_STEM = "_inline_"

_IDENTIFIER_RE = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')


@dataclass(frozen=True)
class CwiseConfig:
    """Configuration for compiling routines."""

    globals: FrozenSet[str] = field(default_factory=lambda: DEFAULT_GLOBALS)
    prefix_stem: str = DEFAULT_PREFIX_STEM

    @classmethod
    def load_from_file(cls, config_path: str) -> 'CwiseConfig':
        """
        Load configuration from a YAML file.

        Recognised keys are `globals` (replaces the default set), `extra_globals`
        (added to whichever set is in effect) and `prefix_stem`.

        Args:
            config_path: Path to the YAML file

        Returns:
            Loaded configuration

        Raises:
            FileNotFoundError: If the file does not exist
            CwiseConfigError: If the file content is malformed or invalid
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)

            except yaml.YAMLError as e:
                raise CwiseConfigError(
                    f"Invalid YAML in configuration file: {config_path}",
                    {'path': config_path, 'reason': str(e)}
                ) from e

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise CwiseConfigError(
                f"Configuration file must contain a mapping: {config_path}",
                {'path': config_path}
            )

        names = set(_string_list(data, 'globals', DEFAULT_GLOBALS))
        names.update(_string_list(data, 'extra_globals', []))

        config = cls(
            globals=frozenset(names),
            prefix_stem=data.get('prefix_stem', DEFAULT_PREFIX_STEM)
        )

        errors = config.validate()
        if errors:
            raise CwiseConfigError(
                f"Invalid configuration in {config_path}",
                {'path': config_path, 'errors': errors}
            )

        return config

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        data = {
            'globals': sorted(self.globals),
            'prefix_stem': self.prefix_stem
        }

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=True)

    def with_globals(self, names: Iterable[str]) -> 'CwiseConfig':
        """Return a copy with additional ambient globals."""
        return replace(self, globals=self.globals | frozenset(names))

    def validate(self) -> List[str]:
        """
        Validate the configuration.

        Returns:
            List of error messages, empty if the configuration is valid
        """
        errors = []

        if not isinstance(self.prefix_stem, str) or not _IDENTIFIER_RE.match(self.prefix_stem):
            errors.append(f"prefix_stem must be an identifier: {self.prefix_stem!r}")

        elif not self.prefix_stem.endswith('_'):
            errors.append(f"prefix_stem must end with '_': {self.prefix_stem!r}")

        for name in sorted(self.globals):
            if not _IDENTIFIER_RE.match(name):
                errors.append(f"Global is not an identifier: {name!r}")

        if 'eval' in self.globals:
            errors.append("'eval' can never be an ambient global")

        return errors


def _string_list(data: dict, key: str, default: Iterable[str]) -> List[str]:
    value = data.get(key)
    if value is None:
        return list(default)

    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CwiseConfigError(f"'{key}' must be a list of strings", {'key': key, 'value': value})

    return value
