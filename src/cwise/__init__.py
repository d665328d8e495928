"""
Elementwise routine compiler.

This package rewrites a single JavaScript function into a body that can be
inlined into a generated iteration kernel, together with metadata describing
how each parameter and each `this` property is used.
"""

from cwise.cwise_anchor import AnchorExtractor, AnchoredFunction
from cwise.cwise_compiler import RoutineCompiler, compile_routine
from cwise.cwise_config import DEFAULT_GLOBALS, CwiseConfig
from cwise.cwise_edits import EditBuffer
from cwise.cwise_exceptions import (
    CwiseConfigError,
    CwiseEditError,
    CwiseError,
    CwiseRangeError,
    CwiseSyntaxError,
    CwiseUnsupportedError,
)
from cwise.cwise_names import RoutineNamer, escape_identifier, escape_string, unique_names
from cwise.cwise_rewriter import RoutineRewriter, get_usage
from cwise.cwise_sequence import PrefixSequence
from cwise.cwise_types import ArgumentUsage, CompiledRoutine, TextEdit, Usage

__all__ = [
    # Exceptions
    'CwiseError',
    'CwiseSyntaxError',
    'CwiseUnsupportedError',
    'CwiseRangeError',
    'CwiseEditError',
    'CwiseConfigError',
    # Types
    'ArgumentUsage',
    'CompiledRoutine',
    'TextEdit',
    'Usage',
    'AnchoredFunction',
    # Configuration
    'CwiseConfig',
    'DEFAULT_GLOBALS',
    'PrefixSequence',
    # Core classes
    'AnchorExtractor',
    'EditBuffer',
    'RoutineNamer',
    'RoutineRewriter',
    'RoutineCompiler',
    # Functions
    'compile_routine',
    'escape_identifier',
    'escape_string',
    'get_usage',
    'unique_names',
]
