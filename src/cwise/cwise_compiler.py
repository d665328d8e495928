"""Compile a routine's source text into a CompiledRoutine."""

import logging
from typing import Any, Callable, Optional

from cwise.cwise_anchor import AnchorExtractor
from cwise.cwise_config import CwiseConfig
from cwise.cwise_exceptions import CwiseConfigError
from cwise.cwise_names import RoutineNamer
from cwise.cwise_rewriter import RoutineRewriter
from cwise.cwise_sequence import DEFAULT_SEQUENCE, PrefixSequence
from cwise.cwise_types import CompiledRoutine


class RoutineCompiler:
    """
    Compiles elementwise routines for inlining into generated kernels.

    Each call to compile() draws a fresh prefix from the compiler's sequence,
    so bodies compiled by compilers sharing a sequence can be concatenated
    without name collisions.

    Usage::

        compiler = RoutineCompiler()
        routine = compiler.compile("function(a, b) { return a + b }")
    """

    def __init__(
        self,
        config: Optional[CwiseConfig] = None,
        sequence: Optional[PrefixSequence] = None,
        is_global: Optional[Callable[[str], bool]] = None
    ):
        """
        Initialize the compiler.

        Args:
            config: Compiler configuration; defaults to CwiseConfig()
            sequence: Prefix source; defaults to the process-wide sequence
            is_global: Optional predicate naming further ambient globals

        Raises:
            CwiseConfigError: If the configuration is invalid
        """
        self._config = config if config is not None else CwiseConfig()
        errors = self._config.validate()
        if errors:
            raise CwiseConfigError('Invalid compiler configuration', {'errors': errors})

        self._sequence = sequence if sequence is not None else DEFAULT_SEQUENCE
        self._extra_global = is_global
        self._extractor = AnchorExtractor()
        self._logger = logging.getLogger("RoutineCompiler")

    @property
    def config(self) -> CwiseConfig:
        return self._config

    def is_global(self, name: str) -> bool:
        """Return True if `name` is an ambient global left unrewritten."""
        if name == 'eval':
            return False

        if name in self._config.globals:
            return True

        return self._extra_global is not None and bool(self._extra_global(name))

    def compile(self, func: Any) -> CompiledRoutine:
        """
        Compile one routine.

        Args:
            func: Function source text, or an object exposing it as `source`

        Returns:
            The compiled routine

        Raises:
            TypeError: If no source text can be recovered from `func`
            CwiseSyntaxError: If the source is not a single parseable function
            CwiseUnsupportedError: If the routine uses a construct that cannot be inlined
            CwiseRangeError: If the parser output lacks source ranges
            CwiseEditError: If rewrites conflict
        """
        anchored = self._extractor.extract(func)

        prefix = self._sequence.next_prefix(self._config.prefix_stem)
        namer = RoutineNamer(prefix, self._config.prefix_stem)
        rewriter = RoutineRewriter(anchored, namer, self.is_global)

        body = rewriter.rewrite()
        routine = CompiledRoutine(
            body=body,
            args=tuple(rewriter.arguments()),
            this_vars=namer.this_names(),
            local_vars=namer.local_names()
        )

        self._logger.debug(
            "Compiled routine %s: %d arg(s), %d local(s), %d this var(s)",
            prefix, routine.arity, len(routine.local_vars), len(routine.this_vars)
        )
        return routine


def compile_routine(
    func: Any,
    config: Optional[CwiseConfig] = None,
    is_global: Optional[Callable[[str], bool]] = None
) -> CompiledRoutine:
    """
    Compile one routine using the process-wide prefix sequence.

    Args:
        func: Function source text, or an object exposing it as `source`
        config: Optional compiler configuration
        is_global: Optional predicate naming further ambient globals

    Returns:
        The compiled routine
    """
    return RoutineCompiler(config=config, is_global=is_global).compile(func)
