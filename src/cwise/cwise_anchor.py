"""Locate the function node of a routine's source text."""

import logging
from dataclasses import dataclass
from typing import Any, List, Tuple

import esprima
from esprima import nodes
from esprima.error_handler import Error as EsprimaError

from cwise.cwise_exceptions import CwiseRangeError, CwiseSyntaxError, CwiseUnsupportedError


FUNCTION_NODE_TYPES = ('FunctionExpression', 'ArrowFunctionExpression')


@dataclass
class AnchoredFunction:
    """A parsed routine with its function node located."""

    text: str  # Wrapped source; every node range indexes into this
    function: nodes.Node
    param_names: List[str]
    body: nodes.Node
    body_range: Tuple[int, int]

    @property
    def is_expression_body(self) -> bool:
        """True for arrow functions of the form `(a) => a + 1`."""
        return self.body.type != 'BlockStatement'


def node_range(node: nodes.Node) -> Tuple[int, int]:
    """
    Return a node's [start, end) source offsets.

    Raises:
        CwiseRangeError: If the parser attached no range to the node
    """
    node_span = getattr(node, 'range', None)
    if not node_span:
        raise CwiseRangeError(
            f"Node of type {getattr(node, 'type', '?')} has no source range",
            {'node_type': getattr(node, 'type', None)}
        )

    return node_span[0], node_span[1]


def routine_source(func: Any) -> str:
    """
    Recover the function text from a routine handle.

    Args:
        func: Function source text, or an object exposing it as a `source` string

    Returns:
        The function's source text

    Raises:
        TypeError: If no source text can be recovered
    """
    if isinstance(func, str):
        return func

    source = getattr(func, 'source', None)
    if isinstance(source, str):
        return source

    raise TypeError(f"Cannot recover routine source from {type(func).__name__}")


class AnchorExtractor:
    """
    Parses routine text by wrapping it as an immediately invoked call.

    Wrapping as `(<text>)()` makes named declarations, anonymous functions and
    arrow functions all parse as the callee of a single call expression.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger("AnchorExtractor")

    def extract(self, func: Any) -> AnchoredFunction:
        """
        Parse a routine and locate its function node.

        Args:
            func: Function source text or a handle exposing it

        Returns:
            The anchored function

        Raises:
            TypeError: If the routine source cannot be recovered
            CwiseSyntaxError: If the text is not a single parseable function
            CwiseUnsupportedError: If the function form cannot be inlined
        """
        source = routine_source(func)
        text = f"({source})()"

        try:
            tree = esprima.parseScript(text, {'range': True})

        except EsprimaError as e:
            # Offsets are reported against the unwrapped source
            index = getattr(e, 'index', None)
            error_details = {
                'phase': 'parsing',
                'reason': getattr(e, 'description', None) or str(e),
                'index': index - 1 if isinstance(index, int) and index > 0 else index,
                'line': getattr(e, 'lineNumber', None),
                'column': getattr(e, 'column', None),
            }
            raise CwiseSyntaxError(f"Routine does not parse: {e}", error_details) from e

        function = self._locate_function(tree)
        param_names = self._param_names(function)

        body = function.body
        anchored = AnchoredFunction(
            text=text,
            function=function,
            param_names=param_names,
            body=body,
            body_range=node_range(body)
        )

        self._logger.debug(
            "Anchored %s with %d parameter(s)", function.type, len(param_names)
        )
        return anchored

    def _locate_function(self, tree: nodes.Node) -> nodes.Node:
        statements = tree.body or []
        if len(statements) != 1 or statements[0].type != 'ExpressionStatement':
            raise CwiseSyntaxError(
                'Routine source must be exactly one function',
                {'phase': 'anchoring', 'statements': len(statements)}
            )

        call = statements[0].expression
        if call.type != 'CallExpression' or call.arguments:
            raise CwiseSyntaxError(
                'Routine source must be exactly one function',
                {'phase': 'anchoring', 'expression_type': call.type}
            )

        function = call.callee
        if function.type not in FUNCTION_NODE_TYPES:
            raise CwiseSyntaxError(
                f'Routine source is a {function.type}, not a function',
                {'phase': 'anchoring', 'expression_type': function.type}
            )

        is_async = getattr(function, 'isAsync', False) or getattr(function, 'async', False)
        if getattr(function, 'generator', False) or is_async:
            raise CwiseUnsupportedError(
                'Generator and async functions cannot be inlined',
                {'construct': 'async' if is_async else 'generator',
                 'range': list(node_range(function))}
            )

        return function

    def _param_names(self, function: nodes.Node) -> List[str]:
        names: List[str] = []
        for param in function.params:
            if param.type != 'Identifier':
                raise CwiseUnsupportedError(
                    f'Parameters must be plain identifiers, got {param.type}',
                    {'construct': param.type, 'range': list(node_range(param))}
                )

            names.append(param.name)

        return names
