"""
Routine body rewriter.

A single recursive walk over a routine's function body that:

- classifies every parameter occurrence as a write, a read, or both
- renames parameters, routine-local variables and `this.<prop>` accesses
  to call-scoped synthetic names
- re-emits string literals in a normalised, underscore-escaped form
- rejects constructs that cannot survive flattening (`eval`, `with`,
  computed or bare `this`)

Rewrites are recorded as edits against the wrapped source text and spliced in
one pass at the end, so the walk never has to track offset shifts.

Parameters are matched by name only.  A nested function that shadows a
parameter name still has its occurrences attributed to the parameter.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from esprima import nodes

from cwise.cwise_anchor import AnchoredFunction, node_range
from cwise.cwise_edits import EditBuffer
from cwise.cwise_exceptions import CwiseUnsupportedError
from cwise.cwise_names import RoutineNamer, escape_string
from cwise.cwise_types import ArgumentUsage, Usage


# Node fields that never hold child nodes.
_NON_CHILD_FIELDS = frozenset({'type', 'range', 'loc'})


def get_usage(node: nodes.Node, parent: Optional[nodes.Node]) -> Usage:
    """
    Determine how an identifier occurrence uses its binding.

    Args:
        node: The identifier
        parent: Its immediate parent in the syntax tree

    Returns:
        Usage flags for this single occurrence
    """
    if parent is None:
        return Usage.READ

    if parent.type == 'AssignmentExpression' and parent.left is node:
        if parent.operator == '=':
            return Usage.WRITE

        return Usage.WRITE | Usage.READ

    if parent.type == 'UpdateExpression':
        return Usage.WRITE | Usage.READ

    return Usage.READ


@dataclass
class _ArgumentTracker:
    """Mutable accumulator for one parameter's usage."""

    name: str
    is_written: bool = False
    is_read: bool = False
    occurrence_count: int = 0

    def record(self, usage: Usage) -> None:
        if usage & Usage.WRITE:
            self.is_written = True

        if usage & Usage.READ:
            self.is_read = True

        self.occurrence_count += 1

    def freeze(self) -> ArgumentUsage:
        return ArgumentUsage(self.name, self.is_written, self.is_read, self.occurrence_count)


class RoutineRewriter:
    """Walks one anchored routine and records its rewrites and usage."""

    def __init__(
        self,
        anchored: AnchoredFunction,
        namer: RoutineNamer,
        is_global: Callable[[str], bool]
    ):
        """
        Initialize the rewriter.

        Args:
            anchored: Parsed routine
            namer: Synthetic name source for this compilation
            is_global: Predicate deciding whether a free name is an ambient global
        """
        self._logger = logging.getLogger("RoutineRewriter")
        self._anchored = anchored
        self._namer = namer
        self._is_global = is_global
        self._buffer = EditBuffer(anchored.text)
        self._arguments = [
            _ArgumentTracker(namer.argument(i)) for i in range(len(anchored.param_names))
        ]

        # First declaration wins for repeated parameter names
        self._param_index: Dict[str, int] = {}
        for i, name in enumerate(anchored.param_names):
            self._check_name(name, anchored.function.params[i])
            self._param_index.setdefault(name, i)

        self._handlers: Dict[str, Callable[[nodes.Node, Optional[nodes.Node]], None]] = {
            'MemberExpression': self._visit_member,
            'ThisExpression': self._visit_this,
            'Identifier': self._visit_identifier,
            'Literal': self._visit_literal,
            'WithStatement': self._visit_with,
            'Property': self._visit_property,
            'MethodDefinition': self._visit_method,
            'MetaProperty': self._visit_meta_property,
        }

    def rewrite(self) -> str:
        """
        Walk the routine body and return its rewritten text.

        Raises:
            CwiseUnsupportedError: If the body uses a construct that cannot be inlined
            CwiseRangeError: If a node needed for reconstruction lacks a range
            CwiseEditError: If the recorded edits conflict
        """
        self.visit(self._anchored.body, None)

        start, end = self._anchored.body_range
        body = self._buffer.apply(start, end)
        if self._anchored.is_expression_body:
            body = f"{{return {body};}}"

        return body

    def arguments(self) -> List[ArgumentUsage]:
        return [tracker.freeze() for tracker in self._arguments]

    def visit(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        """Dispatch a node to its handler, or walk its children generically."""
        handler = self._handlers.get(node.type)
        if handler is not None:
            handler(node, parent)
            return

        self._visit_children(node)

    def _visit_children(self, node: nodes.Node) -> None:
        for key, value in vars(node).items():
            if key in _NON_CHILD_FIELDS:
                continue

            if isinstance(value, nodes.Node):
                self.visit(value, node)

            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, nodes.Node):
                        self.visit(item, node)

    def _visit_member(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        if node.computed:
            self.visit(node.object, node)
            self.visit(node.property, node)
            return

        if node.object.type == 'ThisExpression':
            self._replace(node, self._namer.this_property(node.property.name))
            return

        # The property name of `a.b` is not a variable reference
        self.visit(node.object, node)

    def _visit_this(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        computed = parent is not None and parent.type == 'MemberExpression'
        self._reject(
            node,
            'computed-this' if computed else 'bare-this',
            'Computed access to this is not allowed' if computed
            else 'this may only be used as this.<property>'
        )

    def _visit_identifier(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        replacement = self._rename(node, parent)
        if replacement is not None:
            self._replace(node, replacement)

    def _rename(self, node: nodes.Node, parent: Optional[nodes.Node]) -> Optional[str]:
        """
        Classify an identifier occurrence and return its synthetic name.

        Returns:
            The replacement name, or None for an ambient global left as written
        """
        name = node.name
        self._check_name(name, node)

        arg_index = self._param_index.get(name)
        if arg_index is not None:
            tracker = self._arguments[arg_index]
            tracker.record(get_usage(node, parent))
            return tracker.name

        if self._is_global(name):
            if self._namer.looks_synthetic(name):
                self._reject(
                    node,
                    'synthetic-name',
                    f'Global {name} collides with the generated naming scheme'
                )

            return None

        return self._namer.local(name)

    def _visit_literal(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        if isinstance(node.value, str):
            self._replace(node, escape_string(node.value))

    def _visit_with(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        self._reject(node, 'with', 'with() statements are not allowed')

    def _visit_property(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        """Object literal and destructuring entries; plain keys are not variables."""
        if node.computed:
            self.visit(node.key, node)
            self.visit(node.value, node)
            return

        if node.shorthand:
            self._visit_shorthand(node)
            return

        if node.key.type == 'Literal':
            self.visit(node.key, node)

        self.visit(node.value, node)

    def _visit_method(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        """Class members; a plain method name is not a variable."""
        if node.computed:
            self.visit(node.key, node)

        self.visit(node.value, node)

    def _visit_meta_property(self, node: nodes.Node, parent: Optional[nodes.Node]) -> None:
        # `new.target` is syntax, not a pair of variable references
        pass

    def _visit_shorthand(self, node: nodes.Node) -> None:
        # `{a}` and `{a = 1}` keep their key by becoming `{a: x}` / `{a: x = 1}`
        value = node.value
        target, target_parent = value, node
        if value.type == 'AssignmentPattern':
            target, target_parent = value.left, value

        if target.type != 'Identifier':
            self.visit(value, node)
            return

        replacement = self._rename(target, target_parent)
        if replacement is not None:
            self._replace(target, f"{node.key.name}: {replacement}")

        if value.type == 'AssignmentPattern':
            self.visit(value.right, value)

    def _check_name(self, name: str, node: nodes.Node) -> None:
        if name == 'eval':
            self._reject(node, 'eval', 'eval() is not allowed')

    def _replace(self, node: nodes.Node, replacement: str) -> None:
        start, end = node_range(node)
        self._buffer.replace(start, end, replacement)

    def _reject(self, node: nodes.Node, construct: str, message: str) -> None:
        node_span = getattr(node, 'range', None)
        self._logger.debug("Rejected routine: %s", message)
        raise CwiseUnsupportedError(
            message,
            {
                'construct': construct,
                'range': list(node_span) if node_span else None,
            }
        )
