"""
Query depth limiting.

The depth of an operation is the number of nested field levels in its
selection tree: root fields are level 1 and leaf fields count, so
``{ users { id } }`` has depth 2.  Fragment spreads and inline fragments
are expanded in place and add no level of their own.  Introspection
fields (``__schema``, ``__type``, ``__typename``) are skipped together
with their sub-selections.

The limit is enforced as a graphql-core validation rule so that a
violation is reported alongside every other structural error, before any
resolver runs.
"""
from __future__ import annotations

from typing import Mapping, Optional

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLError,
    InlineFragmentNode,
    OperationDefinitionNode,
    SelectionSetNode,
    ValidationRule,
)

from usergraph.constants import MAX_QUERY_DEPTH


def selection_depth(
    selection_set: Optional[SelectionSetNode],
    fragments: Mapping[str, FragmentDefinitionNode],
    visited: frozenset = frozenset(),
) -> int:
    """Return the number of field levels below *selection_set*."""
    if selection_set is None:
        return 0

    depth = 0
    for selection in selection_set.selections:
        if isinstance(selection, FieldNode):
            if selection.name.value.startswith("__"):
                continue
            child = 1 + selection_depth(selection.selection_set, fragments, visited)
        elif isinstance(selection, InlineFragmentNode):
            child = selection_depth(selection.selection_set, fragments, visited)
        elif isinstance(selection, FragmentSpreadNode):
            name = selection.name.value
            fragment = fragments.get(name)
            # Unknown fragments and cycles are reported by the standard rules
            if fragment is None or name in visited:
                continue
            child = selection_depth(fragment.selection_set, fragments, visited | {name})
        else:
            continue
        depth = max(depth, child)
    return depth


def operation_label(node: OperationDefinitionNode) -> str:
    return node.name.value if node.name else "anonymous"


def depth_error_message(node: OperationDefinitionNode, max_depth: int) -> str:
    return f"'{operation_label(node)}' exceeds maximum operation depth of {max_depth}"


def _fragments_of(document: DocumentNode) -> dict[str, FragmentDefinitionNode]:
    return {
        d.name.value: d
        for d in document.definitions
        if isinstance(d, FragmentDefinitionNode)
    }


def depth_limit_rule(max_depth: int = MAX_QUERY_DEPTH) -> type[ValidationRule]:
    """Build a validation rule rejecting operations deeper than *max_depth*."""

    class DepthLimitRule(ValidationRule):
        def enter_operation_definition(self, node: OperationDefinitionNode, *_args):
            fragments = _fragments_of(self.context.document)
            if selection_depth(node.selection_set, fragments) > max_depth:
                self.report_error(GraphQLError(depth_error_message(node, max_depth), node))

    DepthLimitRule.__name__ = f"DepthLimitRule{max_depth}"
    return DepthLimitRule


class QueryDepthLimiter:
    """Measures and enforces the nesting depth of GraphQL operations."""

    MAX_DEPTH = MAX_QUERY_DEPTH

    def __init__(self, max_depth: Optional[int] = None) -> None:
        self.max_depth = max_depth or self.MAX_DEPTH
        self.rule = depth_limit_rule(self.max_depth)

    def measure(self, document: DocumentNode) -> dict[str, int]:
        """Depth of every operation in *document*, keyed by operation name."""
        fragments = _fragments_of(document)
        return {
            operation_label(d): selection_depth(d.selection_set, fragments)
            for d in document.definitions
            if isinstance(d, OperationDefinitionNode)
        }

    def check(self, document: DocumentNode) -> list[GraphQLError]:
        """Errors for every operation in *document* that is too deep."""
        fragments = _fragments_of(document)
        return [
            GraphQLError(depth_error_message(d, self.max_depth), d)
            for d in document.definitions
            if isinstance(d, OperationDefinitionNode)
            and selection_depth(d.selection_set, fragments) > self.max_depth
        ]
